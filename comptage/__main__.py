"""
comptage/__main__.py

Package entry point for running clientcomptage as a module:

    python -m comptage -j

This also serves as the target for the console script entry point defined in
pyproject.toml:

    clientcomptage -j
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
