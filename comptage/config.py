"""
comptage/config.py

Run configuration for clientcomptage.

Two immutable objects describe a run:
- ConnParams: where to connect. The values are fixed defaults for this tool;
  libpq environment variables (PGPASSWORD, PGSSLMODE, ...) still apply
  through the driver.
- Options: what the command line asked for (action, append payload, script
  output, verbosity). OutputMode is derived from it.

Both are built once at startup and passed explicitly to the session,
executor and dispatcher instead of living in module globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .actions import Action

PROGNAME = "clientcomptage"
VERSION = "0.0.1"

DEFAULT_HOST = "localhost"
DEFAULT_PORT = "5414"
DEFAULT_DBNAME = "dalibo"
DEFAULT_USER = "postgres"

# "-" as script path means standard output
STDOUT_PATH = "-"


class OutputMode(Enum):
    """Whether statements run against the server or are printed as SQL."""
    DIRECT = auto()
    SCRIPT = auto()


class PromptPassword(Enum):
    """
    Password prompting policy.

    DEFAULT prompts only when the server requires a password that was not
    supplied, YES always prompts before connecting, NO never prompts.
    """
    DEFAULT = auto()
    NO = auto()
    YES = auto()


@dataclass(frozen=True)
class ConnParams:
    """
    Connection parameters.

    Attributes:
        host: Server host name or socket directory.
        port: Server port, as text (libpq style).
        dbname: Database name.
        user: Role name.
        prompt_password: Password prompting policy.
        application_name: Reported to the server as fallback_application_name.
    """
    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT
    dbname: str = DEFAULT_DBNAME
    user: str = DEFAULT_USER
    prompt_password: PromptPassword = PromptPassword.DEFAULT
    application_name: str = PROGNAME

    def dsn_kwargs(self) -> dict[str, str]:
        """Keyword arguments for psycopg2.connect(), without password."""
        return {
            "host": self.host,
            "port": self.port,
            "dbname": self.dbname,
            "user": self.user,
            "fallback_application_name": self.application_name,
        }


@dataclass(frozen=True)
class Options:
    """
    Parsed command line.

    Attributes:
        action: Selected action.
        heures: Append payload (raw value list), only set for Action.APPEND.
        script: Script output path ("-" for stdout), or None for Direct mode.
        verbose: Lower the log threshold to DEBUG.
    """
    action: Action = Action.NONE
    heures: str | None = None
    script: str | None = None
    verbose: bool = False

    @property
    def output_mode(self) -> OutputMode:
        return OutputMode.SCRIPT if self.script is not None else OutputMode.DIRECT
