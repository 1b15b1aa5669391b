"""
comptage/actions.py

The closed set of things one run of clientcomptage can do.

A run selects exactly one Action. Reporting actions are backed by a fixed
ReportSpec (label + parameterless query); the append action is backed by a
fixed INSERT template.

Design notes:
- Report queries never contain user input.
- The append payload is substituted verbatim into the INSERT template. It is
  NOT escaped or validated: the person running the tool is trusted to type a
  well-formed value list (e.g. "'2024-01-01 08:00','2024-01-01 12:00'").
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Action(Enum):
    """Operation selected for a run."""
    NONE = auto()
    APPEND = auto()
    DAILY = auto()
    MONTHLY = auto()
    WEEKLY = auto()


@dataclass(frozen=True)
class ReportSpec:
    """
    A fixed report.

    Attributes:
        label: Table title in Direct mode, echoed label in Script mode.
        query: Parameterless SELECT text (no trailing semicolon).
    """
    label: str
    query: str


APPEND_TEMPLATE = "INSERT INTO public.comptage (deb,fin) VALUES ({values})"

REPORTS: dict[Action, ReportSpec] = {
    Action.DAILY: ReportSpec("Jours", "SELECT * FROM public.jours_v"),
    Action.MONTHLY: ReportSpec("Mois", "SELECT * FROM public.mois"),
    Action.WEEKLY: ReportSpec("Semaines", "SELECT * FROM public.semaines"),
}


def build_append_statement(values: str) -> str:
    """
    Build the INSERT statement for the append action.

    Args:
        values: Raw column-value list text, used as-is.

    Returns:
        The statement text, without a trailing semicolon.
    """
    # str.format does not re-scan the substituted text, so braces in values are kept
    return APPEND_TEMPLATE.format(values=values)
