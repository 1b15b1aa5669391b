"""
comptage/dispatch.py

Maps the selected Action to exactly one executor call.
"""

from __future__ import annotations

from .actions import REPORTS, Action, build_append_statement
from .config import Options
from .errors import NoActionError, UsageError
from .executor import Executor


def dispatch(options: Options, executor: Executor) -> None:
    """
    Run the action selected on the command line.

    Args:
        options: Parsed command line.
        executor: Executor bound to the run's OutputMode and session.

    Raises:
        NoActionError: when no action was selected (the CLI logs it and exits 0).
        UsageError: when the append action has no payload.
        ExecutionError: propagated from the executor.
    """
    action = options.action

    if action is Action.APPEND:
        if options.heures is None:
            raise UsageError("option -a requires a value list")
        executor.execute(build_append_statement(options.heures))
        return
    if action in (Action.DAILY, Action.MONTHLY, Action.WEEKLY):
        executor.fetch_table(REPORTS[action])
        return
    if action is Action.NONE:
        raise NoActionError()

    raise ValueError(f"Unsupported action: {action!r}")
