"""
comptage

Time-entry and totals reporting client for the "comptage" PostgreSQL schema.

Public API:
    Session.open(params) -> Session
    Executor(options, session, out).execute(sql) / .fetch_table(spec)
    dispatch(options, executor)
"""

from .actions import REPORTS, Action, ReportSpec, build_append_statement
from .config import ConnParams, Options, OutputMode, PromptPassword
from .dispatch import dispatch
from .errors import (
    ComptageError,
    DatabaseConnectionError,
    ExecutionError,
    NoActionError,
    UsageError,
)
from .executor import Executor
from .results import CommandOk, QueryResult
from .session import Session
from .version import ServerVersion

__all__ = [
    "REPORTS",
    "Action",
    "ReportSpec",
    "build_append_statement",
    "ConnParams",
    "Options",
    "OutputMode",
    "PromptPassword",
    "dispatch",
    "ComptageError",
    "DatabaseConnectionError",
    "ExecutionError",
    "NoActionError",
    "UsageError",
    "Executor",
    "CommandOk",
    "QueryResult",
    "Session",
    "ServerVersion",
]
