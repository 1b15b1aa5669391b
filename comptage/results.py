"""
comptage/results.py

Result objects returned by Session.execute().

The session returns one of:
- CommandOk: for statements that do not return rows (the append INSERT)
- QueryResult: for statements that return a row description (the reports)

Row values are kept as the server's text representation so that the printer
shows exactly what the server sent (dates, intervals and numerics are not
reformatted by Python).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandOk:
    """
    Represents successful execution of a statement without a result set.

    Attributes:
        rows_affected: Number of rows affected, 0 when unknown.
        message: Server command tag, e.g. "INSERT 0 1".
    """
    rows_affected: int = 0
    message: str = "OK"


@dataclass(frozen=True)
class QueryResult:
    """
    Represents the output of a row-returning query.

    Attributes:
        columns: Output column names in order.
        rows: A list of rows; each row is a list of text values (None for NULL)
              aligned with `columns`.
        type_codes: PostgreSQL type OID of each column, used for alignment.
    """
    columns: list[str]
    rows: list[list[str | None]]
    type_codes: list[int]
