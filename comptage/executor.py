"""
comptage/executor.py

Dual-mode execution of the statement or report selected for a run.

Responsibilities:
- Script mode: write the SQL text (and a \\echo label line for reports) to the
  script sink. Nothing is sent to a server.
- Direct mode: send the SQL to the live Session. Reports are rendered as an
  aligned table on the output stream.
- Failure policy (Direct mode): log the server message and the statement,
  close the session, re-raise. There is no retry; the CLI turns the error
  into a non-zero exit status.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TextIO

from .actions import ReportSpec
from .config import Options, OutputMode
from .errors import ExecutionError
from .printer import PrintOptions, format_table
from .results import CommandOk, QueryResult
from .session import Session

logger = logging.getLogger(__name__)


@dataclass
class Executor:
    """
    Runs statements and reports in the run's OutputMode.

    Args:
        options: Parsed command line (decides the OutputMode).
        session: Live session, required in Direct mode only.
        out: Table output in Direct mode, script sink in Script mode.
    """
    options: Options
    session: Session | None = None
    out: TextIO = field(default_factory=lambda: sys.stdout)

    @property
    def scripting(self) -> bool:
        return self.options.output_mode is OutputMode.SCRIPT

    # --------------------------
    # public entry points
    # --------------------------

    def execute(self, statement: str) -> CommandOk | None:
        """
        Run a statement that returns no rows.

        Args:
            statement: SQL text without trailing semicolon.

        Returns:
            CommandOk in Direct mode, None in Script mode.

        Raises:
            ExecutionError: Direct mode only, after the session was closed.
        """
        if self.scripting:
            self.out.write(f"{statement};\n")
            return None

        res = self._run(statement)
        if isinstance(res, QueryResult):
            # the server accepted the statement; rows it returned are ignored
            return CommandOk(rows_affected=len(res.rows))
        logger.debug("server replied %s", res.message)
        return res

    def fetch_table(self, spec: ReportSpec) -> QueryResult | None:
        """
        Run a report and print it.

        Script mode writes two lines, "\\echo <label>" then "<query>;".
        Direct mode runs the query and prints the result as a table titled
        with the report label; an empty result still prints title, header
        and borders.

        Args:
            spec: Fixed report (label + query).

        Returns:
            The QueryResult in Direct mode, None in Script mode.

        Raises:
            ExecutionError: Direct mode only, after the session was closed.
        """
        if self.scripting:
            self.out.write(f"\\echo {spec.label}\n")
            self.out.write(f"{spec.query};\n")
            return None

        res = self._run(spec.query)
        if isinstance(res, CommandOk):
            res = QueryResult(columns=[], rows=[], type_codes=[])

        opts = PrintOptions(title=spec.label, encoding=self.session.encoding)
        self.out.write(format_table(res, opts))
        return res

    # --------------------------
    # helpers
    # --------------------------

    def _run(self, sql: str) -> CommandOk | QueryResult:
        """Execute on the session, applying the failure policy."""
        if self.session is None:
            raise ExecutionError("no connection to the server", sql)
        try:
            return self.session.execute(sql)
        except ExecutionError as e:
            logger.error("query failed: %s", e.message)
            logger.info("query was: %s", e.statement)
            self.session.close()
            raise
