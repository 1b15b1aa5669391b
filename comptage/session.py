"""
comptage/session.py

The single PostgreSQL session owned by a clientcomptage run.

Responsibilities:
- Connect with the fixed ConnParams, honoring the password prompting policy
- Capture the server version and client encoding once, at connect time
- Execute one statement and hand back CommandOk | QueryResult
- Close the connection at most once, whoever asks first (normal exit, failure
  path or interrupt handler)

psycopg2 exceptions never leave this module: they become
DatabaseConnectionError or ExecutionError.
"""

from __future__ import annotations

import getpass
import logging
from dataclasses import dataclass
from typing import Any, Callable

import psycopg2
import psycopg2.extensions
import psycopg2.extras

from .config import ConnParams, PromptPassword
from .errors import DatabaseConnectionError, ExecutionError
from .results import CommandOk, QueryResult
from .version import ServerVersion

logger = logging.getLogger(__name__)

PASSWORD_PROMPT = "Password: "


def _error_message(exc: BaseException) -> str:
    """Return the server message when there is one, else the driver's."""
    return (getattr(exc, "pgerror", None) or str(exc)).strip()


def _needs_password(exc: BaseException) -> bool:
    """True when the server asked for a password and none was supplied."""
    return "no password supplied" in str(exc)


def _raw_text(value, cursor):
    return value


# Every OID psycopg2 knows a caster for; unknown OIDs already come back as str.
RAW_TEXT = psycopg2.extensions.new_type(
    tuple(psycopg2.extensions.string_types), "COMPTAGE_RAW", _raw_text
)


def _register_raw_text(cursor) -> None:
    """
    Make `cursor` return every column as the server's text, unconverted.

    psycopg2 picks each column's caster while execute() runs, so this must be
    called before execute().
    """
    psycopg2.extensions.register_type(RAW_TEXT, cursor)


@dataclass
class Session:
    """
    Live database session.

    Attributes:
        conn: DB-API connection, None once closed.
        version: Server version captured at connect time.
        encoding: Client encoding negotiated with the server (e.g. "UTF8").
    """
    conn: Any
    version: ServerVersion
    encoding: str

    @classmethod
    def open(
        cls,
        params: ConnParams,
        connect: Callable[..., Any] = psycopg2.connect,
        prompt: Callable[[str], str] = getpass.getpass,
    ) -> "Session":
        """
        Connect to the server.

        Args:
            params: Connection parameters.
            connect: DB-API connect function (psycopg2.connect by default).
            prompt: Password reader (getpass.getpass by default).

        Returns:
            Session in autocommit mode.

        Raises:
            DatabaseConnectionError: if the server cannot be reached or
                refuses the connection.
        """
        kwargs: dict[str, str] = params.dsn_kwargs()
        if params.prompt_password is PromptPassword.YES:
            kwargs["password"] = prompt(PASSWORD_PROMPT)

        # libpq waits in select() instead of blocking in C, so SIGINT is
        # handled while a connect or statement is in flight
        psycopg2.extensions.set_wait_callback(psycopg2.extras.wait_select)

        logger.debug(
            "connecting to host=%s port=%s dbname=%s user=%s",
            params.host, params.port, params.dbname, params.user,
        )
        while True:
            try:
                conn = connect(**kwargs)
                break
            except psycopg2.Error as e:
                if (
                    "password" not in kwargs
                    and params.prompt_password is not PromptPassword.NO
                    and _needs_password(e)
                ):
                    kwargs["password"] = prompt(PASSWORD_PROMPT)
                    continue
                raise DatabaseConnectionError(_error_message(e)) from e

        # one statement per run, committed as soon as it succeeds
        conn.autocommit = True
        version = ServerVersion.from_number(conn.server_version)
        logger.debug("connected to server %s, client encoding %s", version, conn.encoding)
        return cls(conn=conn, version=version, encoding=conn.encoding)

    @property
    def closed(self) -> bool:
        return self.conn is None

    def execute(self, sql: str) -> CommandOk | QueryResult:
        """
        Execute a single statement.

        Args:
            sql: Statement text, without trailing semicolon.

        Returns:
            CommandOk when the statement has no row description, else a
            QueryResult holding every row.

        Raises:
            ExecutionError: on any server or transport failure, or when the
                session is already closed.
        """
        if self.conn is None:
            raise ExecutionError("connection is closed", sql)

        logger.debug("sending: %s", sql)
        try:
            with self.conn.cursor() as cur:
                _register_raw_text(cur)
                cur.execute(sql)
                if cur.description is None:
                    return CommandOk(
                        rows_affected=max(cur.rowcount, 0),
                        message=cur.statusmessage or "OK",
                    )
                columns = [d[0] for d in cur.description]
                type_codes = [d[1] for d in cur.description]
                rows = [list(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            raise ExecutionError(_error_message(e), sql) from e

        return QueryResult(columns=columns, rows=rows, type_codes=type_codes)

    def close(self) -> None:
        """Close the connection. Later calls do nothing."""
        conn, self.conn = self.conn, None
        if conn is not None:
            logger.debug("closing connection")
            conn.close()
