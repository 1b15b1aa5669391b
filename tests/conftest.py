import logging
from datetime import timedelta

import pytest

from comptage import session as session_mod
from comptage.log import LOGGER_NAME
from comptage.session import Session
from comptage.version import ServerVersion

INTERVAL_OID = 1186


def _interval(text):
    # what psycopg2's default INTERVAL caster hands back for "HH:MM:SS"
    hours, minutes, seconds = (int(p) for p in text.split(":"))
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


class FakeCursor:
    """
    Minimal DB-API cursor driven by FakeConnection.replies.

    Like psycopg2, the casters in effect are fixed when execute() runs:
    interval columns come back as timedelta unless a raw text caster was
    registered on the cursor beforehand.
    """

    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self.rowcount = -1
        self.statusmessage = None
        self.casters = []
        self._raw = False
        self._rows = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def close(self):
        self.closed = True
        self.conn.cursors_closed += 1

    def execute(self, sql):
        self.conn.executed.append(sql)
        self._raw = session_mod.RAW_TEXT in self.casters
        if self.conn.error is not None:
            raise self.conn.error
        reply = self.conn.replies.get(sql)
        if reply is None:
            self.rowcount = 1
            self.statusmessage = "INSERT 0 1"
            return
        columns, rows = reply
        self.description = [(name, oid, None, None, None, None, None) for name, oid in columns]
        self._rows = [tuple(r) for r in rows]
        self.rowcount = len(rows)
        self.statusmessage = f"SELECT {len(rows)}"

    def fetchall(self):
        if self._raw:
            return list(self._rows)
        oids = [d[1] for d in self.description]
        return [
            tuple(_interval(v) if oid == INTERVAL_OID and v is not None else v for v, oid in zip(r, oids))
            for r in self._rows
        ]


class FakeConnection:
    """
    Stand-in for a psycopg2 connection.

    replies maps SQL text to ([(column, type_oid), ...], rows) with rows in
    the server's text form. Statements not in replies behave like an INSERT.
    Setting `error` makes every execute fail.
    """

    def __init__(self, replies=None, error=None, server_version=140002, encoding="UTF8"):
        self.replies = replies or {}
        self.error = error
        self.server_version = server_version
        self.encoding = encoding
        self.autocommit = False
        self.executed = []
        self.close_calls = 0
        self.cursors_closed = 0

    @property
    def closed(self):
        return self.close_calls > 0

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.close_calls += 1


@pytest.fixture(autouse=True)
def fake_register_type(monkeypatch):
    # psycopg2 only accepts its own cursors; record the caster on the fake instead
    def register_type(caster, scope):
        scope.casters.append(caster)
    monkeypatch.setattr(session_mod.psycopg2.extensions, "register_type", register_type)


@pytest.fixture(autouse=True)
def wait_callbacks(monkeypatch):
    installed = []
    monkeypatch.setattr(session_mod.psycopg2.extensions, "set_wait_callback", installed.append)
    return installed


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_session():
    def _make(**kwargs):
        conn = FakeConnection(**kwargs)
        return Session(conn=conn, version=ServerVersion.from_number(conn.server_version), encoding=conn.encoding), conn
    return _make
