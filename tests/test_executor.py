import io
import logging

import psycopg2
import pytest

from comptage.actions import REPORTS, Action
from comptage.config import Options
from comptage.errors import ExecutionError
from comptage.executor import Executor
from comptage.results import CommandOk, QueryResult

SCRIPT = Options(script="-")
DIRECT = Options()

MOIS = REPORTS[Action.MONTHLY]


def test_script_execute_writes_statement_only():
    out = io.StringIO()
    ex = Executor(options=SCRIPT, session=None, out=out)

    assert ex.execute("INSERT INTO public.comptage (deb,fin) VALUES (1,2)") is None
    assert out.getvalue() == "INSERT INTO public.comptage (deb,fin) VALUES (1,2);\n"


def test_script_execute_never_touches_session(make_session):
    session, conn = make_session()
    ex = Executor(options=SCRIPT, session=session, out=io.StringIO())

    ex.execute("SELECT broken")
    ex.fetch_table(MOIS)

    assert conn.executed == []
    assert not conn.closed


def test_script_fetch_table_writes_two_lines():
    out = io.StringIO()
    ex = Executor(options=SCRIPT, out=out)

    assert ex.fetch_table(MOIS) is None
    assert out.getvalue() == "\\echo Mois\nSELECT * FROM public.mois;\n"


def test_direct_execute_returns_command_tag(make_session):
    session, conn = make_session()
    ex = Executor(options=DIRECT, session=session, out=io.StringIO())

    res = ex.execute("INSERT INTO public.comptage (deb,fin) VALUES (1,2)")

    assert res == CommandOk(rows_affected=1, message="INSERT 0 1")
    assert conn.executed == ["INSERT INTO public.comptage (deb,fin) VALUES (1,2)"]
    assert conn.cursors_closed == 1
    assert not conn.closed


def test_direct_fetch_table_prints_titled_table(make_session):
    session, conn = make_session(
        replies={MOIS.query: ([("mois", 25), ("heures", 1700)], [("2024-01", "151.5")])}
    )
    out = io.StringIO()
    ex = Executor(options=DIRECT, session=session, out=out)

    res = ex.fetch_table(MOIS)

    assert isinstance(res, QueryResult)
    assert res.rows == [["2024-01", "151.5"]]
    lines = out.getvalue().split("\n")
    assert lines[0].strip() == "Mois"
    assert lines[2] == "│  mois   │ heures │"
    assert lines[4] == "│ 2024-01 │  151.5 │"
    assert conn.cursors_closed == 1


def test_direct_fetch_table_with_no_rows(make_session):
    session, _ = make_session(replies={MOIS.query: ([("mois", 25), ("heures", 1700)], [])})
    out = io.StringIO()

    res = Executor(options=DIRECT, session=session, out=out).fetch_table(MOIS)

    assert res.rows == []
    lines = out.getvalue().split("\n")
    assert lines[2] == "│ mois │ heures │"
    assert lines[4].startswith("└")


def test_direct_failure_closes_and_reports(make_session, caplog):
    err = psycopg2.ProgrammingError('relation "public.mois" does not exist')
    session, conn = make_session(error=err)
    out = io.StringIO()
    caplog.set_level(logging.INFO, logger="comptage")

    with pytest.raises(ExecutionError) as exc_info:
        Executor(options=DIRECT, session=session, out=out).fetch_table(MOIS)

    assert exc_info.value.statement == MOIS.query
    assert conn.close_calls == 1
    assert session.closed
    assert conn.cursors_closed == 1
    assert out.getvalue() == ""
    messages = [r.getMessage() for r in caplog.records]
    assert 'query failed: relation "public.mois" does not exist' in messages
    assert "query was: SELECT * FROM public.mois" in messages


def test_direct_execute_failure_closes_once(make_session):
    session, conn = make_session(error=psycopg2.OperationalError("server closed the connection"))
    ex = Executor(options=DIRECT, session=session)

    with pytest.raises(ExecutionError):
        ex.execute("INSERT INTO public.comptage (deb,fin) VALUES (x)")
    session.close()

    assert conn.close_calls == 1


def test_direct_without_session_fails():
    with pytest.raises(ExecutionError):
        Executor(options=DIRECT, session=None).fetch_table(MOIS)


def test_direct_interval_printed_as_server_text(make_session):
    jours = REPORTS[Action.DAILY]
    session, _ = make_session(
        replies={jours.query: ([("jour", 1082), ("total", 1186)], [("2024-01-01", "37:30:00")])}
    )
    out = io.StringIO()

    Executor(options=DIRECT, session=session, out=out).fetch_table(jours)

    assert "│ 2024-01-01 │ 37:30:00 │" in out.getvalue().split("\n")
    assert "day" not in out.getvalue()
