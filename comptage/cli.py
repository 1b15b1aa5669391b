"""
comptage/cli.py

Command-line entry point for clientcomptage.

Usage:
    clientcomptage -a "'2024-01-01 08:00','2024-01-01 12:00'"
    clientcomptage -j | -m | -s
    clientcomptage -m --script            # print the SQL instead of running it
    clientcomptage -m --script rapport.sql

Flow:
- --help / --version are handled before anything else and exit 0.
- The remaining flags are parsed into an Options object.
- Direct mode opens the session and registers it with the interrupt guard;
  Script mode never connects.
- The dispatcher runs exactly one action. Every ComptageError becomes exit
  status 1, except the missing-action case which only logs.
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

import psycopg2

from .actions import Action
from .config import PROGNAME, STDOUT_PATH, VERSION, ConnParams, Options, OutputMode
from .dispatch import dispatch
from .errors import DatabaseConnectionError, ExecutionError, NoActionError, UsageError
from .executor import Executor
from .log import setup_logging
from .session import Session
from .signals import InterruptGuard
from .version import ServerVersion

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

HELP = """\
{progname} fait le décompte des heures :)

Usage:
  {progname} [OPTIONS]

General options:
  -a VALEURS        ajout d'heures réalisées
  -j|--jour         décompte par jour
  -m|--mois         décompte par mois
  -s|--semaines     décompte par semaine
  --script [FICHIER] écrit le SQL au lieu de l'exécuter (stdout par défaut)
  -v                verbose
  -?|--help         show this help, then exit
  -V|--version      output version information, then exit

Report bugs to <guillaume@lelarge.info>."""


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of printing and exiting."""

    def error(self, message: str):
        raise UsageError(message)


class _AppendAction(argparse.Action):
    """-a VALEURS selects the append action and keeps the raw value list."""

    def __call__(self, parser, namespace, values, option_string=None):
        namespace.action = Action.APPEND
        namespace.heures = values


def get_progname(argv0: str | None) -> str:
    """Program name for messages: basename of argv[0] without extension."""
    if not argv0:
        return PROGNAME
    name = Path(argv0).stem
    return PROGNAME if name in ("__main__", "") else name


def help_text(progname: str) -> str:
    return HELP.format(progname=progname)


def version_text() -> str:
    libpq = ServerVersion.from_number(psycopg2.__libpq_version__)
    return f"{PROGNAME} {VERSION} (libpq {libpq})"


def build_parser(progname: str) -> argparse.ArgumentParser:
    """
    Build the option parser.

    When several action flags are given, the last one wins.
    """
    parser = _Parser(prog=progname, add_help=False)
    parser.add_argument("-a", dest="heures", metavar="VALEURS", action=_AppendAction)
    parser.add_argument("-j", "--jour", dest="action", action="store_const", const=Action.DAILY)
    parser.add_argument("-m", "--mois", dest="action", action="store_const", const=Action.MONTHLY)
    parser.add_argument("-s", "--semaines", dest="action", action="store_const", const=Action.WEEKLY)
    parser.add_argument("-v", dest="verbose", action="store_true")
    parser.add_argument("--script", nargs="?", const=STDOUT_PATH, default=None, metavar="FICHIER")
    parser.set_defaults(action=Action.NONE)
    return parser


def parse_options(args: list[str], progname: str = PROGNAME) -> Options:
    """
    Parse command-line arguments (without argv[0]).

    Raises:
        UsageError: on unknown flags, missing values or stray arguments.
    """
    ns = build_parser(progname).parse_args(args)
    return Options(action=ns.action, heures=ns.heures, script=ns.script, verbose=ns.verbose)


@contextmanager
def script_sink(path: str | None) -> Iterator[TextIO]:
    """Yield stdout, or the script file opened for writing when a path is given."""
    if path is None or path == STDOUT_PATH:
        yield sys.stdout
        return
    with open(path, "w", encoding="utf-8") as f:
        yield f


def run(argv: list[str], guard: InterruptGuard) -> int:
    """
    Run one invocation.

    Args:
        argv: Full argument vector, argv[0] included.
        guard: Installed interrupt guard; receives the session once open.

    Returns:
        Exit status.
    """
    progname = get_progname(argv[0] if argv else None)
    setup_logging(progname)

    if len(argv) > 1:
        if argv[1] in ("--help", "-?"):
            print(help_text(progname))
            return EXIT_SUCCESS
        if argv[1] in ("--version", "-V"):
            print(version_text())
            return EXIT_SUCCESS

    try:
        options = parse_options(argv[1:], progname)
    except UsageError as e:
        logger.error("%s", e)
        logger.error('Try "%s --help" for more information.', progname)
        return EXIT_FAILURE
    except MemoryError:
        logger.critical("out of memory")
        return EXIT_FAILURE

    setup_logging(progname, options.verbose)
    logger.debug("action %s, %s mode", options.action.name, options.output_mode.name)

    session: Session | None = None
    try:
        if options.output_mode is OutputMode.DIRECT:
            session = Session.open(ConnParams(application_name=progname))
            guard.register(session)
        with script_sink(options.script) as out:
            dispatch(options, Executor(options=options, session=session, out=out))
    except NoActionError as e:
        logger.error("%s", e)
    except DatabaseConnectionError as e:
        logger.error("connection to database failed: %s", e.message)
        return EXIT_FAILURE
    except ExecutionError:
        # already reported by the executor
        return EXIT_FAILURE
    except UsageError as e:
        logger.error("%s", e)
        return EXIT_FAILURE
    except OSError as e:
        if options.output_mode is OutputMode.SCRIPT:
            logger.error("could not write script: %s", e)
        else:
            logger.error("could not write output: %s", e)
        return EXIT_FAILURE
    finally:
        if session is not None:
            session.close()

    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    """
    CLI entrypoint.

    Args:
        argv: sys.argv-like list; defaults to sys.argv.

    Returns:
        Exit code.
    """
    guard = InterruptGuard()
    guard.install()
    try:
        return run(sys.argv if argv is None else argv, guard)
    finally:
        guard.uninstall()


if __name__ == "__main__":
    raise SystemExit(main())
