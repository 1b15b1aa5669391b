"""
comptage/log.py

Logging setup for clientcomptage.

Messages go to standard error in the shape PostgreSQL client tools use:

    clientcomptage: error: query failed: ERROR:  relation "public.mois" does not exist
    clientcomptage: query was: SELECT * FROM public.mois
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "comptage"

_LEVEL_PREFIX = {
    logging.CRITICAL: "fatal: ",
    logging.ERROR: "error: ",
    logging.WARNING: "warning: ",
    logging.INFO: "",
    logging.DEBUG: "debug: ",
}


class ClientFormatter(logging.Formatter):
    """Prefix every record with the program name and a lowercase level tag."""

    def __init__(self, progname: str):
        super().__init__()
        self.progname = progname

    def format(self, record: logging.LogRecord) -> str:
        prefix = _LEVEL_PREFIX.get(record.levelno, f"{record.levelname.lower()}: ")
        text = f"{self.progname}: {prefix}{record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def setup_logging(progname: str, verbose: bool = False) -> logging.Logger:
    """
    Configure the package logger. Safe to call more than once.

    Args:
        progname: Name shown in front of every message.
        verbose: DEBUG threshold instead of INFO.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        if getattr(h, "_comptage", False):
            logger.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ClientFormatter(progname))
    handler._comptage = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
