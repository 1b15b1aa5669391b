"""
comptage/errors.py

Centralized exception types for clientcomptage.

This module defines:
- A common base exception for every failure the tool reports
- One specialized error type per failure family (usage, connection,
  execution, missing action)

Driver exceptions are translated into these types inside the session layer,
so callers never need to import psycopg2 to handle errors.
"""

from __future__ import annotations


class ComptageError(Exception):
    """
    Base class for all clientcomptage errors.

    Catching this exception allows the CLI to turn every known failure into a
    non-zero exit status without swallowing unrelated system exceptions.
    """


class UsageError(ComptageError):
    """
    Raised when the command line is malformed (unknown flag, missing value).

    No connection is ever attempted once this is raised.
    """


class DatabaseConnectionError(ComptageError):
    """
    Raised when the database session cannot be established.

    Args:
        message: Server or driver message, stripped of trailing newlines.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ExecutionError(ComptageError):
    """
    Raised when a statement or query fails at the server or transport level.

    Args:
        message: Server or driver message, stripped of trailing newlines.
        statement: The SQL text that was sent.
    """

    def __init__(self, message: str, statement: str):
        self.message = message
        self.statement = statement
        super().__init__(self.__str__())

    def __str__(self) -> str:
        return f"query failed: {self.message}"


class NoActionError(ComptageError):
    """
    Raised when no action flag was given on the command line.

    This is a usage-shape condition, not a runtime fault: the CLI logs it and
    still exits with status 0.
    """

    def __init__(self, message: str = "No action defined"):
        super().__init__(message)
