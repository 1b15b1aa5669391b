"""
comptage/version.py

Server version capture and comparison.

The version is read once from the live session and only compared afterwards.
It is the single place where query text may be gated on server features.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class ServerVersion:
    """
    Major/minor version of the connected PostgreSQL server.

    Attributes:
        major: e.g. 14 for 14.2, 9 for 9.6.5.
        minor: e.g. 2 for 14.2, 6 for 9.6.5.
    """
    major: int
    minor: int

    @classmethod
    def from_number(cls, number: int) -> "ServerVersion":
        """
        Decode libpq's integer server version.

        Since PostgreSQL 10 the number is major * 10000 + minor (140002 is
        14.2). Before that it was major * 10000 + minor * 100 + patch, with a
        two-part major (90605 is 9.6.5, reported here as 9.6).

        Args:
            number: Value of PQserverVersion / connection.server_version.

        Returns:
            ServerVersion instance.
        """
        if number >= 100000:
            return cls(number // 10000, number % 10000)
        return cls(number // 10000, number // 100 % 100)

    def is_at_least(self, major: int, minor: int) -> bool:
        """Return True if this version is (major, minor) or newer."""
        return self.major > major or (self.major == major and self.minor >= minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"
