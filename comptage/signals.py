"""
comptage/signals.py

Interrupt handling: Ctrl+C closes the live connection and exits with status 1.

The handler can run between any two bytecode instructions, so it does nothing
but close the registered session (at most once) and exit. It never sends
anything to the server.
"""

from __future__ import annotations

import signal
import sys

from .session import Session

EXIT_INTERRUPTED = 1


class InterruptGuard:
    """
    SIGINT handler owning the teardown of the run's session.

    Usage:
        guard = InterruptGuard()
        guard.install()
        guard.register(session)
        ...
        guard.uninstall()
    """

    def __init__(self):
        self.session: Session | None = None
        self._previous = None

    def install(self) -> None:
        """Route SIGINT to this guard, remembering the previous handler."""
        self._previous = signal.signal(signal.SIGINT, self.handle)

    def uninstall(self) -> None:
        """Restore the handler that was active before install()."""
        if self._previous is not None:
            signal.signal(signal.SIGINT, self._previous)
            self._previous = None

    def register(self, session: Session) -> None:
        """Hand the live session over for teardown on interrupt."""
        self.session = session

    def handle(self, signum, frame) -> None:
        session, self.session = self.session, None
        if session is not None:
            session.close()
        sys.exit(EXIT_INTERRUPTED)
