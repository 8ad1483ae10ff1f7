"""Shutdown signalling shared by the session tasks."""

from __future__ import annotations

import asyncio
import threading
from typing import Optional

from .exceptions import DisconnectCalled, LoginFailure

# Errors that record what the user (or Twitch) meant to happen. They win over
# whatever was recorded first, e.g. a read error racing a disconnect().
INTENTIONAL_ERRORS = (DisconnectCalled, LoginFailure)


class Notifier:
    """One-shot broadcast: ``notify()`` wakes every waiter exactly once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._event = asyncio.Event()
        self._fired = False

    def reset(self) -> None:
        with self._lock:
            self._event = asyncio.Event()
            self._fired = False

    def notify(self) -> bool:
        """Fire the signal. Returns ``False`` when it had already fired."""
        with self._lock:
            if self._fired:
                return False
            self._fired = True
            event = self._event
        event.set()
        return True

    def is_set(self) -> bool:
        with self._lock:
            return self._fired

    async def wait(self) -> None:
        with self._lock:
            event = self._event
        await event.wait()


class ErrorRecorder:
    """Keeps the first error of a session, letting intentional errors override it."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None

    def update(self, error: Optional[BaseException]) -> None:
        if error is None:
            return
        with self._lock:
            if self._error is None:
                self._error = error
            elif not isinstance(self._error, INTENTIONAL_ERRORS) and isinstance(error, INTENTIONAL_ERRORS):
                self._error = error

    @property
    def err(self) -> Optional[BaseException]:
        with self._lock:
            return self._error

    def reset(self) -> None:
        with self._lock:
            self._error = None


__all__ = ["Notifier", "ErrorRecorder", "INTENTIONAL_ERRORS"]
