from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class RateLimit:
    """``burst`` tokens available at once, refilled at one token per ``period`` seconds."""

    burst: int
    period: float

    @property
    def rate(self) -> float:
        return 1.0 / self.period


# Burst is half of what Twitch allows, to stay clear of the server-side limit.
RLIM_JOIN_DEFAULT = RateLimit(burst=10, period=10 / 20)
RLIM_JOIN_VERIFIED = RateLimit(burst=1000, period=10 / 2000)
RLIM_MSG_DEFAULT = RateLimit(burst=10, period=30 / 20)
RLIM_MSG_MOD = RateLimit(burst=50, period=30 / 100)
RLIM_GLOBAL_DEFAULT = RateLimit(burst=3750, period=30 / 7500)
RLIM_WHISPER_DEFAULT = RateLimit(burst=2, period=60 / 100)


class RateLimiter:
    """Lazy token bucket gating outbound commands.

    Tokens are only accounted for when a caller asks for one. A caller that
    drives the bucket negative sleeps off its own deficit; the lock is never
    held while sleeping, so concurrent callers queue up their deficits in
    the order they entered.
    """

    def __init__(self, limit: RateLimit, *, clock: Callable[[], float] = time.monotonic) -> None:
        if limit.burst < 1 or limit.period <= 0:
            raise ValueError(f"Invalid rate limit {limit!r}")
        self.limit = limit
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens = float(limit.burst)
        self._last = clock()

    @property
    def tokens(self) -> float:
        with self._lock:
            return self._tokens

    def reserve(self) -> float:
        """Take one token and return how long the caller has to wait for it."""
        with self._lock:
            now = self._clock()
            elapsed = now - self._last
            self._last = now
            self._tokens = min(float(self.limit.burst), self._tokens + elapsed * self.limit.rate)
            self._tokens -= 1
            if self._tokens >= 0:
                return 0.0
            return -self._tokens / self.limit.rate

    async def wait(self) -> None:
        delay = self.reserve()
        if delay > 0:
            await asyncio.sleep(delay)


__all__ = [
    "RateLimit",
    "RateLimiter",
    "RLIM_JOIN_DEFAULT",
    "RLIM_JOIN_VERIFIED",
    "RLIM_MSG_DEFAULT",
    "RLIM_MSG_MOD",
    "RLIM_GLOBAL_DEFAULT",
    "RLIM_WHISPER_DEFAULT",
]
