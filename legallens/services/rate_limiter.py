"""Sliding-window rate limiter for generative summary calls.

Each caller identity gets a deque of request timestamps.  A request is
allowed when fewer than ``max_requests`` timestamps fall inside the last
``window_seconds``; allowed requests are recorded, rejected ones are not.
Expired timestamps are pruned lazily on the identity's next check, and idle
identities are dropped during the same pass.
"""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable

import structlog

logger = structlog.get_logger(logger_name=__name__)


class SlidingWindowRateLimiter:
    """Per-identity request quota over a sliding time window.

    Parameters
    ----------
    max_requests:
        Allowed requests per identity within the window (default 10).
    window_seconds:
        Window length in seconds (default one hour).
    clock:
        Monotonic time source; injectable so tests can advance time.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window = window_seconds
        self._clock = clock
        self._requests: dict[str, deque[float]] = {}

    def try_acquire(self, identity: str) -> bool:
        """Record a request for *identity* and return ``True`` if it is within quota."""
        now = self._clock()
        window_start = now - self._window
        timestamps = self._requests.setdefault(identity, deque())
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

        if len(timestamps) >= self._max_requests:
            logger.info("rate_limit_exceeded", identity=identity, limit=self._max_requests)
            return False

        timestamps.append(now)
        self._prune_idle(window_start)
        return True

    def remaining(self, identity: str) -> int:
        window_start = self._clock() - self._window
        timestamps = self._requests.get(identity, ())
        used = sum(1 for ts in timestamps if ts > window_start)
        return max(0, self._max_requests - used)

    def _prune_idle(self, window_start: float) -> None:
        idle = [
            identity
            for identity, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for identity in idle:
            del self._requests[identity]
