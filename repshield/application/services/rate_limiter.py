"""Per-client sliding-window request limiter for the public scan endpoints.

Process-local: counts reset on restart.
"""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from typing import Callable

from repshield.domain.errors import RateLimitExceededError

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Allow at most *max_requests* per client within any *window_seconds* span."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._max = max_requests
        self._window = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}

    def check(self, client: str) -> None:
        """Record a request from *client*, or raise RateLimitExceededError."""
        now = self._clock()
        hits = self._hits.setdefault(client, deque())
        self._drop_old(hits, now)

        if len(hits) >= self._max:
            retry_after = max(1, math.ceil(hits[0] + self._window - now))
            logger.warning("Rate limit hit for %s (%d in %ss)", client, len(hits), self._window)
            raise RateLimitExceededError(client, retry_after)

        hits.append(now)

    def remaining(self, client: str) -> int:
        hits = self._hits.get(client)
        if not hits:
            return self._max
        self._drop_old(hits, self._clock())
        return max(0, self._max - len(hits))

    def sweep(self) -> int:
        """Forget clients with no requests in the current window."""
        now = self._clock()
        idle = []
        for client, hits in self._hits.items():
            self._drop_old(hits, now)
            if not hits:
                idle.append(client)
        for client in idle:
            del self._hits[client]
        return len(idle)

    def __len__(self) -> int:
        return len(self._hits)

    def _drop_old(self, hits: deque[float], now: float) -> None:
        while hits and hits[0] <= now - self._window:
            hits.popleft()
