"""In-memory follow-up cache of finished scans, keyed by scan id."""

from __future__ import annotations

import logging
import time
from typing import Callable

from repshield.application.services.ttl_cache import TTLCache
from repshield.domain.entities.scan import ScanResult, ScanSession

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 60 * 60


class ScanSessionStore:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ):
        self._cache: TTLCache[str, ScanSession] = TTLCache(ttl_seconds=ttl_seconds, clock=clock)
        self._wall_clock = wall_clock

    def store(self, result: ScanResult, full_data: dict) -> ScanSession:
        session = ScanSession(result=result, full_data=full_data, timestamp=self._wall_clock())
        self._cache.set(result.scan_id, session)
        return session

    def get(self, scan_id: str) -> ScanSession | None:
        return self._cache.get(scan_id)

    def cleanup(self) -> int:
        removed = self._cache.sweep()
        if removed:
            logger.info("Cleaned up %d expired scan sessions", removed)
        return removed

    def __len__(self) -> int:
        return len(self._cache)
