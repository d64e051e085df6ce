"""Generic time-to-live cache with lazy and periodic eviction.

Used for the scan-session store and the notification channel registry.
Process-local: contents are lost on restart.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterator, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


@dataclass
class _Entry(Generic[V]):
    value: V
    inserted_at: float


class TTLCache(Generic[K, V]):
    """Mapping whose entries expire *ttl_seconds* after insertion.

    Expired entries disappear on access (``get``) and on ``sweep()``.
    *on_evict* is called with (key, value) for every expired entry removed.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        on_evict: Callable[[K, V], None] | None = None,
    ):
        self._ttl = ttl_seconds
        self._clock = clock
        self._on_evict = on_evict
        self._entries: dict[K, _Entry[V]] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def set(self, key: K, value: V) -> None:
        self._entries[key] = _Entry(value=value, inserted_at=self._clock())

    def get(self, key: K) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry, self._clock()):
            self._evict(key, entry)
            return None
        return entry.value

    def pop(self, key: K) -> V | None:
        entry = self._entries.pop(key, None)
        return entry.value if entry else None

    def sweep(self) -> int:
        """Remove every expired entry; return how many were removed."""
        now = self._clock()
        expired = [(k, e) for k, e in self._entries.items() if self._is_expired(e, now)]
        for key, entry in expired:
            self._evict(key, entry)
        return len(expired)

    def clear(self) -> list[V]:
        values = [e.value for e in self._entries.values()]
        self._entries.clear()
        return values

    def items(self) -> list[tuple[K, V]]:
        return [(k, e.value) for k, e in self._entries.items()]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._entries))

    def _is_expired(self, entry: _Entry[V], now: float) -> bool:
        return now - entry.inserted_at > self._ttl

    def _evict(self, key: K, entry: _Entry[V]) -> None:
        self._entries.pop(key, None)
        if self._on_evict is not None:
            try:
                self._on_evict(key, entry.value)
            except Exception:
                logger.exception("Eviction callback failed for %r", key)


class PeriodicTask:
    """Run a callable every *interval_seconds* on the event loop until stopped."""

    def __init__(
        self,
        name: str,
        func: Callable[[], object | Awaitable[object]],
        interval_seconds: float,
    ):
        self._name = name
        self._func = func
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self._name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                result = self._func()
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception("Periodic task %s failed", self._name)
