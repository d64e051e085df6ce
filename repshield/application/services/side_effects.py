"""Best-effort side effects whose failures are recorded instead of raised."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

SideEffect = tuple[str, Callable[[], Awaitable[object]]]


@dataclass(frozen=True)
class SideEffectOutcome:
    name: str
    ticket_id: int | None
    ok: bool
    error: str | None = None
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "ticketId": self.ticket_id,
            "ok": self.ok,
            "error": self.error,
            "at": self.at.isoformat(),
        }


class SideEffectLog:
    """Bounded, most-recent-last record of side-effect outcomes."""

    def __init__(self, maxlen: int = 500):
        self._entries: deque[SideEffectOutcome] = deque(maxlen=maxlen)

    def append(self, outcome: SideEffectOutcome) -> None:
        self._entries.append(outcome)

    def entries(self) -> list[SideEffectOutcome]:
        return list(self._entries)

    def failures(self) -> list[SideEffectOutcome]:
        return [e for e in self._entries if not e.ok]

    def __len__(self) -> int:
        return len(self._entries)


class SideEffectRunner:
    """Run independent side effects concurrently; never raise."""

    def __init__(self, log: SideEffectLog):
        self._log = log

    @property
    def log(self) -> SideEffectLog:
        return self._log

    async def run(self, effects: list[SideEffect], ticket_id: int | None = None) -> list[SideEffectOutcome]:
        if not effects:
            return []

        results = await asyncio.gather(
            *(factory() for _, factory in effects), return_exceptions=True
        )

        outcomes = []
        for (name, _), result in zip(effects, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Side effect %s failed (ticket=%s): %s", name, ticket_id, result,
                    exc_info=result,
                )
                outcome = SideEffectOutcome(
                    name=name, ticket_id=ticket_id, ok=False,
                    error=f"{type(result).__name__}: {result}",
                )
            else:
                outcome = SideEffectOutcome(name=name, ticket_id=ticket_id, ok=True)
            self._log.append(outcome)
            outcomes.append(outcome)
        return outcomes
