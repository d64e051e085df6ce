"""NotificationBroadcaster: fan-out of live events to connected admin observers.

Channels are kept in a TTL cache: a channel older than the max age is closed
and dropped by the sweep, and a channel whose write fails is dropped at once.
Broadcasting never raises.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

from repshield.application.services.ttl_cache import TTLCache
from repshield.domain.value_objects.enums import NotificationType

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 60 * 60


class ChannelClosedError(Exception):
    pass


class NotificationChannel(ABC):
    @abstractmethod
    def send(self, message: str) -> None:
        """Deliver one serialized event; raise on failure."""
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class QueueChannel(NotificationChannel):
    """Bounded in-memory queue drained by a server-push response."""

    def __init__(self, maxsize: int = 100):
        self._queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: str) -> None:
        if self._closed:
            raise ChannelClosedError("channel is closed")
        # QueueFull propagates: a client that stopped reading is dropped
        self._queue.put_nowait(message)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            pass

    async def receive(self) -> str | None:
        """Next message, or None once the channel has been closed."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()


@dataclass
class NotificationEvent:
    type: NotificationType
    message: str
    user_info: Any = None
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "message": self.message,
            "userInfo": self.user_info,
            "timestamp": self.timestamp,
        }


def format_sse(payload: dict) -> str:
    return f"data: {json.dumps(payload, default=str)}\n\n"


class NotificationBroadcaster:
    def __init__(
        self,
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._clients: TTLCache[str, NotificationChannel] = TTLCache(
            ttl_seconds=max_age_seconds,
            clock=clock,
            on_evict=self._close_expired,
        )

    def add_client(self, client_id: str, channel: NotificationChannel) -> None:
        self._clients.set(client_id, channel)
        self.cleanup_old_connections()

    def remove_client(self, client_id: str) -> None:
        self._clients.pop(client_id)

    def broadcast(self, event: NotificationEvent) -> None:
        message = format_sse(event.to_dict())
        for client_id, channel in self._clients.items():
            try:
                channel.send(message)
            except Exception as e:
                logger.warning("Failed to send notification to client %s: %s", client_id, e)
                self._clients.pop(client_id)

    def broadcast_chatbot_interaction(
        self, user_message: str, bot_response: str, user_info: dict | None = None
    ) -> None:
        self.broadcast(
            NotificationEvent(
                type=NotificationType.CHATBOT,
                message=f'New visitor asked: "{user_message}"',
                user_info={**(user_info or {}), "response": bot_response},
            )
        )

    def broadcast_new_lead(self, lead: dict) -> None:
        self.broadcast(
            NotificationEvent(
                type=NotificationType.LEAD,
                message=f"New lead: {lead.get('name')} ({lead.get('company')})",
                user_info=lead,
            )
        )

    def broadcast_brand_scan(self, brand_name: str, results: dict) -> None:
        self.broadcast(
            NotificationEvent(
                type=NotificationType.SCAN,
                message=f"Brand scan completed for {brand_name}",
                user_info=results,
            )
        )

    def broadcast_ticket_transition(self, ticket_id: int, from_status: str, to_status: str) -> None:
        self.broadcast(
            NotificationEvent(
                type=NotificationType.LEAD,
                message=f"Ticket #{ticket_id} moved to {to_status}",
                user_info={"ticketId": ticket_id, "status": to_status, "from": from_status},
            )
        )

    def cleanup_old_connections(self) -> int:
        removed = self._clients.sweep()
        if removed:
            logger.info("Closed %d expired notification channels", removed)
        return removed

    def get_active_clients_count(self) -> int:
        return len(self._clients)

    def shutdown(self) -> None:
        for channel in self._clients.clear():
            try:
                channel.close()
            except Exception:
                logger.exception("Error closing notification channel")

    @staticmethod
    def _close_expired(client_id: str, channel: NotificationChannel) -> None:
        channel.close()
