"""Port interface for funnel analytics events."""

from abc import ABC, abstractmethod


class FunnelEventRepository(ABC):
    @abstractmethod
    async def save(
        self,
        event_type: str,
        user_id: str | None = None,
        session_id: str | None = None,
        metadata: dict | None = None,
    ) -> None:
        ...
