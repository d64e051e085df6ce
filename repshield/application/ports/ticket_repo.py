"""Port interface for ticket persistence."""

from abc import ABC, abstractmethod

from repshield.domain.entities.ticket import Ticket
from repshield.domain.value_objects.enums import TicketStatus


class TicketRepository(ABC):
    @abstractmethod
    async def save(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Ticket]:
        ...

    @abstractmethod
    async def get_by_user(self, user_id: str) -> list[Ticket]:
        ...

    @abstractmethod
    async def update_fields(
        self,
        ticket_id: int,
        *,
        status: TicketStatus | None = None,
        assigned_to: str | None = None,
        notes: str | None = None,
        amount: str | None = None,
        progress: int | None = None,
    ) -> Ticket | None:
        """Partial update: arguments left as None keep their stored value.

        Returns the updated ticket, or None when it does not exist.
        """
        ...
