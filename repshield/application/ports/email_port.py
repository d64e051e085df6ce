"""Port interface for transactional and admin emails."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    @abstractmethod
    async def send_ticket_quoted(
        self, email: str, ticket_id: int, amount: str, report: str, payment_link: str
    ) -> None:
        ...

    @abstractmethod
    async def send_ticket_approved(self, email: str, ticket_id: int) -> None:
        ...

    @abstractmethod
    async def send_ticket_in_progress(self, email: str, ticket_id: int, progress: int) -> None:
        ...

    @abstractmethod
    async def send_ticket_completed(self, email: str, ticket_id: int, completed_at: str) -> None:
        ...

    @abstractmethod
    async def send_contact_notification(
        self, name: str, email: str, company: str, website: str, message: str
    ) -> None:
        """Notify the admin inbox about a new lead or contact request."""
        ...
