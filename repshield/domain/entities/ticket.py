"""Ticket entity: a unit of customer-facing work tracked through its lifecycle."""

from dataclasses import dataclass, field
from datetime import datetime

from repshield.domain.value_objects.enums import TicketPriority, TicketStatus, TicketType
from repshield.domain.value_objects.request_data import GeneralRequestData, RequestData


@dataclass
class Ticket:
    id: int | None
    user_id: str
    type: TicketType
    title: str
    status: TicketStatus = TicketStatus.PENDING
    priority: TicketPriority = TicketPriority.STANDARD
    assigned_to: str | None = None
    description: str | None = None
    reddit_url: str | None = None
    amount: str | None = None
    progress: int = 0
    request_data: RequestData = field(default_factory=GeneralRequestData)
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def client_email(self) -> str | None:
        return self.request_data.contact_email

    def reference(self) -> str:
        """Human-facing case number, e.g. REP-0042."""
        return f"REP-{(self.id or 0):04d}"
