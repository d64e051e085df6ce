"""Domain and provider exceptions."""

from __future__ import annotations


class RepShieldError(Exception):
    """Base class for all application errors."""


class TicketNotFoundError(RepShieldError):
    def __init__(self, ticket_id: int):
        super().__init__(f"Ticket {ticket_id} not found")
        self.ticket_id = ticket_id


class IllegalTransitionError(RepShieldError):
    def __init__(self, ticket_id: int, from_status: str, to_status: str):
        super().__init__(
            f"Ticket {ticket_id} cannot move from {from_status} to {to_status}"
        )
        self.ticket_id = ticket_id
        self.from_status = from_status
        self.to_status = to_status


# ─── Scan providers ──────────────────────────────────────────────────


class ProviderError(RepShieldError):
    """An external scan provider call failed."""


class ProviderAuthError(ProviderError):
    pass


class ProviderRateLimitError(ProviderError):
    pass


class ProviderNetworkError(ProviderError):
    pass


class ScrapingServiceError(ProviderError):
    pass


class ScanUnavailableError(RepShieldError):
    """A scan could not be completed; carries the recovery outcome."""

    def __init__(self, message: str, outcome=None):
        super().__init__(message)
        self.outcome = outcome


class NotificationDeliveryError(RepShieldError):
    """An outbound notification (email, Telegram) was not delivered."""


class RateLimitExceededError(RepShieldError):
    """A client sent more requests than its window allows."""

    def __init__(self, client: str, retry_after: int):
        super().__init__("Too many requests. Please try again later.")
        self.client = client
        self.retry_after = retry_after
