"""Transaction entity: a payment or refund recorded against a ticket."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from repshield.domain.value_objects.enums import TransactionKind


@dataclass
class Transaction:
    id: int | None
    ticket_id: int
    user_id: str
    amount: Decimal
    currency: str = "USD"
    kind: TransactionKind = TransactionKind.PAYMENT
    note: str | None = None
    created_at: datetime | None = None
