"""RecordTransactionUseCase: manually recorded payments and refunds."""

from __future__ import annotations

import logging
from decimal import Decimal

from repshield.application.ports.ticket_repo import TicketRepository
from repshield.application.ports.transaction_repo import TransactionRepository
from repshield.application.services.funnel_tracker import FunnelTracker
from repshield.domain.entities.transaction import Transaction
from repshield.domain.errors import TicketNotFoundError
from repshield.domain.value_objects.enums import FunnelEvent, TransactionKind

logger = logging.getLogger(__name__)


class RecordTransactionUseCase:
    def __init__(
        self,
        tickets: TicketRepository,
        transactions: TransactionRepository,
        funnel: FunnelTracker,
    ):
        self._tickets = tickets
        self._transactions = transactions
        self._funnel = funnel

    async def execute(
        self,
        ticket_id: int,
        amount: Decimal,
        currency: str = "USD",
        kind: TransactionKind = TransactionKind.PAYMENT,
        note: str | None = None,
    ) -> Transaction:
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)

        saved = await self._transactions.save(
            Transaction(
                id=None,
                ticket_id=ticket_id,
                user_id=ticket.user_id,
                amount=amount,
                currency=currency.upper(),
                kind=kind,
                note=note,
            )
        )
        logger.info("Recorded %s of %s %s for ticket %s", kind.value, amount, currency, ticket_id)

        if kind == TransactionKind.PAYMENT:
            await self._funnel.track_quietly(
                FunnelEvent.PAYMENT_COMPLETED,
                user_id=ticket.user_id,
                metadata={"ticketId": ticket_id, "amount": str(amount), "currency": saved.currency},
            )
        return saved

    async def list_for_ticket(self, ticket_id: int) -> list[Transaction]:
        if await self._tickets.get_by_id(ticket_id) is None:
            raise TicketNotFoundError(ticket_id)
        return await self._transactions.get_by_ticket(ticket_id)
