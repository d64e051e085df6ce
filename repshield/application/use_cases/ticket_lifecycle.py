"""TicketLifecycleUseCase: status transitions with their notifications.

A transition is persisted first; emails and analytics for the new status then
run concurrently as independent side effects. Their failures are logged and
recorded, never raised, and never roll the transition back. Replaying the same
transition fires its side effects again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable

from repshield.application.ports.email_port import EmailPort
from repshield.application.ports.ticket_repo import TicketRepository
from repshield.application.services.funnel_tracker import FunnelTracker
from repshield.application.services.notification_broadcaster import NotificationBroadcaster
from repshield.application.services.side_effects import SideEffect, SideEffectRunner
from repshield.domain.entities.ticket import Ticket
from repshield.domain.errors import TicketNotFoundError
from repshield.domain.policies.ticket_transitions import check_transition
from repshield.domain.value_objects.enums import FunnelEvent, TicketStatus

logger = logging.getLogger(__name__)

UNPRICED_AMOUNT = "Contact specialist for pricing"


@dataclass
class TransitionCommand:
    ticket_id: int
    new_status: TicketStatus
    assigned_to: str | None = None
    notes: str | None = None
    amount: str | None = None
    progress: int | None = None


class TicketLifecycleUseCase:
    def __init__(
        self,
        tickets: TicketRepository,
        email: EmailPort,
        funnel: FunnelTracker,
        broadcaster: NotificationBroadcaster,
        runner: SideEffectRunner,
        app_base_url: str,
        enforce_transitions: bool = True,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        commit: Callable[[], Awaitable[None]] | None = None,
    ):
        self._tickets = tickets
        self._email = email
        self._funnel = funnel
        self._broadcaster = broadcaster
        self._runner = runner
        self._app_base_url = app_base_url.rstrip("/")
        self._enforce = enforce_transitions
        self._clock = clock
        self._commit = commit

    async def transition_ticket(self, cmd: TransitionCommand) -> Ticket:
        current = await self._tickets.get_by_id(cmd.ticket_id)
        if current is None:
            raise TicketNotFoundError(cmd.ticket_id)

        previous = current.status
        if self._enforce:
            check_transition(cmd.ticket_id, previous, cmd.new_status)

        updated = await self._tickets.update_fields(
            cmd.ticket_id,
            status=cmd.new_status,
            assigned_to=cmd.assigned_to,
            notes=cmd.notes,
            amount=cmd.amount,
            progress=cmd.progress,
        )
        if updated is None:
            raise TicketNotFoundError(cmd.ticket_id)
        if self._commit is not None:
            # the new status is durable before anyone is told about it
            await self._commit()

        logger.info(
            "Ticket %s: %s -> %s", updated.id, previous.value, updated.status.value
        )

        await self._runner.run(self._side_effects_for(updated), ticket_id=updated.id)
        self._broadcaster.broadcast_ticket_transition(
            updated.id, previous.value, updated.status.value
        )
        return updated

    async def update_details(
        self,
        ticket_id: int,
        *,
        assigned_to: str | None = None,
        notes: str | None = None,
        amount: str | None = None,
        progress: int | None = None,
    ) -> Ticket:
        """Edit non-status fields; fires no status notifications."""
        updated = await self._tickets.update_fields(
            ticket_id,
            assigned_to=assigned_to,
            notes=notes,
            amount=amount,
            progress=progress,
        )
        if updated is None:
            raise TicketNotFoundError(ticket_id)
        return updated

    def payment_link(self, ticket_id: int) -> str:
        return f"{self._app_base_url}/dashboard?case={ticket_id}&action=pay"

    def _side_effects_for(self, ticket: Ticket) -> list[SideEffect]:
        email = ticket.client_email
        meta = {"ticketId": ticket.id, "status": ticket.status.value}
        effects: list[SideEffect] = []

        if ticket.status == TicketStatus.QUOTED:
            effects.append(("funnel:quote_sent", lambda: self._funnel.track(
                FunnelEvent.QUOTE_SENT, user_id=ticket.user_id, metadata=meta)))
            if email:
                effects.append(("email:quoted", lambda: self._email.send_ticket_quoted(
                    email,
                    ticket.id,
                    ticket.amount or UNPRICED_AMOUNT,
                    ticket.notes or "",
                    self.payment_link(ticket.id),
                )))

        elif ticket.status == TicketStatus.APPROVED:
            effects.append(("funnel:quote_accepted", lambda: self._funnel.track(
                FunnelEvent.QUOTE_ACCEPTED, user_id=ticket.user_id, metadata=meta)))
            if email:
                effects.append(("email:approved", lambda: self._email.send_ticket_approved(
                    email, ticket.id)))

        elif ticket.status == TicketStatus.IN_PROGRESS:
            if email:
                effects.append(("email:in_progress", lambda: self._email.send_ticket_in_progress(
                    email, ticket.id, ticket.progress)))

        elif ticket.status == TicketStatus.COMPLETED:
            completed_at = self._clock().isoformat()
            effects.append(("funnel:removal_completed", lambda: self._funnel.track(
                FunnelEvent.REMOVAL_COMPLETED, user_id=ticket.user_id, metadata=meta)))
            if email:
                effects.append(("email:completed", lambda: self._email.send_ticket_completed(
                    email, ticket.id, completed_at)))

        if effects and not email:
            logger.info("Ticket %s has no contact email; skipping client email", ticket.id)
        return effects
