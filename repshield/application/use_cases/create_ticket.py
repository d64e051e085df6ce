"""CreateTicketUseCase: persist a new pending ticket and its owning user."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from repshield.application.ports.ticket_repo import TicketRepository
from repshield.application.ports.user_repo import UserRepository
from repshield.application.services.funnel_tracker import FunnelTracker
from repshield.domain.entities.ticket import Ticket
from repshield.domain.entities.user import User
from repshield.domain.value_objects.enums import FunnelEvent, TicketPriority, TicketType
from repshield.domain.value_objects.request_data import GeneralRequestData, RequestData

logger = logging.getLogger(__name__)


@dataclass
class NewTicket:
    owner: User
    type: TicketType
    title: str
    priority: TicketPriority = TicketPriority.STANDARD
    description: str | None = None
    reddit_url: str | None = None
    request_data: RequestData = field(default_factory=GeneralRequestData)


def owner_for_email(email: str | None) -> User:
    """Tickets without a contact address belong to the anonymous user."""
    if not email:
        return User.anonymous()
    return User(id=User.id_from_email(email), email=email.strip().lower())


class CreateTicketUseCase:
    def __init__(
        self,
        tickets: TicketRepository,
        users: UserRepository,
        funnel: FunnelTracker,
    ):
        self._tickets = tickets
        self._users = users
        self._funnel = funnel

    async def execute(self, new: NewTicket) -> Ticket:
        owner = await self._users.upsert(new.owner)
        ticket = await self._tickets.save(
            Ticket(
                id=None,
                user_id=owner.id,
                type=new.type,
                title=new.title,
                priority=new.priority,
                description=new.description,
                reddit_url=new.reddit_url,
                request_data=new.request_data,
            )
        )
        logger.info("Created %s ticket %s for user %s", ticket.type.value, ticket.id, owner.id)

        await self._funnel.track_quietly(
            FunnelEvent.TICKET_CREATED,
            user_id=owner.id,
            metadata={"ticketId": ticket.id, "type": ticket.type.value},
        )
        return ticket
