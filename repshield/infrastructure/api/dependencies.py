"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from repshield.adapters.persistence.database import get_session
from repshield.adapters.persistence.repositories import (
    SqlFunnelEventRepository,
    SqlTicketRepository,
    SqlTransactionRepository,
    SqlUserRepository,
)
from repshield.application.ports.funnel_event_repo import FunnelEventRepository
from repshield.application.ports.ticket_repo import TicketRepository
from repshield.application.ports.transaction_repo import TransactionRepository
from repshield.application.ports.user_repo import UserRepository
from repshield.application.services.funnel_tracker import FunnelTracker
from repshield.application.use_cases.chatbot import ChatbotUseCase
from repshield.application.use_cases.create_ticket import CreateTicketUseCase
from repshield.application.use_cases.lead_capture import LeadCaptureUseCase
from repshield.application.use_cases.live_scan import LiveScannerUseCase
from repshield.application.use_cases.record_transaction import RecordTransactionUseCase
from repshield.application.use_cases.ticket_lifecycle import TicketLifecycleUseCase
from repshield.infrastructure.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def scan_rate_limit(request: Request, container: ServiceContainer = Depends(get_container)) -> None:
    """Per-IP throttle for the scan endpoints; raises RateLimitExceededError."""
    client = request.client.host if request.client else "unknown"
    container.scan_limiter.check(client)


def get_ticket_repo(session: AsyncSession = Depends(get_session)) -> TicketRepository:
    return SqlTicketRepository(session)


def get_user_repo(session: AsyncSession = Depends(get_session)) -> UserRepository:
    return SqlUserRepository(session)


def get_transaction_repo(session: AsyncSession = Depends(get_session)) -> TransactionRepository:
    return SqlTransactionRepository(session)


def get_funnel_repo(session: AsyncSession = Depends(get_session)) -> FunnelEventRepository:
    return SqlFunnelEventRepository(session)


def get_funnel_tracker(repo: FunnelEventRepository = Depends(get_funnel_repo)) -> FunnelTracker:
    return FunnelTracker(repo)


def get_create_ticket_uc(
    tickets: TicketRepository = Depends(get_ticket_repo),
    users: UserRepository = Depends(get_user_repo),
    funnel: FunnelTracker = Depends(get_funnel_tracker),
) -> CreateTicketUseCase:
    return CreateTicketUseCase(tickets=tickets, users=users, funnel=funnel)


def get_live_scanner_uc(
    container: ServiceContainer = Depends(get_container),
    create_ticket: CreateTicketUseCase = Depends(get_create_ticket_uc),
    funnel: FunnelTracker = Depends(get_funnel_tracker),
    session: AsyncSession = Depends(get_session),
) -> LiveScannerUseCase:
    return LiveScannerUseCase(
        quick_provider=container.quick_provider,
        reddit_provider=container.reddit_provider,
        web_provider=container.web_provider,
        recovery=container.recovery,
        sessions=container.sessions,
        broadcaster=container.broadcaster,
        create_ticket=create_ticket,
        funnel=funnel,
        commit=session.commit,
    )


def get_lifecycle_uc(
    container: ServiceContainer = Depends(get_container),
    tickets: TicketRepository = Depends(get_ticket_repo),
    funnel: FunnelTracker = Depends(get_funnel_tracker),
    session: AsyncSession = Depends(get_session),
) -> TicketLifecycleUseCase:
    return TicketLifecycleUseCase(
        tickets=tickets,
        email=container.email,
        funnel=funnel,
        broadcaster=container.broadcaster,
        runner=container.side_effects,
        app_base_url=container.config.app_base_url,
        enforce_transitions=container.config.enforce_transition_graph,
        commit=session.commit,
    )


def get_lead_capture_uc(
    container: ServiceContainer = Depends(get_container),
    create_ticket: CreateTicketUseCase = Depends(get_create_ticket_uc),
    funnel: FunnelTracker = Depends(get_funnel_tracker),
    session: AsyncSession = Depends(get_session),
) -> LeadCaptureUseCase:
    return LeadCaptureUseCase(
        create_ticket=create_ticket,
        telegram=container.telegram,
        email=container.email,
        funnel=funnel,
        broadcaster=container.broadcaster,
        runner=container.side_effects,
        commit=session.commit,
    )


def get_record_transaction_uc(
    tickets: TicketRepository = Depends(get_ticket_repo),
    transactions: TransactionRepository = Depends(get_transaction_repo),
    funnel: FunnelTracker = Depends(get_funnel_tracker),
) -> RecordTransactionUseCase:
    return RecordTransactionUseCase(tickets=tickets, transactions=transactions, funnel=funnel)


def get_chatbot_uc(container: ServiceContainer = Depends(get_container)) -> ChatbotUseCase:
    return ChatbotUseCase(
        chatbot=container.chatbot,
        broadcaster=container.broadcaster,
        telegram=container.telegram,
    )
