"""Ticket endpoints — lead capture, ticket form, admin lifecycle and payments."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from repshield.adapters.persistence.database import get_session
from repshield.application.ports.ticket_repo import TicketRepository
from repshield.application.ports.user_repo import UserRepository
from repshield.application.use_cases.create_ticket import (
    CreateTicketUseCase,
    NewTicket,
    owner_for_email,
)
from repshield.application.use_cases.lead_capture import BrandScanLead, LeadCaptureUseCase
from repshield.application.use_cases.record_transaction import RecordTransactionUseCase
from repshield.application.use_cases.ticket_lifecycle import (
    TicketLifecycleUseCase,
    TransitionCommand,
)
from repshield.domain.entities.ticket import Ticket
from repshield.domain.entities.transaction import Transaction
from repshield.domain.entities.user import User
from repshield.domain.value_objects.enums import TicketStatus, TicketType
from repshield.domain.value_objects.request_data import (
    GeneralRequestData,
    RemovalRequestData,
    request_data_to_dict,
)
from repshield.infrastructure.api.dependencies import (
    get_container,
    get_create_ticket_uc,
    get_lead_capture_uc,
    get_lifecycle_uc,
    get_record_transaction_uc,
    get_ticket_repo,
    get_user_repo,
)
from repshield.infrastructure.api.schemas import (
    BrandScanLeadBody,
    TicketFormBody,
    TicketUpdateBody,
    TransactionBody,
)
from repshield.infrastructure.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tickets"])


@router.post("/brand-scan-ticket", status_code=201)
async def create_brand_scan_ticket(
    body: BrandScanLeadBody,
    uc: LeadCaptureUseCase = Depends(get_lead_capture_uc),
    session: AsyncSession = Depends(get_session),
):
    """Brand scanner lead form: creates the account and a brand_scan ticket."""
    result = await uc.execute(
        BrandScanLead(
            name=body.name,
            email=body.email,
            company=body.company,
            brand_name=body.brand_name,
            lead_type=body.lead_type,
            phone=body.phone,
            scan_results=body.scan_results,
        )
    )
    await session.commit()
    return {
        "success": True,
        "message": "Account created and specialist assigned",
        "ticketId": result.ticket_id,
        "userId": result.user_id,
    }


@router.post("/tickets", status_code=201)
async def create_ticket(
    body: TicketFormBody,
    uc: CreateTicketUseCase = Depends(get_create_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    """Public ticket form; a Reddit URL makes it a removal request."""
    owner = owner_for_email(body.email)
    if body.email and body.name:
        owner = User.from_lead(body.name, body.email)

    if body.reddit_url:
        new = NewTicket(
            owner=owner,
            type=TicketType.REMOVAL,
            title=body.title or "Reddit removal request",
            description=body.description,
            reddit_url=body.reddit_url,
            request_data=RemovalRequestData(reddit_url=body.reddit_url, email=body.email),
        )
    else:
        new = NewTicket(
            owner=owner,
            type=TicketType.GENERAL,
            title=body.title or "General inquiry",
            description=body.description,
            request_data=GeneralRequestData(user_email=body.email, user_name=body.name),
        )

    ticket = await uc.execute(new)
    await session.commit()
    return {"success": True, "ticket": _serialize_ticket(ticket)}


@router.get("/admin/tickets")
async def list_tickets(
    status: TicketStatus | None = None,
    user_id: str | None = None,
    tickets: TicketRepository = Depends(get_ticket_repo),
):
    """List tickets newest first, optionally filtered by user and status."""
    items = await tickets.get_by_user(user_id) if user_id else await tickets.get_all()
    if status is not None:
        items = [t for t in items if t.status == status]
    return {"total": len(items), "tickets": [_serialize_ticket(t) for t in items]}


@router.get("/admin/users")
async def list_users(users: UserRepository = Depends(get_user_repo)):
    items = await users.get_all()
    return {"total": len(items), "users": [_serialize_user(u) for u in items]}


@router.patch("/admin/tickets/{ticket_id}")
@router.patch("/admin/orders/{ticket_id}")
async def update_ticket(
    ticket_id: int,
    body: TicketUpdateBody,
    uc: TicketLifecycleUseCase = Depends(get_lifecycle_uc),
    session: AsyncSession = Depends(get_session),
):
    """Status changes go through the lifecycle; other edits fire no notifications."""
    if body.status is not None:
        ticket = await uc.transition_ticket(
            TransitionCommand(
                ticket_id=ticket_id,
                new_status=body.status,
                assigned_to=body.assigned_to,
                notes=body.notes,
                amount=body.amount,
                progress=body.progress,
            )
        )
    else:
        ticket = await uc.update_details(
            ticket_id,
            assigned_to=body.assigned_to,
            notes=body.notes,
            amount=body.amount,
            progress=body.progress,
        )
    await session.commit()
    return {"success": True, "ticket": _serialize_ticket(ticket)}


@router.get("/admin/tickets/{ticket_id}/transactions")
async def list_transactions(
    ticket_id: int,
    uc: RecordTransactionUseCase = Depends(get_record_transaction_uc),
):
    items = await uc.list_for_ticket(ticket_id)
    return {"total": len(items), "transactions": [_serialize_transaction(t) for t in items]}


@router.post("/admin/tickets/{ticket_id}/transactions", status_code=201)
async def record_transaction(
    ticket_id: int,
    body: TransactionBody,
    uc: RecordTransactionUseCase = Depends(get_record_transaction_uc),
    session: AsyncSession = Depends(get_session),
):
    transaction = await uc.execute(
        ticket_id, body.amount, currency=body.currency, kind=body.kind, note=body.note
    )
    await session.commit()
    return {"success": True, "transaction": _serialize_transaction(transaction)}


@router.get("/admin/side-effects")
async def list_side_effects(
    failed_only: bool = False,
    container: ServiceContainer = Depends(get_container),
):
    """Recent notification/analytics outcomes, most recent last."""
    log = container.side_effect_log
    entries = log.failures() if failed_only else log.entries()
    return {"total": len(entries), "entries": [e.to_dict() for e in entries]}


def _serialize_ticket(t: Ticket) -> dict:
    return {
        "id": t.id,
        "reference": t.reference(),
        "userId": t.user_id,
        "type": t.type.value,
        "status": t.status.value,
        "priority": t.priority.value,
        "assignedTo": t.assigned_to,
        "title": t.title,
        "description": t.description,
        "redditUrl": t.reddit_url,
        "amount": t.amount,
        "progress": t.progress,
        "requestData": request_data_to_dict(t.request_data),
        "notes": t.notes,
        "createdAt": t.created_at.isoformat() if t.created_at else None,
        "updatedAt": t.updated_at.isoformat() if t.updated_at else None,
    }


def _serialize_transaction(t: Transaction) -> dict:
    return {
        "id": t.id,
        "ticketId": t.ticket_id,
        "userId": t.user_id,
        "amount": str(t.amount),
        "currency": t.currency,
        "kind": t.kind.value,
        "note": t.note,
        "createdAt": t.created_at.isoformat() if t.created_at else None,
    }


def _serialize_user(u: User) -> dict:
    return {
        "id": u.id,
        "email": u.email,
        "firstName": u.first_name,
        "lastName": u.last_name,
        "role": u.role.value,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
    }
