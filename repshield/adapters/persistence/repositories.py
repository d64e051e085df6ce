"""SQLAlchemy repository implementations."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from repshield.adapters.persistence.models import (
    FunnelEventModel,
    TicketModel,
    TransactionModel,
    UserModel,
)
from repshield.application.ports.funnel_event_repo import FunnelEventRepository
from repshield.application.ports.ticket_repo import TicketRepository
from repshield.application.ports.transaction_repo import TransactionRepository
from repshield.application.ports.user_repo import UserRepository
from repshield.domain.entities.ticket import Ticket
from repshield.domain.entities.transaction import Transaction
from repshield.domain.entities.user import User
from repshield.domain.value_objects.enums import (
    TicketPriority,
    TicketStatus,
    TicketType,
    TransactionKind,
    UserRole,
)
from repshield.domain.value_objects.request_data import (
    request_data_from_dict,
    request_data_to_dict,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# ─── Mappers ─────────────────────────────────────────────────────────


def _user_to_domain(m: UserModel) -> User:
    return User(
        id=m.id,
        email=m.email,
        first_name=m.first_name,
        last_name=m.last_name,
        role=UserRole(m.role),
        created_at=m.created_at,
    )


def _enum_or(enum_cls: type[E], value: str, default: E, ticket_id: int) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(
            "Ticket %s has unknown %s %r; reading it as %s",
            ticket_id, enum_cls.__name__, value, default.value,
        )
        return default


def _ticket_to_domain(m: TicketModel) -> Ticket:
    return Ticket(
        id=m.id,
        user_id=m.user_id,
        type=_enum_or(TicketType, m.type, TicketType.GENERAL, m.id),
        title=m.title,
        status=_enum_or(TicketStatus, m.status, TicketStatus.PENDING, m.id),
        priority=_enum_or(TicketPriority, m.priority, TicketPriority.STANDARD, m.id),
        assigned_to=m.assigned_to,
        description=m.description,
        reddit_url=m.reddit_url,
        amount=m.amount,
        progress=m.progress,
        request_data=request_data_from_dict(m.request_data),
        notes=m.notes,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


def _transaction_to_domain(m: TransactionModel) -> Transaction:
    return Transaction(
        id=m.id,
        ticket_id=m.ticket_id,
        user_id=m.user_id,
        amount=m.amount,
        currency=m.currency,
        kind=TransactionKind(m.kind),
        note=m.note,
        created_at=m.created_at,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def upsert(self, user: User) -> User:
        stmt = pg_insert(UserModel).values(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
        )
        refreshed = {"email": stmt.excluded.email}
        if user.first_name is not None:
            refreshed["first_name"] = stmt.excluded.first_name
            refreshed["last_name"] = stmt.excluded.last_name
        stmt = stmt.on_conflict_do_update(index_elements=[UserModel.id], set_=refreshed)
        await self._s.execute(stmt)
        await self._s.flush()

        m = await self._s.get(UserModel, user.id, populate_existing=True)
        return _user_to_domain(m)

    async def get_by_id(self, user_id: str) -> User | None:
        m = await self._s.get(UserModel, user_id)
        return _user_to_domain(m) if m else None

    async def get_all(self) -> list[User]:
        result = await self._s.execute(select(UserModel).order_by(UserModel.created_at))
        return [_user_to_domain(m) for m in result.scalars()]


class SqlTicketRepository(TicketRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, ticket: Ticket) -> Ticket:
        m = TicketModel(
            user_id=ticket.user_id,
            type=ticket.type.value,
            status=ticket.status.value,
            priority=ticket.priority.value,
            assigned_to=ticket.assigned_to,
            title=ticket.title,
            description=ticket.description,
            reddit_url=ticket.reddit_url,
            amount=ticket.amount,
            progress=ticket.progress,
            request_data=request_data_to_dict(ticket.request_data),
            notes=ticket.notes,
        )
        self._s.add(m)
        await self._s.flush()
        await self._s.refresh(m)
        return _ticket_to_domain(m)

    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        m = await self._s.get(TicketModel, ticket_id)
        return _ticket_to_domain(m) if m else None

    async def get_all(self) -> list[Ticket]:
        result = await self._s.execute(
            select(TicketModel).order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
        )
        return [_ticket_to_domain(m) for m in result.scalars()]

    async def get_by_user(self, user_id: str) -> list[Ticket]:
        result = await self._s.execute(
            select(TicketModel)
            .where(TicketModel.user_id == user_id)
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
        )
        return [_ticket_to_domain(m) for m in result.scalars()]

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
        m = await self._s.get(TicketModel, ticket_id)
        if m is None:
            return None

        if status is not None:
            m.status = status.value
        if assigned_to is not None:
            m.assigned_to = assigned_to
        if notes is not None:
            m.notes = notes
        if amount is not None:
            m.amount = amount
        if progress is not None:
            m.progress = progress

        await self._s.flush()
        await self._s.refresh(m)
        return _ticket_to_domain(m)


class SqlTransactionRepository(TransactionRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, transaction: Transaction) -> Transaction:
        m = TransactionModel(
            ticket_id=transaction.ticket_id,
            user_id=transaction.user_id,
            amount=transaction.amount,
            currency=transaction.currency,
            kind=transaction.kind.value,
            note=transaction.note,
        )
        self._s.add(m)
        await self._s.flush()
        await self._s.refresh(m)
        return _transaction_to_domain(m)

    async def get_by_ticket(self, ticket_id: int) -> list[Transaction]:
        result = await self._s.execute(
            select(TransactionModel)
            .where(TransactionModel.ticket_id == ticket_id)
            .order_by(TransactionModel.created_at, TransactionModel.id)
        )
        return [_transaction_to_domain(m) for m in result.scalars()]


class SqlFunnelEventRepository(FunnelEventRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(
        self,
        event_type: str,
        user_id: str | None = None,
        session_id: str | None = None,
        metadata: dict | None = None,
    ) -> None:
        # savepoint: a failed analytics insert must not poison the caller's transaction
        async with self._s.begin_nested():
            self._s.add(
                FunnelEventModel(
                    event_type=event_type,
                    user_id=user_id,
                    session_id=session_id,
                    event_metadata=metadata,
                )
            )
