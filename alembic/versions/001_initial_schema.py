"""Initial schema: users, tickets, transactions, funnel events.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    # Users (id is derived from the email for lead-created accounts)
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )

    # Tickets
    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(20), nullable=False, server_default="standard"),
        sa.Column("assigned_to", sa.String(255), nullable=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("reddit_url", sa.Text, nullable=True),
        sa.Column("amount", sa.String(50), nullable=True),
        sa.Column("progress", sa.Integer, nullable=False, server_default="0"),
        sa.Column("request_data", JSONB, nullable=False, server_default="{}"),
        sa.Column("notes", sa.Text, nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("idx_tickets_user", "tickets", ["user_id"])
    op.create_index("idx_tickets_status", "tickets", ["status"])

    # Transactions
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "ticket_id",
            sa.Integer,
            sa.ForeignKey("tickets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("kind", sa.String(20), nullable=False, server_default="payment"),
        sa.Column("note", sa.Text, nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("idx_transactions_ticket", "transactions", ["ticket_id"])

    # Funnel events
    op.create_table(
        "funnel_events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_type", sa.String(50), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=True),
        sa.Column("session_id", sa.String(255), nullable=True),
        sa.Column("metadata", JSONB, nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("idx_funnel_events_type", "funnel_events", ["event_type"])
    op.create_index("idx_funnel_events_session", "funnel_events", ["session_id"])


def downgrade() -> None:
    op.drop_table("funnel_events")
    op.drop_table("transactions")
    op.drop_table("tickets")
    op.drop_table("users")
