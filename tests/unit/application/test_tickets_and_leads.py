"""Tests for ticket creation, lead capture, transactions and the chatbot."""

from decimal import Decimal

import pytest

from repshield.application.use_cases.chatbot import TELEGRAM_ERROR_REPLY, ChatbotUseCase
from repshield.application.use_cases.create_ticket import NewTicket, owner_for_email
from repshield.application.use_cases.lead_capture import BrandScanLead, LeadCaptureUseCase
from repshield.application.use_cases.record_transaction import RecordTransactionUseCase
from repshield.domain.entities.ticket import Ticket
from repshield.domain.entities.user import User
from repshield.domain.errors import TicketNotFoundError
from repshield.domain.value_objects.enums import (
    TicketPriority,
    TicketStatus,
    TicketType,
    TransactionKind,
)
from repshield.domain.value_objects.request_data import BrandScanRequestData, RemovalRequestData

# ─── CreateTicketUseCase ────────────────────────────────────────────


def test_owner_for_email():
    assert owner_for_email(None).id == "anonymous"
    assert owner_for_email("").id == "anonymous"
    owner = owner_for_email("Mod@Reddit.com")
    assert owner.id == "mod_reddit_com"
    assert owner.email == "mod@reddit.com"


@pytest.mark.asyncio
async def test_create_ticket_persists_pending(create_ticket_uc, ticket_repo, user_repo, funnel_repo):
    ticket = await create_ticket_uc.execute(
        NewTicket(
            owner=owner_for_email("a@b.io"),
            type=TicketType.REMOVAL,
            title="Remove post",
            reddit_url="https://reddit.com/r/x/comments/1",
            request_data=RemovalRequestData(reddit_url="https://reddit.com/r/x/comments/1", email="a@b.io"),
        )
    )
    assert ticket.id == 1
    assert ticket.status == TicketStatus.PENDING
    assert ticket.user_id == "a_b_io"
    assert "a_b_io" in user_repo.users
    assert funnel_repo.events[0]["event_type"] == "ticket_created"
    assert funnel_repo.events[0]["metadata"] == {"ticketId": 1, "type": "removal"}


@pytest.mark.asyncio
async def test_create_ticket_survives_analytics_outage(create_ticket_uc, ticket_repo, funnel_repo):
    funnel_repo.fail = True
    ticket = await create_ticket_uc.execute(
        NewTicket(owner=User.anonymous(), type=TicketType.GENERAL, title="Question")
    )
    assert ticket_repo.tickets[ticket.id] is ticket


# ─── LeadCaptureUseCase ─────────────────────────────────────────────


@pytest.fixture
def lead_uc(create_ticket_uc, telegram, email, funnel, broadcaster, runner):
    return LeadCaptureUseCase(
        create_ticket=create_ticket_uc,
        telegram=telegram,
        email=email,
        funnel=funnel,
        broadcaster=broadcaster,
        runner=runner,
    )


def _lead(**overrides):
    data = dict(
        name="Jane Doe",
        email="jane@acme.io",
        company="Acme Inc",
        brand_name="Acme",
        lead_type="premium",
        scan_results={"totalMentions": 12, "riskLevel": "medium"},
    )
    data.update(overrides)
    return BrandScanLead(**data)


@pytest.mark.asyncio
async def test_lead_creates_user_and_brand_scan_ticket(lead_uc, ticket_repo, user_repo):
    result = await lead_uc.execute(_lead())

    assert result.user_id == "jane_acme_io"
    assert user_repo.users["jane_acme_io"].first_name == "Jane"
    ticket = ticket_repo.tickets[result.ticket_id]
    assert ticket.type == TicketType.BRAND_SCAN
    assert ticket.priority == TicketPriority.PREMIUM
    assert ticket.title == "Brand Scan: Acme"
    assert isinstance(ticket.request_data, BrandScanRequestData)
    assert ticket.request_data.submission_time is not None


@pytest.mark.asyncio
async def test_unknown_lead_type_is_standard_priority(lead_uc, ticket_repo):
    result = await lead_uc.execute(_lead(lead_type="enterprise"))
    assert ticket_repo.tickets[result.ticket_id].priority == TicketPriority.STANDARD


@pytest.mark.asyncio
async def test_lead_notifies_admins(lead_uc, telegram, email, funnel_repo, channel, side_effect_log):
    result = await lead_uc.execute(_lead())

    lead = telegram.leads[0]
    assert lead["type"] == "Brand Scanner Lead"
    assert lead["ticketId"] == result.ticket_id
    assert lead["scanSummary"] == {"totalMentions": 12, "riskLevel": "medium", "sentiment": "neutral"}
    assert email.sent[0][0] == "contact"
    assert email.sent[0][4] == "RepShield Brand Scanner"
    assert "lead_form_submitted" in funnel_repo.types()
    assert "New lead: Jane Doe (Acme Inc)" in channel.messages[-1]
    assert {e.name for e in side_effect_log.entries()} == {
        "telegram:new_lead", "email:contact_notification", "funnel:lead_form_submitted",
    }


@pytest.mark.asyncio
async def test_telegram_outage_recorded_not_raised(lead_uc, telegram, email, side_effect_log):
    telegram.fail = True
    result = await lead_uc.execute(_lead(scan_results=None))
    assert result.ticket_id == 1
    assert [f.name for f in side_effect_log.failures()] == ["telegram:new_lead"]
    assert len(email.sent) == 1


@pytest.mark.asyncio
async def test_lead_committed_before_admins_alerted(
    create_ticket_uc, telegram, email, funnel, broadcaster, runner, channel
):
    seen_at_commit = []

    async def commit():
        seen_at_commit.append((len(telegram.leads), len(email.sent), len(channel.messages)))

    uc = LeadCaptureUseCase(
        create_ticket=create_ticket_uc, telegram=telegram, email=email, funnel=funnel,
        broadcaster=broadcaster, runner=runner, commit=commit,
    )
    await uc.execute(_lead())
    assert seen_at_commit == [(0, 0, 0)]
    assert len(telegram.leads) == 1


@pytest.mark.asyncio
async def test_failed_commit_alerts_nobody(create_ticket_uc, telegram, email, funnel, broadcaster, runner, channel):
    async def commit():
        raise RuntimeError("connection lost")

    uc = LeadCaptureUseCase(
        create_ticket=create_ticket_uc, telegram=telegram, email=email, funnel=funnel,
        broadcaster=broadcaster, runner=runner, commit=commit,
    )
    with pytest.raises(RuntimeError):
        await uc.execute(_lead())
    assert telegram.leads == []
    assert email.sent == []
    assert channel.messages == []


# ─── RecordTransactionUseCase ───────────────────────────────────────


@pytest.fixture
def transaction_uc(ticket_repo, transaction_repo, funnel):
    return RecordTransactionUseCase(tickets=ticket_repo, transactions=transaction_repo, funnel=funnel)


async def _saved_ticket(ticket_repo):
    return await ticket_repo.save(
        Ticket(id=None, user_id="jane_acme_io", type=TicketType.REMOVAL, title="Remove")
    )


@pytest.mark.asyncio
async def test_payment_recorded_and_tracked(transaction_uc, ticket_repo, funnel_repo):
    ticket = await _saved_ticket(ticket_repo)
    saved = await transaction_uc.execute(ticket.id, Decimal("899.00"), currency="usd")
    assert saved.id == 1
    assert saved.user_id == "jane_acme_io"
    assert saved.currency == "USD"
    assert funnel_repo.events[0]["event_type"] == "payment_completed"
    assert funnel_repo.events[0]["metadata"]["amount"] == "899.00"


@pytest.mark.asyncio
async def test_refund_not_tracked_as_payment(transaction_uc, ticket_repo, funnel_repo):
    ticket = await _saved_ticket(ticket_repo)
    await transaction_uc.execute(ticket.id, Decimal("199"), kind=TransactionKind.REFUND)
    assert funnel_repo.events == []
    assert len(await transaction_uc.list_for_ticket(ticket.id)) == 1


@pytest.mark.asyncio
async def test_transaction_for_unknown_ticket(transaction_uc):
    with pytest.raises(TicketNotFoundError):
        await transaction_uc.execute(3, Decimal("1"))
    with pytest.raises(TicketNotFoundError):
        await transaction_uc.list_for_ticket(3)


# ─── ChatbotUseCase ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_reply_is_broadcast(chatbot, broadcaster, channel):
    uc = ChatbotUseCase(chatbot, broadcaster)
    answer = await uc.reply("How much for a comment?", [{"role": "user", "content": "hi"}], {"ip": "1.2.3.4"})
    assert answer == "Happy to help!"
    assert chatbot.calls[0][1] == [{"role": "user", "content": "hi"}]
    assert 'New visitor asked: \\"How much for a comment?\\"' in channel.messages[-1]


@pytest.mark.asyncio
async def test_telegram_text_answered(chatbot, broadcaster, telegram):
    uc = ChatbotUseCase(chatbot, broadcaster, telegram)
    delivered = await uc.handle_telegram_update({"message": {"text": "hi", "chat": {"id": 77}}})
    assert delivered
    assert telegram.messages == [(77, "Happy to help!")]


@pytest.mark.asyncio
async def test_telegram_update_without_text_ignored(chatbot, broadcaster, telegram):
    uc = ChatbotUseCase(chatbot, broadcaster, telegram)
    assert not await uc.handle_telegram_update({"message": {"chat": {"id": 77}, "sticker": {}}})
    assert not await uc.handle_telegram_update({})
    assert telegram.messages == []


@pytest.mark.asyncio
async def test_telegram_chatbot_error_sends_apology(chatbot, broadcaster, telegram):
    chatbot.fail = True
    uc = ChatbotUseCase(chatbot, broadcaster, telegram)
    await uc.handle_telegram_update({"message": {"text": "hi", "chat": {"id": 5}}})
    assert telegram.messages == [(5, TELEGRAM_ERROR_REPLY)]


@pytest.mark.asyncio
async def test_telegram_not_configured(chatbot, broadcaster):
    uc = ChatbotUseCase(chatbot, broadcaster)
    assert not await uc.handle_telegram_update({"message": {"text": "hi", "chat": {"id": 5}}})
