"""Tests for the SendGrid and Telegram adapters over a mocked transport."""

import json

import httpx
import pytest

from repshield.adapters.notifications.sendgrid_email_adapter import SENDGRID_URL, SendGridEmailAdapter
from repshield.adapters.notifications.telegram_adapter import TelegramAdapter
from repshield.domain.errors import NotificationDeliveryError


class Recorder:
    def __init__(self, status=202):
        self.requests = []
        self.status = status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json={"ok": self.status < 400})


# ─── SendGrid ───────────────────────────────────────────────────────


def _sendgrid(recorder, api_key="sg-key"):
    return SendGridEmailAdapter(
        api_key=api_key,
        admin_email="admin@repshield.io",
        from_email="noreply@repshield.io",
        app_base_url="https://app.test",
        transport=httpx.MockTransport(recorder),
    )


@pytest.mark.asyncio
async def test_dev_mode_sends_nothing():
    recorder = Recorder()
    await _sendgrid(recorder, api_key="").send_ticket_approved("client@acme.io", 3)
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_quoted_email_payload():
    recorder = Recorder()
    await _sendgrid(recorder).send_ticket_quoted(
        "client@acme.io", 7, "$899", "One thread", "https://app.test/dashboard?case=7&action=pay"
    )
    request = recorder.requests[0]
    assert str(request.url) == SENDGRID_URL
    assert request.headers["Authorization"] == "Bearer sg-key"
    payload = json.loads(request.content)
    assert payload["personalizations"][0]["to"] == [{"email": "client@acme.io"}]
    assert payload["from"] == {"email": "noreply@repshield.io"}
    assert payload["subject"] == "Your quote is ready - REP-0007"
    assert "$899" in payload["content"][0]["value"]


@pytest.mark.asyncio
async def test_contact_notification_goes_to_admin():
    recorder = Recorder()
    await _sendgrid(recorder).send_contact_notification(
        "Jane", "jane@acme.io", "Acme", "RepShield Brand Scanner", "New lead"
    )
    payload = json.loads(recorder.requests[0].content)
    assert payload["personalizations"][0]["to"] == [{"email": "admin@repshield.io"}]


@pytest.mark.asyncio
async def test_contact_notification_escapes_visitor_input():
    recorder = Recorder()
    await _sendgrid(recorder).send_contact_notification(
        "<script>alert(1)</script>",
        "jane@acme.io",
        "<b>Acme</b>",
        "RepShield Brand Scanner",
        "New lead from brand scanner: <img src=x onerror=alert(1)>",
    )
    html = json.loads(recorder.requests[0].content)["content"][0]["value"]
    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "<p><strong>Company:</strong> &lt;b&gt;Acme&lt;/b&gt;</p>" in html
    assert "<img" not in html


@pytest.mark.asyncio
async def test_quoted_email_escapes_report_and_link():
    recorder = Recorder()
    await _sendgrid(recorder).send_ticket_quoted(
        "client@acme.io", 7, "<i>$899</i>", "</p><script>x</script>", "https://app.test/dashboard?case=7&action=pay"
    )
    html = json.loads(recorder.requests[0].content)["content"][0]["value"]
    assert "<script>" not in html
    assert "&lt;i&gt;$899&lt;/i&gt;" in html
    assert 'href="https://app.test/dashboard?case=7&amp;action=pay"' in html


@pytest.mark.asyncio
async def test_in_progress_links_dashboard():
    recorder = Recorder()
    await _sendgrid(recorder).send_ticket_in_progress("client@acme.io", 12, 50)
    html = json.loads(recorder.requests[0].content)["content"][0]["value"]
    assert "https://app.test/dashboard?case=12" in html
    assert "50%" in html


@pytest.mark.asyncio
async def test_rejected_email_raises():
    with pytest.raises(httpx.HTTPStatusError):
        await _sendgrid(Recorder(status=400)).send_ticket_completed("client@acme.io", 1, "2026-10-01")


# ─── Telegram ───────────────────────────────────────────────────────


def _telegram(recorder, token="bot-token", chat_id=1001):
    return TelegramAdapter(bot_token=token, admin_chat_id=chat_id, transport=httpx.MockTransport(recorder))


@pytest.mark.asyncio
async def test_send_message():
    recorder = Recorder(status=200)
    assert await _telegram(recorder).send_message(42, "hello")
    request = recorder.requests[0]
    assert request.url.path == "/botbot-token/sendMessage"
    assert json.loads(request.content) == {"chat_id": 42, "text": "hello", "parse_mode": "HTML"}


@pytest.mark.asyncio
async def test_send_message_api_error_returns_false():
    assert not await _telegram(Recorder(status=400)).send_message(42, "hello")


@pytest.mark.asyncio
async def test_send_message_network_error_returns_false():
    def down(request):
        raise httpx.ConnectError("unreachable", request=request)

    adapter = TelegramAdapter(bot_token="t", admin_chat_id=1, transport=httpx.MockTransport(down))
    assert not await adapter.send_message(1, "hello")


@pytest.mark.asyncio
async def test_send_message_without_token():
    recorder = Recorder()
    assert not await _telegram(recorder, token="").send_message(1, "hello")
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_lead_notification_formats_html():
    recorder = Recorder(status=200)
    await _telegram(recorder).send_new_lead_notification({
        "name": "Jane <script>",
        "email": "jane@acme.io",
        "company": "Acme",
        "brandName": "Acme",
        "leadType": "premium",
        "ticketId": 7,
        "scanSummary": {"totalMentions": 12, "riskLevel": "high"},
    })
    body = json.loads(recorder.requests[0].content)
    assert body["chat_id"] == 1001
    assert "Jane &lt;script&gt;" in body["text"]
    assert "Premium Business" in body["text"]
    assert "REP-0007" in body["text"]
    assert "12 mentions, risk high" in body["text"]


@pytest.mark.asyncio
async def test_lead_notification_skipped_without_admin_chat():
    recorder = Recorder(status=200)
    adapter = TelegramAdapter(bot_token="t", admin_chat_id=0, transport=httpx.MockTransport(recorder))
    await adapter.send_new_lead_notification({"name": "Jane"})
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_lead_notification_failure_raises():
    with pytest.raises(NotificationDeliveryError):
        await _telegram(Recorder(status=500)).send_new_lead_notification({"name": "Jane"})
