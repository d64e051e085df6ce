"""Telegram Bot API adapter: implements TelegramPort."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from html import escape

import httpx

from repshield.application.ports.telegram_port import TelegramPort
from repshield.config import settings
from repshield.domain.errors import NotificationDeliveryError

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"


class TelegramAdapter(TelegramPort):
    def __init__(
        self,
        bot_token: str | None = None,
        admin_chat_id: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self._token = bot_token if bot_token is not None else settings.telegram_bot_token
        self._admin_chat_id = admin_chat_id if admin_chat_id is not None else settings.telegram_admin_chat_id
        self._transport = transport
        self._timeout = timeout
        if not self._token:
            logger.warning("Telegram bot token not configured")

    @property
    def configured(self) -> bool:
        return bool(self._token)

    async def send_message(self, chat_id: int, text: str) -> bool:
        if not self._token:
            logger.error("Telegram bot token not configured")
            return False

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(
                    f"{TELEGRAM_API}/bot{self._token}/sendMessage",
                    json={"chat_id": chat_id, "text": text, "parse_mode": "HTML"},
                )
        except httpx.HTTPError as e:
            logger.error("Failed to send Telegram message: %s", e)
            return False

        if not response.is_success:
            logger.error("Telegram API error: %s", response.text)
            return False
        return True

    async def send_new_lead_notification(self, lead: dict) -> None:
        if not self._token or not self._admin_chat_id:
            return

        lead_type = "Premium Business" if lead.get("leadType") == "premium" else "Standard Consultation"
        lines = [
            "<b>New RepShield Lead!</b>",
            "",
            f"<b>Name:</b> {escape(str(lead.get('name') or ''))}",
            f"<b>Email:</b> {escape(str(lead.get('email') or 'Not provided'))}",
            f"<b>Phone:</b> {escape(str(lead.get('phone') or 'Not provided'))}",
            f"<b>Company:</b> {escape(str(lead.get('company') or ''))}",
            f"<b>Brand:</b> {escape(str(lead.get('brandName') or ''))}",
            f"<b>Lead Type:</b> {lead_type}",
        ]
        if lead.get("ticketId") is not None:
            lines.append(f"<b>Ticket:</b> REP-{int(lead['ticketId']):04d}")
        summary = lead.get("scanSummary")
        if summary:
            lines.append(
                f"<b>Scan:</b> {summary.get('totalMentions', 0)} mentions, "
                f"risk {escape(str(summary.get('riskLevel', 'unknown')))}"
            )
        lines += ["", f"<b>Time:</b> {datetime.now(timezone.utc):%Y-%m-%d %H:%M UTC}"]

        if not await self.send_message(self._admin_chat_id, "\n".join(lines)):
            raise NotificationDeliveryError("Telegram lead notification was not delivered")
