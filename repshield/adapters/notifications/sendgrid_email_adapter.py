"""SendGrid email adapter: implements EmailPort via the v3 mail/send API.

Without SENDGRID_API_KEY every email is only logged (dev mode).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from html import escape

import httpx

from repshield.application.ports.email_port import EmailPort
from repshield.config import settings

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"

_FOOTER = '<hr><p style="font-size: 12px; color: #666;">RepShield Reputation Management</p>'


def _case(ticket_id: int) -> str:
    return f"REP-{ticket_id:04d}"


class SendGridEmailAdapter(EmailPort):
    def __init__(
        self,
        api_key: str | None = None,
        admin_email: str | None = None,
        from_email: str | None = None,
        app_base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self._api_key = api_key if api_key is not None else settings.sendgrid_api_key
        self._admin_email = admin_email or settings.sender_email
        self._from_email = from_email or settings.from_email or self._admin_email
        self._app_base_url = (app_base_url or settings.app_base_url).rstrip("/")
        self._transport = transport
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def send_ticket_quoted(
        self, email: str, ticket_id: int, amount: str, report: str, payment_link: str
    ) -> None:
        await self._send(
            email,
            f"Your quote is ready - {_case(ticket_id)}",
            f"""
            <h2>Your removal quote is ready</h2>
            <p>Our specialist reviewed case <strong>{_case(ticket_id)}</strong>.</p>
            <p><strong>Quoted price:</strong> {escape(amount)}</p>
            <h3>Specialist report</h3>
            <p style="background: #f5f5f5; padding: 15px; border-radius: 5px;">{escape(report or "See your dashboard for details.")}</p>
            <p><a href="{escape(payment_link)}">Review and pay</a></p>
            {_FOOTER}
            """,
        )

    async def send_ticket_approved(self, email: str, ticket_id: int) -> None:
        await self._send(
            email,
            f"Case approved - {_case(ticket_id)}",
            f"""
            <h2>Your case has been approved</h2>
            <p>Case <strong>{_case(ticket_id)}</strong> is approved and queued for our removal team.</p>
            <p>Track progress on your <a href="{escape(self._dashboard(ticket_id))}">dashboard</a>.</p>
            {_FOOTER}
            """,
        )

    async def send_ticket_in_progress(self, email: str, ticket_id: int, progress: int) -> None:
        await self._send(
            email,
            f"Removal in progress - {_case(ticket_id)} ({progress}%)",
            f"""
            <h2>Work on your case is under way</h2>
            <p>Case <strong>{_case(ticket_id)}</strong> is now <strong>{progress}%</strong> complete.</p>
            <p>Track progress on your <a href="{escape(self._dashboard(ticket_id))}">dashboard</a>.</p>
            {_FOOTER}
            """,
        )

    async def send_ticket_completed(self, email: str, ticket_id: int, completed_at: str) -> None:
        await self._send(
            email,
            f"Removal completed - {_case(ticket_id)}",
            f"""
            <h2>Your removal is complete</h2>
            <p>Case <strong>{_case(ticket_id)}</strong> was completed on {escape(completed_at)}.</p>
            <p>The full report is available on your <a href="{escape(self._dashboard(ticket_id))}">dashboard</a>.</p>
            {_FOOTER}
            """,
        )

    async def send_contact_notification(
        self, name: str, email: str, company: str, website: str, message: str
    ) -> None:
        await self._send(
            self._admin_email,
            f"New Contact Form Submission from {name}",
            f"""
            <h2>New Contact Form Submission</h2>
            <p><strong>Name:</strong> {escape(name)}</p>
            <p><strong>Email:</strong> {escape(email)}</p>
            <p><strong>Company:</strong> {escape(company or "Not provided")}</p>
            <p><strong>Website:</strong> {escape(website or "Not provided")}</p>
            <h3>Message:</h3>
            <p style="background: #f5f5f5; padding: 15px; border-radius: 5px;">{escape(message)}</p>
            <p><strong>Time:</strong> {datetime.now(timezone.utc).isoformat()}</p>
            {_FOOTER}
            """,
        )

    def _dashboard(self, ticket_id: int) -> str:
        return f"{self._app_base_url}/dashboard?case={ticket_id}"

    async def _send(self, to: str, subject: str, html: str) -> None:
        if not self._api_key:
            logger.info("DEV MODE - would send email '%s' to %s", subject, to)
            return

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self._from_email},
            "subject": subject,
            "content": [{"type": "text/html", "value": html}],
        }
        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            response = await client.post(
                SENDGRID_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        response.raise_for_status()
        logger.info("Email '%s' sent to %s", subject, to)
