"""LeadCaptureUseCase: brand-scanner form → user account + brand_scan ticket."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable

from repshield.application.ports.email_port import EmailPort
from repshield.application.ports.telegram_port import TelegramPort
from repshield.application.services.funnel_tracker import FunnelTracker
from repshield.application.services.notification_broadcaster import NotificationBroadcaster
from repshield.application.services.side_effects import SideEffectRunner
from repshield.application.use_cases.create_ticket import CreateTicketUseCase, NewTicket
from repshield.domain.entities.user import User
from repshield.domain.value_objects.enums import FunnelEvent, TicketPriority, TicketType
from repshield.domain.value_objects.request_data import BrandScanRequestData

logger = logging.getLogger(__name__)


@dataclass
class BrandScanLead:
    name: str
    email: str
    company: str
    brand_name: str
    lead_type: str = "standard"
    phone: str | None = None
    scan_results: dict | None = None


@dataclass
class LeadCaptureResult:
    ticket_id: int
    user_id: str


def _lead_priority(lead_type: str) -> TicketPriority:
    try:
        return TicketPriority(lead_type)
    except ValueError:
        return TicketPriority.STANDARD


class LeadCaptureUseCase:
    def __init__(
        self,
        create_ticket: CreateTicketUseCase,
        telegram: TelegramPort,
        email: EmailPort,
        funnel: FunnelTracker,
        broadcaster: NotificationBroadcaster,
        runner: SideEffectRunner,
        commit: Callable[[], Awaitable[None]] | None = None,
    ):
        self._create_ticket = create_ticket
        self._telegram = telegram
        self._email = email
        self._funnel = funnel
        self._broadcaster = broadcaster
        self._runner = runner
        self._commit = commit

    async def execute(self, lead: BrandScanLead) -> LeadCaptureResult:
        owner = User.from_lead(lead.name, lead.email)
        ticket = await self._create_ticket.execute(
            NewTicket(
                owner=owner,
                type=TicketType.BRAND_SCAN,
                title=f"Brand Scan: {lead.brand_name}",
                priority=_lead_priority(lead.lead_type),
                description=(
                    f"New lead from brand scanner for {lead.brand_name}. "
                    f"User: {lead.name} ({lead.email}), Company: {lead.company}"
                ),
                request_data=BrandScanRequestData(
                    name=lead.name,
                    email=lead.email,
                    company=lead.company,
                    brand_name=lead.brand_name,
                    lead_type=lead.lead_type,
                    phone=lead.phone,
                    scan_results=lead.scan_results,
                    submission_time=datetime.now(timezone.utc).isoformat(),
                ),
            )
        )
        if self._commit is not None:
            # the lead is durable before admins are alerted about it
            await self._commit()

        summary = None
        if lead.scan_results:
            summary = {
                "totalMentions": lead.scan_results.get("totalMentions", 0),
                "riskLevel": lead.scan_results.get("riskLevel", "unknown"),
                "sentiment": lead.scan_results.get("overallSentiment", "neutral"),
            }
        notification = {
            "type": "Brand Scanner Lead",
            "name": lead.name,
            "email": lead.email,
            "company": lead.company,
            "brandName": lead.brand_name,
            "leadType": lead.lead_type,
            "ticketId": ticket.id,
            "scanSummary": summary,
        }

        await self._runner.run(
            [
                ("telegram:new_lead", lambda: self._telegram.send_new_lead_notification(notification)),
                ("email:contact_notification", lambda: self._email.send_contact_notification(
                    lead.name,
                    lead.email,
                    lead.company,
                    "RepShield Brand Scanner",
                    f"New lead from brand scanner: {lead.brand_name}. "
                    "Account created and ready for specialist analysis.",
                )),
                ("funnel:lead_form_submitted", lambda: self._funnel.track(
                    FunnelEvent.LEAD_FORM_SUBMITTED,
                    user_id=owner.id,
                    metadata={"ticketId": ticket.id, "brandName": lead.brand_name},
                )),
            ],
            ticket_id=ticket.id,
        )
        self._broadcaster.broadcast_new_lead(notification)

        logger.info("Captured lead %s for brand %s (ticket %s)", owner.id, lead.brand_name, ticket.id)
        return LeadCaptureResult(ticket_id=ticket.id, user_id=owner.id)
