"""LiveScannerUseCase: quick and comprehensive brand scans.

Quick scan: one call to the quick provider, up to 3 preview mentions, and a
ticket only for high-risk results or when the visitor left an email.

Comprehensive scan: Reddit API and web platforms run concurrently; a web
failure leaves the web section out, a Reddit failure makes the scan
unavailable. Always opens a ticket for a specialist.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Awaitable, Callable

from repshield.application.ports.scan_provider_port import (
    ScanProviderPort,
    WebScanProviderPort,
)
from repshield.application.services.funnel_tracker import FunnelTracker
from repshield.application.services.notification_broadcaster import NotificationBroadcaster
from repshield.application.services.scan_sessions import ScanSessionStore
from repshield.application.use_cases.create_ticket import (
    CreateTicketUseCase,
    NewTicket,
    owner_for_email,
)
from repshield.application.use_cases.error_recovery import ErrorRecovery, RecoveryOutcome
from repshield.domain.entities.scan import (
    ProviderSearchResult,
    RedditPlatformSummary,
    ScanRequest,
    ScanResult,
    ScanSession,
    WebPlatformSummary,
    WebScanResult,
)
from repshield.domain.errors import ScanUnavailableError
from repshield.domain.policies.mention_ranking import extract_top_mentions
from repshield.domain.policies.next_steps import (
    generate_comprehensive_next_steps,
    generate_next_steps,
)
from repshield.domain.policies.risk_scoring import calculate_risk_score, determine_risk_level
from repshield.domain.value_objects.enums import (
    FunnelEvent,
    RiskLevel,
    TicketPriority,
    TicketType,
)
from repshield.domain.value_objects.request_data import ScanLeadRequestData

logger = logging.getLogger(__name__)

QUICK_TOP_MENTIONS = 3
COMPREHENSIVE_TOP_MENTIONS = 5


def new_scan_id(prefix: str = "scan") -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class LiveScannerUseCase:
    def __init__(
        self,
        quick_provider: ScanProviderPort,
        reddit_provider: ScanProviderPort,
        web_provider: WebScanProviderPort,
        recovery: ErrorRecovery,
        sessions: ScanSessionStore,
        broadcaster: NotificationBroadcaster,
        create_ticket: CreateTicketUseCase,
        funnel: FunnelTracker,
        clock: Callable[[], float] = time.time,
        commit: Callable[[], Awaitable[None]] | None = None,
    ):
        self._quick = quick_provider
        self._reddit = reddit_provider
        self._web = web_provider
        self._recovery = recovery
        self._sessions = sessions
        self._broadcaster = broadcaster
        self._create_ticket = create_ticket
        self._funnel = funnel
        self._clock = clock
        self._commit = commit

    async def quick_scan(self, request: ScanRequest) -> ScanResult:
        started = time.perf_counter()
        scan_id = new_scan_id("scan")
        await self._track(FunnelEvent.SCAN_STARTED, scan_id, request)

        outcome = await self._recovery.execute_with_recovery(
            lambda: self._quick.search_brand(request.brand_name),
            "quick scan",
            self._quick.reauthenticate,
        )
        reddit = self._unwrap(outcome, request)

        now = self._clock()
        score = calculate_risk_score(reddit, None, now)
        level = determine_risk_level(score, reddit.total_found)
        result = ScanResult(
            scan_id=scan_id,
            brand_name=request.brand_name,
            total_mentions=reddit.total_found,
            risk_level=level,
            risk_score=score,
            reddit=RedditPlatformSummary(
                posts=len(reddit.posts),
                comments=len(reddit.comments),
                sentiment=reddit.sentiment,
                top_mentions=extract_top_mentions(reddit, QUICK_TOP_MENTIONS, now),
            ),
            processing_time=0,
            next_steps=generate_next_steps(level, reddit.total_found),
        )

        if level == RiskLevel.HIGH or request.user_email:
            ticket = await self._open_scan_ticket(result, request)
            result.ticket_id = ticket.id

        return await self._finish(result, request, started, {"reddit": reddit.to_dict()})

    async def comprehensive_scan(self, request: ScanRequest) -> ScanResult:
        started = time.perf_counter()
        scan_id = new_scan_id("comprehensive")
        await self._track(FunnelEvent.SCAN_STARTED, scan_id, request)

        reddit_outcome, web = await asyncio.gather(
            self._recovery.execute_with_recovery(
                lambda: self._reddit.search_brand(request.brand_name),
                "comprehensive reddit scan",
                self._reddit.reauthenticate,
            ),
            self._web.scan(request.brand_name, request.platforms),
            return_exceptions=True,
        )
        if isinstance(reddit_outcome, BaseException):
            raise reddit_outcome
        reddit = self._unwrap(reddit_outcome, request)

        web_result: WebScanResult | None = None
        if isinstance(web, BaseException):
            logger.warning("Web scan failed for %s: %s", request.brand_name, web)
        else:
            web_result = web

        now = self._clock()
        total = reddit.total_found + (web_result.total_mentions if web_result else 0)
        score = calculate_risk_score(reddit, web_result, now)
        level = determine_risk_level(score, total)
        result = ScanResult(
            scan_id=scan_id,
            brand_name=request.brand_name,
            total_mentions=total,
            risk_level=level,
            risk_score=score,
            reddit=RedditPlatformSummary(
                posts=len(reddit.posts),
                comments=len(reddit.comments),
                sentiment=reddit.sentiment,
                top_mentions=extract_top_mentions(reddit, COMPREHENSIVE_TOP_MENTIONS, now),
            ),
            processing_time=0,
            next_steps=generate_comprehensive_next_steps(level, total),
            web=(
                WebPlatformSummary(mentions=web_result.total_mentions, sources=list(web_result.sources))
                if web_result else None
            ),
        )

        ticket = await self._open_scan_ticket(result, request)
        result.ticket_id = ticket.id

        full_data = {
            "reddit": reddit.to_dict(),
            "web": (
                {
                    "totalMentions": web_result.total_mentions,
                    "negativeMentions": web_result.negative_mentions,
                    "sources": web_result.sources,
                }
                if web_result else None
            ),
        }
        return await self._finish(result, request, started, full_data)

    def get_scan_session(self, scan_id: str) -> ScanSession | None:
        return self._sessions.get(scan_id)

    def cleanup(self) -> int:
        return self._sessions.cleanup()

    # ─── Internals ────────────────────────────────────────────────

    def _unwrap(self, outcome: RecoveryOutcome, request: ScanRequest) -> ProviderSearchResult:
        if outcome.success:
            return outcome.data
        message = (outcome.data or {}).get("message", "Scan unavailable")
        logger.warning("Scan for %s unavailable: %s", request.brand_name, message)
        raise ScanUnavailableError(message, outcome)

    async def _open_scan_ticket(self, result: ScanResult, request: ScanRequest):
        priority = TicketPriority.URGENT if result.risk_level == RiskLevel.HIGH else TicketPriority.NORMAL
        return await self._create_ticket.execute(
            NewTicket(
                owner=owner_for_email(request.user_email),
                type=TicketType.SCAN_LEAD,
                title=f"Brand Scan: {request.brand_name}",
                priority=priority,
                description=(
                    f"{request.priority.value.capitalize()} scan found {result.total_mentions} "
                    f"mentions of {request.brand_name} (risk {result.risk_level.value}, "
                    f"score {result.risk_score})."
                ),
                request_data=ScanLeadRequestData(
                    brand_name=request.brand_name,
                    scan_id=result.scan_id,
                    scan_priority=request.priority.value,
                    risk_level=result.risk_level.value,
                    risk_score=result.risk_score,
                    total_mentions=result.total_mentions,
                    user_email=request.user_email,
                    scan_results=result.to_dict(),
                ),
            )
        )

    async def _finish(
        self, result: ScanResult, request: ScanRequest, started: float, full_data: dict
    ) -> ScanResult:
        result.processing_time = int((time.perf_counter() - started) * 1000)
        if self._commit is not None:
            # any scan ticket is durable before the session cache and observers see its id
            await self._commit()
        self._sessions.store(result, full_data)
        self._broadcaster.broadcast_brand_scan(request.brand_name, result.to_dict())
        await self._track(
            FunnelEvent.SCAN_COMPLETED,
            result.scan_id,
            request,
            riskLevel=result.risk_level.value,
            totalMentions=result.total_mentions,
        )
        logger.info(
            "%s scan %s for %s: %d mentions, risk %s (%d) in %dms",
            request.priority.value, result.scan_id, request.brand_name,
            result.total_mentions, result.risk_level.value, result.risk_score,
            result.processing_time,
        )
        return result

    async def _track(self, event: FunnelEvent, scan_id: str, request: ScanRequest, **extra) -> None:
        await self._funnel.track_quietly(
            event,
            user_id=owner_for_email(request.user_email).id if request.user_email else None,
            session_id=scan_id,
            metadata={"brandName": request.brand_name, "priority": request.priority.value, **extra},
        )


