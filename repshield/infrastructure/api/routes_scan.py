"""Scan endpoints: quick live scan, comprehensive scan, cached sessions."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from repshield.adapters.persistence.database import get_session
from repshield.application.use_cases.error_recovery import fallback_payload
from repshield.application.use_cases.live_scan import LiveScannerUseCase
from repshield.domain.entities.scan import ScanRequest, ScanResult
from repshield.domain.errors import ScanUnavailableError
from repshield.domain.value_objects.enums import ScanPriority
from repshield.infrastructure.api.dependencies import (
    get_container,
    get_live_scanner_uc,
    scan_rate_limit,
)
from repshield.infrastructure.api.schemas import ScanBody
from repshield.infrastructure.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scans"])


@router.post("/live-scan", dependencies=[Depends(scan_rate_limit)])
async def live_scan(
    body: ScanBody,
    scanner: LiveScannerUseCase = Depends(get_live_scanner_uc),
    session: AsyncSession = Depends(get_session),
):
    """Quick Reddit scan with up to three preview mentions."""
    request = _to_request(body, ScanPriority.QUICK)
    return await _run_scan(scanner.quick_scan, request, session)


@router.post("/comprehensive-scan", dependencies=[Depends(scan_rate_limit)])
async def comprehensive_scan(
    body: ScanBody,
    scanner: LiveScannerUseCase = Depends(get_live_scanner_uc),
    session: AsyncSession = Depends(get_session),
):
    """Reddit + web platforms scan; always opens a specialist ticket."""
    request = _to_request(body, ScanPriority.COMPREHENSIVE)
    return await _run_scan(scanner.comprehensive_scan, request, session)


@router.get("/scan-sessions/{scan_id}")
async def get_scan_session(scan_id: str, container: ServiceContainer = Depends(get_container)):
    scan_session = container.sessions.get(scan_id)
    if scan_session is None:
        raise HTTPException(status_code=404, detail="Scan session not found or expired")
    return {
        "success": True,
        "data": {
            "result": scan_session.result.to_dict(),
            "fullData": scan_session.full_data,
            "timestamp": scan_session.timestamp,
        },
    }


def _to_request(body: ScanBody, priority: ScanPriority) -> ScanRequest:
    return ScanRequest(
        brand_name=body.brand_name,
        priority=priority,
        platforms=body.platforms or ["reddit"],
        user_email=body.user_email,
    )


async def _run_scan(
    scan: Callable[[ScanRequest], Awaitable[ScanResult]],
    request: ScanRequest,
    session: AsyncSession,
):
    try:
        result = await scan(request)
        await session.commit()
    except ScanUnavailableError as e:
        # keep the scan_started event
        await session.commit()
        data = e.outcome.data if e.outcome is not None and e.outcome.data else fallback_payload(str(e))
        return {"success": True, "data": data, "unavailable": True, "message": str(e)}
    except Exception:
        logger.exception("%s scan failed for %s", request.priority.value, request.brand_name)
        await session.rollback()
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error", "data": fallback_payload()},
        )

    return {"success": True, "data": result.to_dict(), "ticketId": result.ticket_id}
