"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from repshield.adapters.persistence.database import get_session
from repshield.infrastructure.api.dependencies import get_container
from repshield.infrastructure.container import ServiceContainer

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    session: AsyncSession = Depends(get_session),
    container: ServiceContainer = Depends(get_container),
):
    """Check database connectivity and which providers are configured."""
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {e}"

    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "providers": container.provider_status(),
        "notificationClients": container.broadcaster.get_active_clients_count(),
        "scanSessions": len(container.sessions),
        "service": "RepShield",
    }
