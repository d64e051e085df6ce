"""RepShield — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from repshield.adapters.persistence.database import engine
from repshield.config import settings
from repshield.infrastructure.api.error_handlers import register_error_handlers
from repshield.infrastructure.api.routes_health import router as health_router
from repshield.infrastructure.api.routes_notifications import router as notifications_router
from repshield.infrastructure.api.routes_scan import router as scan_router
from repshield.infrastructure.api.routes_tickets import router as tickets_router
from repshield.infrastructure.container import ServiceContainer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)

    container: ServiceContainer = app.state.container
    container.start()
    yield
    await container.shutdown()
    await engine.dispose()


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="RepShield",
        description="Reddit brand monitoring, live risk scans and removal ticket lifecycle",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.container = container or ServiceContainer()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(scan_router, prefix="/api")
    app.include_router(tickets_router, prefix="/api")
    app.include_router(notifications_router, prefix="/api")

    return app


app = create_app()
