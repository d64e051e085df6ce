"""Exception → HTTP response mapping."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from repshield.domain.errors import (
    IllegalTransitionError,
    RateLimitExceededError,
    TicketNotFoundError,
)

logger = logging.getLogger(__name__)


def _field(loc: tuple) -> str:
    # drop the leading "body" / "query" / "path" segment
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request data",
            "errors": [
                {"field": _field(tuple(e.get("loc", ()))), "message": e.get("msg", "")}
                for e in exc.errors()
            ],
        },
    )


async def ticket_not_found_handler(request: Request, exc: TicketNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"success": False, "error": str(exc)})


async def illegal_transition_handler(request: Request, exc: IllegalTransitionError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={
            "success": False,
            "error": str(exc),
            "from": exc.from_status,
            "to": exc.to_status,
        },
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceededError) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": str(exc), "retryAfter": exc.retry_after},
        headers={"Retry-After": str(exc.retry_after)},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(TicketNotFoundError, ticket_not_found_handler)
    app.add_exception_handler(IllegalTransitionError, illegal_transition_handler)
    app.add_exception_handler(RateLimitExceededError, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
