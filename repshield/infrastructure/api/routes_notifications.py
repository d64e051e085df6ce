"""Live admin notifications (server-sent events), chatbot and Telegram webhook."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, StreamingResponse

from repshield.application.services.notification_broadcaster import QueueChannel, format_sse
from repshield.application.use_cases.chatbot import ChatbotUseCase
from repshield.infrastructure.api.dependencies import get_chatbot_uc, get_container
from repshield.infrastructure.api.schemas import ChatbotBody
from repshield.infrastructure.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])

KEEPALIVE_SECONDS = 30.0


@router.get("/notifications/stream")
async def notification_stream(request: Request, container: ServiceContainer = Depends(get_container)):
    """SSE stream of chatbot, lead and scan events for the admin dashboard."""
    broadcaster = container.broadcaster
    client_id = uuid.uuid4().hex
    channel = QueueChannel()
    broadcaster.add_client(client_id, channel)
    logger.info("Notification client %s connected (%d active)", client_id, broadcaster.get_active_clients_count())

    async def events():
        try:
            yield format_sse({
                "type": "connected",
                "message": "Notification stream connected",
                "timestamp": int(time.time() * 1000),
            })
            while True:
                try:
                    message = await asyncio.wait_for(channel.receive(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    if await request.is_disconnected():
                        break
                    yield ": keep-alive\n\n"
                    continue
                if message is None:
                    break
                yield message
        finally:
            broadcaster.remove_client(client_id)
            channel.close()
            logger.info("Notification client %s disconnected", client_id)

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive", "X-Accel-Buffering": "no"},
    )


@router.post("/chatbot")
async def chatbot(body: ChatbotBody, request: Request, uc: ChatbotUseCase = Depends(get_chatbot_uc)):
    response = await uc.reply(
        body.message,
        body.history(),
        user_info={
            "userAgent": request.headers.get("user-agent"),
            "ip": request.client.host if request.client else None,
        },
    )
    return {"response": response}


@router.post("/telegram/webhook")
async def telegram_webhook(update: dict, uc: ChatbotUseCase = Depends(get_chatbot_uc)):
    await uc.handle_telegram_update(update)
    return PlainTextResponse("OK")
