"""Funnel analytics: conversion events from scan to completed removal."""

from __future__ import annotations

import logging

from repshield.application.ports.funnel_event_repo import FunnelEventRepository
from repshield.domain.value_objects.enums import FunnelEvent

logger = logging.getLogger(__name__)


class FunnelTracker:
    def __init__(self, repo: FunnelEventRepository):
        self._repo = repo

    async def track(
        self,
        event: FunnelEvent,
        user_id: str | None = None,
        session_id: str | None = None,
        metadata: dict | None = None,
    ) -> None:
        await self._repo.save(event.value, user_id, session_id, metadata)

    async def track_quietly(
        self,
        event: FunnelEvent,
        user_id: str | None = None,
        session_id: str | None = None,
        metadata: dict | None = None,
    ) -> None:
        """Like ``track`` but only logs failures; analytics never block the caller."""
        try:
            await self.track(event, user_id, session_id, metadata)
        except Exception:
            logger.exception("Failed to track event %s", event.value)
