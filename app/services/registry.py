"""
Service registry – owns the long-lived service objects.

Builds the response cache, the Playtomic client, the court name resolver,
the slot aggregator and the warm-up worker once at application startup,
and tears them down on shutdown. Routers reach every service through the
module-level ``registry`` instance.
"""

from __future__ import annotations

import logging

from app.config import SLOT_WARMUP_ENABLED
from app.services.aggregator import SlotAggregator
from app.services.background import SlotWarmer
from app.services.cache import SlotCache, TTLCache
from app.services.court_names import CourtNameResolver
from app.services.playtomic.client import PlaytomicClient

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """
    Wiring for the Playtomic integration.

    Pass a custom *client* (anything exposing ``fetch_tenants``,
    ``fetch_availability`` and ``fetch_resources``) to run without HTTP.
    """

    def __init__(self, client: object | None = None, *, warmup: bool = SLOT_WARMUP_ENABLED) -> None:
        self.response_cache = TTLCache()
        self.slot_cache = SlotCache()
        self.resolver = CourtNameResolver()
        self.client = client if client is not None else PlaytomicClient(self.response_cache)
        self.aggregator = SlotAggregator(self.client, self.resolver, self.slot_cache)
        self.warmer = SlotWarmer(self.aggregator, self.slot_cache) if warmup else None

    async def start(self) -> None:
        """Start background work (cache warm-up)."""
        if self.warmer is not None:
            await self.warmer.start()

    async def stop(self) -> None:
        """Stop background tasks and close the HTTP client."""
        if self.warmer is not None:
            await self.warmer.stop()
        close = getattr(self.client, "close", None)
        if close is not None:
            await close()
        logger.info("Service registry stopped")


# ── Singleton instance ────────────────────────────────────────────────────
registry = ServiceRegistry()
