"""
Main FastAPI application for Padel Slot Finder.

Aggregates padel court availability from Playtomic for Ubud and Sanur
and serves it as JSON under ``/api/playtomic``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.config import ENVIRONMENT, LOG_LEVEL
from app.rate_limit import limiter
from app.routers import health, playtomic
from app.services.registry import registry

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting Padel Slot Finder (%s)", ENVIRONMENT)
    await registry.start()
    yield
    await registry.stop()


app = FastAPI(
    title="Padel Slot Finder API",
    description="Available padel court slots across Bali clubs listed on Playtomic",
    version=health.VERSION,
    lifespan=lifespan,
)

# ── Rate limiting ─────────────────────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# ── Routers ───────────────────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(playtomic.router)
