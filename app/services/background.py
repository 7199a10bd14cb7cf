"""
Periodic background work.

``SlotWarmer`` pre-fetches the slot lists for the date strip (today plus
the next 13 days) once per Bali calendar day, so the first visitor of the
day is served from the slot cache instead of waiting on Playtomic.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from app.config import SLOT_WARMUP_DAYS, SLOT_WARMUP_INTERVAL
from app.services.aggregator import SlotAggregator
from app.services.bali_time import get_date_string, get_next_days
from app.services.cache import SlotCache

logger = logging.getLogger(__name__)


class BackgroundWorker:
    """Base class for services that run a periodic background loop."""

    def __init__(self, *, interval: float, name: str) -> None:
        self._interval = interval
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        self._task = asyncio.create_task(self._loop(), name=self._name)
        logger.info("%s started (every %ds)", self._name, self._interval)

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            logger.info("%s stopped", self._name)

    async def _tick(self) -> None:
        raise NotImplementedError

    async def _loop(self) -> None:
        while True:
            try:
                await self._tick()
            except Exception:
                logger.exception("%s tick failed, will retry", self._name)
            await asyncio.sleep(self._interval)


class SlotWarmer(BackgroundWorker):
    """Fills the slot cache for the upcoming days, once per day."""

    def __init__(
        self,
        aggregator: SlotAggregator,
        slot_cache: SlotCache,
        *,
        days: int = SLOT_WARMUP_DAYS,
        interval: float = SLOT_WARMUP_INTERVAL,
        today: Callable[[], str] = get_date_string,
    ) -> None:
        super().__init__(interval=interval, name="slot-warmup")
        self._aggregator = aggregator
        self._slot_cache = slot_cache
        self._days = days
        self._today = today

    async def _tick(self) -> None:
        today = self._today()
        if not self._slot_cache.needs_warmup(today):
            return

        dates = get_next_days(self._days)
        logger.info("Warming slot cache for %s .. %s", dates[0], dates[-1])
        for date_str in dates:
            await self._aggregator.fetch_slots_for_date(date_str)
