"""
Process-local caching for upstream Playtomic data.

Two layers:

* ``TTLCache`` memoizes individual upstream responses (tenants,
  availability, resources) with a per-entry TTL.
* ``SlotCache`` holds fully aggregated slot lists keyed by date, with a
  shorter TTL for today than for future days.

Both evict lazily on read and have no capacity bound; the key space is
small (tenants x dates). Each serving process holds its own copy, so
multiple instances may briefly disagree within one TTL window.

Usage::

    cache = TTLCache()
    cache.set(("tenants", "ubud"), tenants, ttl=600)
    cache.get(("tenants", "ubud"))      # -> tenants, or None once expired
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from datetime import date
from typing import Any

from app.config import SLOTS_FUTURE_TTL, SLOTS_TODAY_TTL
from app.models import TimeSlot
from app.services.bali_time import bali_today

logger = logging.getLogger(__name__)

DEFAULT_TTL = 5 * 60.0

Clock = Callable[[], float]


@dataclass
class CacheEntry:
    data: Any
    fetched_at: float
    ttl: float


class TTLCache:
    """Key -> value store where each entry expires *ttl* seconds after it was set."""

    def __init__(self, *, default_ttl: float = DEFAULT_TTL, clock: Clock = time.monotonic) -> None:
        self._store: dict[Hashable, CacheEntry] = {}
        self._default_ttl = default_ttl
        self._clock = clock

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, key: Hashable) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at > entry.ttl:
            del self._store[key]
            return None
        return entry.data

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._store)

    # ── Write ──────────────────────────────────────────────────────────

    def set(self, key: Hashable, value: Any, ttl: float | None = None) -> None:
        self._store[key] = CacheEntry(
            data=value,
            fetched_at=self._clock(),
            ttl=self._default_ttl if ttl is None else ttl,
        )

    def delete(self, key: Hashable) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()


class SlotCache:
    """
    Aggregated slot lists keyed by ``YYYY-MM-DD`` date.

    Also remembers which Bali day the 14-day window was last warmed for,
    so the warm-up worker runs once per day.
    """

    def __init__(
        self,
        *,
        today_ttl: float = SLOTS_TODAY_TTL,
        future_ttl: float = SLOTS_FUTURE_TTL,
        clock: Clock = time.monotonic,
        today: Callable[[], date] = bali_today,
    ) -> None:
        self._cache = TTLCache(clock=clock)
        self._today_ttl = today_ttl
        self._future_ttl = future_ttl
        self._today = today
        self._warmed_for: str | None = None

    def ttl_for(self, date_str: str) -> float:
        return self._today_ttl if date_str == self._today().isoformat() else self._future_ttl

    def get(self, date_str: str) -> list[TimeSlot] | None:
        cached = self._cache.get(date_str)
        return None if cached is None else list(cached)

    def set(self, date_str: str, slots: list[TimeSlot]) -> None:
        ttl = self.ttl_for(date_str)
        self._cache.set(date_str, list(slots), ttl=ttl)
        logger.info("Slot cache updated: %s -> %d slots (ttl %ds)", date_str, len(slots), ttl)

    def needs_warmup(self, today: str) -> bool:
        """True the first time it is called for a given day, False afterwards."""
        if self._warmed_for == today:
            return False
        self._warmed_for = today
        return True

    def clear(self) -> None:
        self._cache.clear()
        self._warmed_for = None
