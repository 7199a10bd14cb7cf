"""
Low-level HTTP client for the Playtomic API.

Handles request construction, base-URL fallback, response caching and
JSON -> model parsing. The upstream is treated as unreliable: every public
method returns an empty list instead of raising, so one bad club or region
never takes down a whole aggregation.

A single instance is shared across the app lifetime.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

import httpx

from app.config import PLAYTOMIC_TIMEOUT
from app.models import AvailabilitySlot, Resource, Tenant
from app.services.cache import TTLCache
from app.services.playtomic.api_models import (
    parse_availability,
    parse_resources,
    parse_tenants,
)
from app.services.playtomic.config import (
    AVAILABILITY_PATH,
    BASE_URLS,
    DEFAULT_HEADERS,
    ENDPOINT_TTLS,
    REGIONS_BY_KEY,
    RESOURCES_PATH,
    SPORT_ID,
    TENANT_PAGE_SIZE,
    TENANTS_PATH,
    Region,
)

logger = logging.getLogger(__name__)

_Params = dict[str, str | int]


def _cache_key(endpoint: str, path: str, params: _Params) -> tuple:
    return (endpoint, path, tuple(sorted((k, str(v)) for k, v in params.items())))


class PlaytomicClient:
    """Async HTTP client for the public Playtomic API."""

    def __init__(
        self,
        cache: TTLCache | None = None,
        *,
        base_urls: tuple[str, ...] = BASE_URLS,
        timeout: float = PLAYTOMIC_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._cache = cache if cache is not None else TTLCache()
        self._base_urls = base_urls
        self._client = httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    # ── Transport ─────────────────────────────────────────────────────

    async def _get_json(self, path: str, params: _Params | None = None) -> Any | None:
        """
        GET *path* against each base URL in turn.

        Returns the decoded body of the first 2xx JSON response, or None
        when every base URL failed.
        """
        for base_url in self._base_urls:
            url = f"{base_url}{path}"
            try:
                resp = await self._client.get(url, params=params)
            except httpx.HTTPError as exc:
                logger.warning("Playtomic request failed: %s (%s)", url, exc.__class__.__name__)
                continue

            if not resp.is_success:
                logger.warning("Playtomic %s returned HTTP %d", url, resp.status_code)
                continue

            content_type = resp.headers.get("content-type", "")
            if "application/json" not in content_type:
                logger.warning("Non-JSON response from %s (content-type=%r)", url, content_type)
                continue

            try:
                return resp.json()
            except ValueError:
                logger.warning("Malformed JSON body from %s", url)
                continue

        return None

    async def _cached_fetch(
        self,
        endpoint: str,
        path: str,
        params: _Params,
        parse: Callable[[Any], list],
    ) -> list:
        key = _cache_key(endpoint, path, params)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        payload = await self._get_json(path, params)
        if payload is None:
            return []

        parsed = parse(payload)
        self._cache.set(key, parsed, ttl=ENDPOINT_TTLS[endpoint])
        return parsed

    # ── /tenants ──────────────────────────────────────────────────────

    async def fetch_tenants(self, region: Region | str) -> list[Tenant]:
        """Active padel clubs within the region's search radius."""
        if isinstance(region, str):
            region = REGIONS_BY_KEY[region]
        params: _Params = {
            "coordinate": region.coordinate,
            "radius": region.radius,
            "sport_id": SPORT_ID,
            "playtomic_status": "ACTIVE",
            "size": TENANT_PAGE_SIZE,
        }
        tenants = await self._cached_fetch(TENANTS_PATH, TENANTS_PATH, params, parse_tenants)
        logger.debug("Region %s: %d tenants", region.name, len(tenants))
        return tenants

    # ── /availability ─────────────────────────────────────────────────

    async def fetch_availability(self, tenant_id: str, target_date: date | str) -> list[AvailabilitySlot]:
        """Raw (UTC) availability for every resource of *tenant_id* on one day."""
        date_str = target_date if isinstance(target_date, str) else target_date.isoformat()
        params: _Params = {
            "sport_id": SPORT_ID,
            "tenant_id": tenant_id,
            "start_min": f"{date_str}T00:00:00",
            "start_max": f"{date_str}T23:59:59",
        }
        return await self._cached_fetch(
            AVAILABILITY_PATH, AVAILABILITY_PATH, params, parse_availability
        )

    # ── /tenants/{id}/resources ───────────────────────────────────────

    async def fetch_resources(self, tenant_id: str) -> list[Resource]:
        """Courts of a tenant with their configured names."""
        path = RESOURCES_PATH.format(tenant_id=tenant_id)
        params: _Params = {"sport_id": SPORT_ID}
        return await self._cached_fetch(RESOURCES_PATH, path, params, parse_resources)
