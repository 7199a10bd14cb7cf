"""
Padel slot endpoints backed by the Playtomic API.

``/slots`` and ``/clubs`` serve the aggregated views; ``/tenants``,
``/availability`` and ``/resources`` are thin proxies over the upstream
client. Upstream failures never surface as errors here: the response is
simply an empty (or partial) list.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from app.models import AvailabilitySlot, ClubInfo, Resource, Tenant, TimeSlot
from app.rate_limit import STRICT, limiter
from app.services.aggregator import normalize_availability
from app.services.playtomic.config import REGIONS_BY_KEY
from app.services.registry import registry

router = APIRouter(prefix="/api/playtomic", tags=["playtomic"])

SLOTS_CACHE_CONTROL = "public, s-maxage=300, stale-while-revalidate=60"
CLUBS_CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=60"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _require(value: str | None, name: str) -> str:
    if not value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing required parameter: {name}",
        )
    return value


def _require_date(value: str | None) -> str:
    value = _require(value, "date")
    try:
        if not _DATE_RE.match(value):
            raise ValueError(value)
        date.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date {value!r}, expected YYYY-MM-DD",
        ) from None
    return value


@router.get(
    "/slots",
    response_model=list[TimeSlot],
    response_model_by_alias=True,
    operation_id="listSlots",
    summary="All bookable slots across Bali clubs for one date",
)
async def list_slots(
    response: Response,
    date_: str | None = Query(None, alias="date", description="YYYY-MM-DD"),
) -> list[TimeSlot]:
    date_str = _require_date(date_)
    slots = await registry.aggregator.fetch_slots_for_date(date_str)
    response.headers["Cache-Control"] = SLOTS_CACHE_CONTROL
    return slots


@router.get(
    "/clubs",
    response_model=list[ClubInfo],
    operation_id="listClubs",
    summary="Unique clubs with their assigned region",
)
async def list_clubs(response: Response) -> list[ClubInfo]:
    clubs = await registry.aggregator.fetch_all_clubs()
    response.headers["Cache-Control"] = CLUBS_CACHE_CONTROL
    return clubs


@router.get(
    "/tenants",
    response_model=list[Tenant],
    operation_id="listTenants",
    summary="Raw tenant search for one region",
)
async def list_tenants(
    location: str | None = Query(None, description="ubud or sanur"),
) -> list[Tenant]:
    key = _require(location, "location").lower()
    region = REGIONS_BY_KEY.get(key)
    if region is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown location {location!r}; use one of {', '.join(REGIONS_BY_KEY)}",
        )
    return await registry.client.fetch_tenants(region)


@router.get(
    "/availability",
    response_model=list[AvailabilitySlot],
    operation_id="getAvailability",
    summary="Availability of one club for one date, in Bali time",
)
async def get_availability(
    tenant_id: str | None = Query(None),
    date_: str | None = Query(None, alias="date", description="YYYY-MM-DD"),
) -> list[AvailabilitySlot]:
    tenant = _require(tenant_id, "tenant_id")
    date_str = _require_date(date_)
    entries = await registry.client.fetch_availability(tenant, date_str)
    return normalize_availability(entries)


@router.get(
    "/resources",
    response_model=list[Resource],
    operation_id="listResources",
    summary="Courts of one club",
)
async def list_resources(tenant_id: str | None = Query(None)) -> list[Resource]:
    return await registry.client.fetch_resources(_require(tenant_id, "tenant_id"))


@router.get(
    "/discover-courts",
    operation_id="discoverCourts",
    summary="Compare live court names against the fallback table",
)
@limiter.limit(STRICT)
async def discover_courts(request: Request) -> dict[str, Any]:
    return await registry.aggregator.discover_courts()
