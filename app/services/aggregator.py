"""
Slot aggregation across both Bali search regions.

For one date this:

1.  Fetches tenants for Ubud and Sanur concurrently.
2.  Merges them, dropping duplicate tenant ids (clubs near the boundary
    show up in both searches).
3.  Assigns every tenant to the nearer region's reference point; tenants
    without coordinates stay with the first region that returned them.
4.  Fetches availability and resource names for every tenant concurrently.
5.  Flattens (tenant, resource, slot) triples into ``TimeSlot`` records in
    Bali local time and sorts them by (date, time).

Concurrent requests for the same date share one in-flight task, and
finished results are kept in the ``SlotCache``. Nothing in here raises:
a failing tenant or region simply contributes no slots.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from app.models import AvailabilitySlot, ClubInfo, RawSlot, Tenant, TimeSlot
from app.services.bali_time import convert_to_bali_time
from app.services.cache import SlotCache
from app.services.court_names import CourtNameResolver, fallback_key, short_id
from app.services.geo import haversine_km
from app.services.playtomic.config import REGIONS, Region

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacedTenant:
    """A unique tenant together with the region it has been assigned to."""
    tenant: Tenant
    region: Region


def nearest_region(tenant: Tenant, regions: tuple[Region, ...] = REGIONS) -> Region | None:
    """Closest region by great-circle distance, or None without a coordinate."""
    if tenant.coordinate is None:
        return None
    lat, lon = tenant.coordinate.lat, tenant.coordinate.lon
    return min(regions, key=lambda r: haversine_km(lat, lon, r.lat, r.lon))


def normalize_availability(entries: list[AvailabilitySlot]) -> list[AvailabilitySlot]:
    """Copy of *entries* with every start time converted from UTC to Bali time."""
    return [
        AvailabilitySlot(
            resource_id=entry.resource_id,
            start_date=entry.start_date,
            slots=[
                RawSlot(
                    start_time=convert_to_bali_time(slot.start_time),
                    duration=slot.duration,
                    price=slot.price,
                )
                for slot in entry.slots
            ],
        )
        for entry in entries
    ]


def sort_slots(slots: list[TimeSlot]) -> list[TimeSlot]:
    # Both fields are zero-padded, so string order is chronological.
    return sorted(slots, key=lambda s: (s.date, s.time, s.club, s.court, s.duration))


class SlotAggregator:
    """
    Builds the merged slot list for a date from the Playtomic client.

    Usage::

        aggregator = SlotAggregator(client, CourtNameResolver(), SlotCache())
        slots = await aggregator.fetch_slots_for_date("2026-03-01")
    """

    def __init__(
        self,
        client: Any,  # anything with PlaytomicClient's fetch_* coroutines
        resolver: CourtNameResolver,
        slot_cache: SlotCache,
        *,
        regions: tuple[Region, ...] = REGIONS,
    ) -> None:
        self._client = client
        self._resolver = resolver
        self._slot_cache = slot_cache
        self._regions = regions
        self._in_flight: dict[str, asyncio.Task[list[TimeSlot]]] = {}

    # ── Tenants ───────────────────────────────────────────────────────

    async def _fetch_region(self, region: Region) -> list[Tenant]:
        try:
            return await self._client.fetch_tenants(region)
        except Exception:
            logger.exception("Tenant search failed for %s", region.name)
            return []

    async def place_tenants(self) -> list[PlacedTenant]:
        """Unique tenants across all regions, each assigned to one region."""
        per_region = await asyncio.gather(*(self._fetch_region(r) for r in self._regions))

        placed: dict[str, PlacedTenant] = {}
        for region, tenants in zip(self._regions, per_region):
            for tenant in tenants:
                if tenant.id in placed:
                    continue
                home = nearest_region(tenant, self._regions)
                if home is None:
                    logger.debug("%s has no coordinate; keeping it in %s", tenant.name, region.name)
                    home = region
                elif home is not region:
                    logger.debug("%s found via %s, assigned to %s", tenant.name, region.name, home.name)
                placed[tenant.id] = PlacedTenant(tenant=tenant, region=home)

        logger.info(
            "Tenants: %s -> %d unique",
            ", ".join(f"{r.name}={len(t)}" for r, t in zip(self._regions, per_region)),
            len(placed),
        )
        return list(placed.values())

    async def fetch_all_clubs(self) -> list[ClubInfo]:
        placed = await self.place_tenants()
        clubs = [
            ClubInfo(id=p.tenant.id, name=p.tenant.name, location=p.region.name)
            for p in placed
        ]
        return sorted(clubs, key=lambda c: c.name.lower())

    # ── Slots ─────────────────────────────────────────────────────────

    async def _refresh_court_names(self, tenant: Tenant) -> None:
        try:
            resources = await self._client.fetch_resources(tenant.id)
        except Exception:
            logger.warning("Court names unavailable for %s; using fallbacks", tenant.name, exc_info=True)
            return
        if resources:
            self._resolver.set_names(tenant.id, [(r.id, r.name) for r in resources])

    def _to_time_slots(self, placed: PlacedTenant, entries: list[AvailabilitySlot]) -> list[TimeSlot]:
        tenant = placed.tenant
        slots: list[TimeSlot] = []
        for entry in entries:
            court = self._resolver.resolve(tenant.id, entry.resource_id)
            for raw in entry.slots:
                local_time = convert_to_bali_time(raw.start_time)
                slots.append(
                    TimeSlot(
                        id=f"{tenant.id}-{entry.resource_id}-{entry.start_date}-{local_time}-{raw.duration}",
                        tenant_id=tenant.id,
                        tenant_slug=tenant.slug,
                        club=tenant.name,
                        location=placed.region.name,
                        date=entry.start_date,
                        time=local_time,
                        court=court,
                        price=raw.price,
                        available=True,
                        duration=raw.duration,
                    )
                )
        return slots

    async def _fetch_tenant_slots(self, placed: PlacedTenant, date_str: str) -> list[TimeSlot]:
        try:
            entries, _ = await asyncio.gather(
                self._client.fetch_availability(placed.tenant.id, date_str),
                self._refresh_court_names(placed.tenant),
            )
            return self._to_time_slots(placed, entries)
        except Exception:
            logger.exception("Could not load slots for %s on %s", placed.tenant.name, date_str)
            return []

    async def _aggregate(self, date_str: str) -> list[TimeSlot]:
        placed = await self.place_tenants()
        per_tenant = await asyncio.gather(
            *(self._fetch_tenant_slots(p, date_str) for p in placed)
        )

        seen: set[str] = set()
        slots: list[TimeSlot] = []
        for tenant_slots in per_tenant:
            for slot in tenant_slots:
                if slot.id not in seen:
                    seen.add(slot.id)
                    slots.append(slot)

        slots = sort_slots(slots)
        logger.info("Aggregated %d slots from %d clubs for %s", len(slots), len(placed), date_str)
        if slots:
            self._slot_cache.set(date_str, slots)
        return slots

    async def fetch_slots_for_date(self, date_str: str) -> list[TimeSlot]:
        """Every bookable slot on *date_str*, sorted by (date, time)."""
        cached = self._slot_cache.get(date_str)
        if cached is not None:
            return cached

        task = self._in_flight.get(date_str)
        if task is None:
            task = asyncio.create_task(self._aggregate(date_str), name=f"slots-{date_str}")
            self._in_flight[date_str] = task
            task.add_done_callback(lambda done: self._forget(date_str, done))
        else:
            logger.debug("Joining in-flight slot fetch for %s", date_str)

        try:
            # Shield so one caller going away does not cancel the shared fetch.
            return list(await asyncio.shield(task))
        except Exception:
            logger.exception("Slot aggregation failed for %s", date_str)
            return []

    def _forget(self, date_str: str, task: asyncio.Task[list[TimeSlot]]) -> None:
        if self._in_flight.get(date_str) is task:
            del self._in_flight[date_str]

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    # ── Court name discovery ──────────────────────────────────────────

    async def discover_courts(self) -> dict[str, Any]:
        """
        Compare live court names with the static fallback table.

        Each court is ``OK`` (fallback matches the API), ``MISMATCH`` or
        ``MISSING_FROM_FALLBACK``. The ``correctedSnippet`` lists table
        entries to paste into ``court_names.FALLBACK_COURT_NAMES``.
        """
        placed = await self.place_tenants()
        resources_per_tenant = await asyncio.gather(
            *(self._client.fetch_resources(p.tenant.id) for p in placed)
        )

        reports: list[dict[str, Any]] = []
        for p, resources in zip(placed, resources_per_tenant):
            tenant = p.tenant
            if resources:
                self._resolver.set_names(tenant.id, [(r.id, r.name) for r in resources])
            courts = []
            for resource in resources:
                fallback = self._resolver.fallback_name(tenant.id, resource.id)
                if fallback is None:
                    status = "MISSING_FROM_FALLBACK"
                elif fallback == resource.name:
                    status = "OK"
                else:
                    status = "MISMATCH"
                courts.append({
                    "resourceId": resource.id,
                    "apiName": resource.name,
                    "fallbackName": fallback,
                    "resolvedName": self._resolver.resolve(tenant.id, resource.id),
                    "status": status,
                })

            statuses = {c["status"] for c in courts}
            if statuses <= {"OK"}:
                club_status = "OK"
            elif "MISMATCH" in statuses:
                club_status = "MISMATCH"
            else:
                club_status = "MISSING_FROM_FALLBACK"

            reports.append({
                "club": tenant.name,
                "location": p.region.name,
                "tenantId": tenant.id,
                "courtCount": len(resources),
                "courts": courts,
                "status": club_status,
            })

        issues = [r for r in reports if r["status"] != "OK"]
        if issues:
            lines: list[str] = []
            for report in issues:
                lines.append(f'    # ── {report["club"]} ({short_id(report["tenantId"])})')
                for court in report["courts"]:
                    key = fallback_key(report["tenantId"], court["resourceId"])
                    lines.append(f'    "{key}": "{court["apiName"]}",')
                lines.append("")
            snippet = "\n".join(lines)
        else:
            snippet = "# All fallback entries match the API - nothing to update!"

        return {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "summary": {
                "totalTenants": len(reports),
                "tenantsWithIssues": len(issues),
                "status": "ALL_OK" if not issues else "ACTION_REQUIRED",
            },
            "reports": reports,
            "correctedSnippet": snippet,
        }
