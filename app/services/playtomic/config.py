"""
Playtomic integration configuration.

All the constants that describe how to talk to the Playtomic API and
which areas of Bali we search.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.config import (
    AVAILABILITY_TTL,
    PLAYTOMIC_BASE_URL,
    PLAYTOMIC_FALLBACK_URL,
    PLAYTOMIC_SEARCH_RADIUS,
    RESOURCES_TTL,
    TENANTS_TTL,
)

# ── API endpoints ─────────────────────────────────────────────────────────

# Tried in order; the first 2xx JSON response wins.
BASE_URLS: tuple[str, ...] = (PLAYTOMIC_BASE_URL, PLAYTOMIC_FALLBACK_URL)

TENANTS_PATH = "/tenants"
AVAILABILITY_PATH = "/availability"
RESOURCES_PATH = "/tenants/{tenant_id}/resources"

SPORT_ID = "PADEL"
TENANT_PAGE_SIZE = 500

# ── Cache TTLs per endpoint (seconds) ─────────────────────────────────────

ENDPOINT_TTLS: dict[str, float] = {
    TENANTS_PATH: TENANTS_TTL,
    AVAILABILITY_PATH: AVAILABILITY_TTL,
    RESOURCES_PATH: RESOURCES_TTL,
}

# ── Search regions ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Region:
    """A fixed search area; ``lat``/``lon`` double as the reference point."""
    key: str
    name: str
    lat: float
    lon: float
    radius: int = PLAYTOMIC_SEARCH_RADIUS

    @property
    def coordinate(self) -> str:
        return f"{self.lat},{self.lon}"


UBUD = Region(key="ubud", name="Ubud", lat=-8.506, lon=115.262)
SANUR = Region(key="sanur", name="Sanur", lat=-8.700, lon=115.263)

# Order matters: ties and coordinate-less tenants go to the earlier region.
REGIONS: tuple[Region, ...] = (UBUD, SANUR)
REGIONS_BY_KEY: dict[str, Region] = {region.key: region for region in REGIONS}

# ── HTTP defaults ─────────────────────────────────────────────────────────

DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    # Identifies us as the official mobile app; the API rejects some
    # anonymous browser-style requests.
    "X-Requested-With": "com.playtomic.app",
    "User-Agent": "PadelSlotFinder/0.1",
}

# ── Booking links ─────────────────────────────────────────────────────────

CLUB_WEBSITES: dict[str, str] = {
    "Bam Bam Padel Ubud": "https://www.bambampadel.com",
    "BamBam Padel": "https://www.bambampadel.com",
    "Monkey Padel Bali": "https://monkeypadelbali.com",
    "Monkey Padel Bali Sayan Ubud": "https://monkeypadelbali.com",
    "Simply Padel": "https://simply-padel.com",
    "Simply Padel Sanur": "https://simply-padel.com",
    "Padel of Gods": "https://padelofgodsbali.com",
    "Padel of Gods Bali": "https://padelofgodsbali.com",
}


def playtomic_tenant_url(tenant_id: str, slug: str | None = None, date: str | None = None) -> str:
    qs = f"?date={date}" if date else ""
    if slug:
        return f"https://playtomic.com/clubs/{slug}{qs}"
    return f"https://playtomic.io/tenant/{tenant_id}{qs}"
