"""
Court name resolution for Playtomic resources.

Playtomic availability only carries resource UUIDs. Names come from, in
order:

1. names learned from the live ``/tenants/{id}/resources`` endpoint
   (``set_names``), refreshed whenever the resource list is fetched;
2. the static ``FALLBACK_COURT_NAMES`` table below, used when that endpoint
   is unreachable;
3. a ``"Court xxxxxxxx"`` placeholder built from the resource UUID.

Lookups key on the first 8 characters of each UUID. The static table is
checked against the live API by ``SlotAggregator.discover_courts``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

KEY_LENGTH = 8

_UNMAPPED_RE = re.compile(r"Court [0-9a-f]{8}")

FALLBACK_COURT_NAMES: dict[str, str] = {
    # ── Bam Bam Padel | Ubud Bali (9a18884f) ──────────────────────────
    "9a18884f::a7c47627": "Bandeja Court",
    "9a18884f::78c071c3": "Golden Point Court",
    "9a18884f::c07c691d": "Drop Shot Court",
    "9a18884f::190bc9d2": "Chiquita Court",
    "9a18884f::2cf59005": "Vibora Court",
    # ── Gods Social Club / Padel of Gods (e8eb5e6f) ───────────────────
    "e8eb5e6f::5c766963": "Karma",
    "e8eb5e6f::1a3cb35d": "Dharma",
    "e8eb5e6f::5b754cd1": "Purgatory (Outdoor)",
    # ── Simply Padel Sanur (48c00d13) ─────────────────────────────────
    "48c00d13::62532960": "Court 1 (Satu)",
    "48c00d13::8a0bff4d": "Court 2 (Dua)",
    "48c00d13::156a30d0": "Court 3 (Tiga)",
    # ── FINE GROUND (8e6debc5) ────────────────────────────────────────
    "8e6debc5::da0a3656": "South Court",
    "8e6debc5::5dc61d47": "North Court",
    # ── Bisma Padel (6407c760) ────────────────────────────────────────
    "6407c760::91d38986": "Bisma 1",
    "6407c760::2400f56e": "Bisma 2",
    # ── Monkey Padel Bali Sayan Ubud (5ad933a3) ───────────────────────
    "5ad933a3::350bcb71": "Center Court",
    "5ad933a3::b12a8cb9": "Court 2",
    "5ad933a3::3b5e99ff": "Court 3",
    # ── TAO Padel Academy (bc8e4a3c) ──────────────────────────────────
    "bc8e4a3c::b8002086": "Court 1",
    "bc8e4a3c::4ea93257": "Court 2",
    "bc8e4a3c::05e7214d": "Court 3",
    "bc8e4a3c::02245c98": "Court 4",
    # ── Mahima Tennis, Padel & Gym (325afbbf) ─────────────────────────
    "325afbbf::ccfdce4e": "Padel 1",
    "325afbbf::6dade228": "Padel 2",
    "325afbbf::a0756f12": "Padel 3",
    # ── Prime Padel & Pickle (c32d1739) ───────────────────────────────
    "c32d1739::11ef4c74": "Padel 1",
    "c32d1739::dba606ad": "Padel 2",
    # ── Padel Dise Bali (6ca040f6) ────────────────────────────────────
    "6ca040f6::2f28606b": "Padel 1",
    "6ca040f6::11e070ec": "Padel 2",
    "6ca040f6::17133465": "Padel 3",
    "6ca040f6::0666822e": "Padel 4",
}


def short_id(uuid: str) -> str:
    return uuid[:KEY_LENGTH]


def fallback_key(tenant_id: str, resource_id: str) -> str:
    return f"{short_id(tenant_id)}::{short_id(resource_id)}"


def placeholder_name(resource_id: str) -> str:
    return f"Court {short_id(resource_id)}"


def is_unmapped(name: str) -> bool:
    """True if *name* is the ``Court xxxxxxxx`` placeholder, not a real name."""
    return bool(_UNMAPPED_RE.fullmatch(name))


class CourtNameResolver:
    """Maps (tenant, resource) UUID pairs to display names."""

    def __init__(self, fallback: dict[str, str] | None = None) -> None:
        self._fallback = FALLBACK_COURT_NAMES if fallback is None else fallback
        # tenant[:8] -> {resource[:8] -> name}
        self._dynamic: dict[str, dict[str, str]] = {}

    def set_names(self, tenant_id: str, resources: Iterable[tuple[str, str]]) -> None:
        """Replace the live names known for *tenant_id*."""
        self._dynamic[short_id(tenant_id)] = {
            short_id(resource_id): name.strip()
            for resource_id, name in resources
            if name and name.strip()
        }

    def fallback_name(self, tenant_id: str, resource_id: str) -> str | None:
        return self._fallback.get(fallback_key(tenant_id, resource_id))

    def resolve(self, tenant_id: str, resource_id: str) -> str:
        dynamic = self._dynamic.get(short_id(tenant_id), {}).get(short_id(resource_id))
        if dynamic:
            return dynamic
        fallback = self.fallback_name(tenant_id, resource_id)
        if fallback:
            return fallback
        return placeholder_name(resource_id)

    def clear(self) -> None:
        self._dynamic.clear()
