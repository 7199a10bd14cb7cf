"""
Pydantic models that mirror the Playtomic API response shapes.

These are *internal* – the rest of the app never imports them directly.
The upstream uses several alternate field names for the same thing; each
model folds them into one canonical field before validation, and
``to_domain()`` translates into app.models.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from app.models import AvailabilitySlot, Coordinate, RawSlot, Resource, Tenant

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^\d]")


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


def parse_price(raw: Any) -> int:
    """
    Normalize an upstream price to whole rupiah.

    Numbers are truncated; strings keep only their digits, so
    ``"150.000"`` and ``"150000 IDR"`` both become ``150000``.
    """
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        return int(raw)
    digits = _NON_DIGITS.sub("", str(raw))
    return int(digits) if digits else 0


def unwrap_items(payload: Any) -> list[Any]:
    """Playtomic answers with a bare list, ``{"items": [...]}``, or a single object."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        items = payload.get("items")
        if isinstance(items, list):
            return items
        return [payload]
    return []


# ── /tenants ──────────────────────────────────────────────────────────────


class TenantPayload(BaseModel):
    id: str
    name: str
    slug: str | None = None
    coordinate: Coordinate | None = None

    @model_validator(mode="before")
    @classmethod
    def _fold_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        address = data.get("address") if isinstance(data.get("address"), dict) else {}
        return {
            "id": _first(data, "tenant_id", "id", "_id"),
            "name": _first(data, "name", "tenant_name"),
            "slug": _first(data, "slug", "tenant_uid"),
            "coordinate": _first(address, "coordinate")
            or _first(data, "coordinate", "coordinates", "location", "coord"),
        }

    @field_validator("coordinate", mode="before")
    @classmethod
    def _drop_unusable_coordinate(cls, value: Any) -> Any:
        # Zero/absent lat or lon means "unknown", not the Gulf of Guinea.
        if not isinstance(value, dict):
            return None
        if not value.get("lat") or not value.get("lon"):
            return None
        return value

    def to_domain(self) -> Tenant:
        return Tenant(id=self.id, name=self.name.strip(), slug=self.slug, coordinate=self.coordinate)


# ── /availability ─────────────────────────────────────────────────────────


class SlotPayload(BaseModel):
    start_time: str
    duration: int
    price: int = 0

    @field_validator("price", mode="before")
    @classmethod
    def _normalize_price(cls, value: Any) -> int:
        return parse_price(value)


class AvailabilityPayload(BaseModel):
    resource_id: str
    start_date: str
    slots: list[SlotPayload] = []

    @field_validator("start_date", mode="after")
    @classmethod
    def _date_only(cls, value: str) -> str:
        return value[:10]

    @field_validator("slots", mode="before")
    @classmethod
    def _null_slots(cls, value: Any) -> Any:
        return value or []

    def to_domain(self) -> AvailabilitySlot:
        return AvailabilitySlot(
            resource_id=self.resource_id,
            start_date=self.start_date,
            slots=[
                RawSlot(start_time=s.start_time, duration=s.duration, price=s.price)
                for s in self.slots
            ],
        )


# ── /tenants/{id}/resources ───────────────────────────────────────────────


class ResourcePayload(BaseModel):
    id: str
    name: str

    @model_validator(mode="before")
    @classmethod
    def _fold_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            "id": _first(data, "resource_id", "id"),
            "name": _first(data, "name", "resource_name"),
        }

    def to_domain(self) -> Resource:
        return Resource(id=self.id, name=self.name.strip())


# ── Parsing entry points ──────────────────────────────────────────────────


def _parse_many(model: type[BaseModel], payload: Any, what: str) -> list[Any]:
    parsed = []
    for item in unwrap_items(payload):
        try:
            parsed.append(model.model_validate(item).to_domain())
        except ValidationError as exc:
            logger.warning("Skipping malformed %s entry: %s", what, exc.errors()[:1])
    return parsed


def parse_tenants(payload: Any) -> list[Tenant]:
    return _parse_many(TenantPayload, payload, "tenant")


def parse_availability(payload: Any) -> list[AvailabilitySlot]:
    # A single object here is an error body, not an availability entry.
    if not isinstance(payload, list):
        return []
    return _parse_many(AvailabilityPayload, payload, "availability")


def parse_resources(payload: Any) -> list[Resource]:
    return _parse_many(ResourcePayload, payload, "resource")
