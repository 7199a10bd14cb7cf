"""Pydantic models for the Padel Slot Finder API."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Location = Literal["Ubud", "Sanur"]


class Coordinate(BaseModel):
    """Geographic coordinate as returned by Playtomic."""
    lat: float = Field(..., description="Latitude")
    lon: float = Field(..., description="Longitude")


class Tenant(BaseModel):
    """A padel club as represented by the upstream provider."""
    id: str = Field(..., description="Opaque tenant UUID")
    name: str = Field(..., description="Club name")
    slug: str | None = Field(None, description="Vanity slug for playtomic.com URLs")
    coordinate: Coordinate | None = Field(None, description="Club location")


class Resource(BaseModel):
    """A bookable court belonging to a tenant."""
    id: str = Field(..., description="Opaque resource UUID")
    name: str = Field(..., description="Court name as configured by the club")


class RawSlot(BaseModel):
    """One bookable window inside an availability entry."""
    start_time: str = Field(..., description="Start time (HH:MM:SS)")
    duration: int = Field(..., description="Duration in minutes")
    price: int = Field(0, description="Price in IDR, no decimals")


class AvailabilitySlot(BaseModel):
    """Availability of one resource on one day."""
    resource_id: str
    start_date: str = Field(..., description="Date (YYYY-MM-DD)")
    slots: list[RawSlot] = Field(default_factory=list)


class TimeSlot(BaseModel):
    """A normalized, bookable slot. Unavailable slots are absent, never flagged."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="tenant-resource-date-time-duration")
    tenant_id: str = Field(..., alias="tenantId")
    tenant_slug: str | None = Field(None, alias="tenantSlug")
    club: str
    location: Location
    date: str = Field(..., description="Date (YYYY-MM-DD)")
    time: str = Field(..., description="Bali local start time (HH:MM:SS)")
    court: str
    price: int = Field(..., description="Price in IDR")
    available: bool = True
    duration: int = Field(..., description="Duration in minutes")


class ClubInfo(BaseModel):
    """Club summary used to populate club selectors."""
    id: str
    name: str
    location: Location


class TimeRange(BaseModel):
    """A window of the day the user is free to play."""
    start: str = Field(..., pattern=r"^([01][0-9]|2[0-4]):[0-5][0-9]$", description="HH:MM")
    end: str = Field(..., pattern=r"^([01][0-9]|2[0-4]):[0-5][0-9]$", description="HH:MM")


class DayAvailability(BaseModel):
    enabled: bool = True
    ranges: list[TimeRange] = Field(default_factory=list)


def _default_week() -> dict[int, DayAvailability]:
    return {weekday: DayAvailability() for weekday in range(7)}


class UserPreferences(BaseModel):
    """
    User filtering preferences, persisted on the client only.

    Weekday keys use 0 = Sunday ... 6 = Saturday.
    """
    availability: dict[int, DayAvailability] = Field(default_factory=_default_week)
    clubs: list[str] = Field(default_factory=list, description="Empty = all clubs")


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
