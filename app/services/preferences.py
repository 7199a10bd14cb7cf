"""
User preferences: normalization, legacy migration, persistence and the
slot filter that applies them.

Preferences live with the user (a JSON blob under a fixed storage key),
never on the server. The filter is a pure function so any consumer can
apply it to the slot list returned by ``/api/playtomic/slots``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError

from app.models import DayAvailability, TimeRange, TimeSlot, UserPreferences
from app.services.bali_time import bali_now, js_weekday, slot_start

logger = logging.getLogger(__name__)

STORAGE_KEY = "padel-preferences"

Duration = Literal["60+", "60", "90"]
SkipReason = Literal["day-disabled", "duration-too-long"]

BOOKING_LEAD_TIME = timedelta(hours=1)

DURATION_FILTERS: dict[str, Callable[[int], bool]] = {
    "60+": lambda minutes: minutes >= 60,
    "60": lambda minutes: minutes == 60,
    "90": lambda minutes: minutes == 90,
}


def default_preferences() -> UserPreferences:
    return UserPreferences()


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm[:5].split(":")
    return int(hours) * 60 + int(minutes)


# ── Normalization ─────────────────────────────────────────────────────────


def normalize_ranges(ranges: Iterable[TimeRange]) -> list[TimeRange]:
    """Sort ranges by start time and merge any that overlap."""
    ordered = sorted(ranges, key=lambda r: r.start)
    merged: list[TimeRange] = []
    for current in ordered:
        if merged and current.start < merged[-1].end:
            if current.end > merged[-1].end:
                merged[-1] = TimeRange(start=merged[-1].start, end=current.end)
        else:
            merged.append(TimeRange(start=current.start, end=current.end))
    return merged


def normalize_preferences(prefs: UserPreferences) -> UserPreferences:
    availability = {
        weekday: DayAvailability(
            enabled=prefs.availability.get(weekday, DayAvailability()).enabled,
            ranges=normalize_ranges(prefs.availability.get(weekday, DayAvailability()).ranges),
        )
        for weekday in range(7)
    }
    return UserPreferences(availability=availability, clubs=list(prefs.clubs))


# ── Parsing / migration ───────────────────────────────────────────────────


def migrate_day(raw: Any) -> DayAvailability:
    """
    Accept any historical per-day shape.

    * ``{"enabled": bool, "ranges": [...]}`` – current format
    * ``{"start": "HH:MM", "end": "HH:MM"}`` – legacy single window
    * ``null`` / anything else – no restriction
    """
    if not isinstance(raw, dict):
        return DayAvailability()
    if "enabled" in raw and "ranges" in raw:
        ranges = raw["ranges"] if isinstance(raw["ranges"], list) else []
        return DayAvailability(
            enabled=bool(raw["enabled"]),
            ranges=[TimeRange.model_validate(r) for r in ranges],
        )
    if "start" in raw and "end" in raw:
        return DayAvailability(ranges=[TimeRange(start=str(raw["start"]), end=str(raw["end"]))])
    return DayAvailability()


def parse_preferences(raw: str | None) -> UserPreferences:
    """Decode a stored JSON blob; anything unreadable yields the defaults."""
    if not raw:
        return default_preferences()
    try:
        data = json.loads(raw)
        availability_raw = data["availability"]
        clubs = data["clubs"]
        if not isinstance(availability_raw, dict) or not isinstance(clubs, list):
            raise TypeError("unexpected preferences shape")
        availability = {
            weekday: migrate_day(availability_raw.get(str(weekday), availability_raw.get(weekday)))
            for weekday in range(7)
        }
        prefs = UserPreferences(availability=availability, clubs=[str(c) for c in clubs])
    except (ValueError, KeyError, TypeError, ValidationError) as exc:
        logger.warning("Ignoring unreadable preferences (%s); using defaults", exc.__class__.__name__)
        return default_preferences()
    return normalize_preferences(prefs)


def dump_preferences(prefs: UserPreferences) -> str:
    return prefs.model_dump_json()


def has_active_preferences(prefs: UserPreferences) -> bool:
    """True when any day is disabled or windowed, or a club list is set."""
    return bool(prefs.clubs) or any(
        not day.enabled or day.ranges for day in prefs.availability.values()
    )


# ── Persistence ───────────────────────────────────────────────────────────


class PreferencesStore:
    """
    Key-value JSON document standing in for the browser's localStorage.

    The preferences blob is stored as a string under ``STORAGE_KEY`` so
    the file matches what the web client keeps.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _read_document(self) -> dict[str, Any]:
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Preferences file %s unreadable: %s", self._path, exc)
            return {}
        return document if isinstance(document, dict) else {}

    def load(self) -> UserPreferences:
        raw = self._read_document().get(STORAGE_KEY)
        return parse_preferences(raw if isinstance(raw, str) else None)

    def save(self, prefs: UserPreferences) -> UserPreferences:
        prefs = normalize_preferences(prefs)
        document = self._read_document()
        document[STORAGE_KEY] = dump_preferences(prefs)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        return prefs

    def update(self, updater: Callable[[UserPreferences], UserPreferences]) -> UserPreferences:
        return self.save(updater(self.load()))


# ── Filtering ─────────────────────────────────────────────────────────────


def _fits_day(slot: TimeSlot, day: DayAvailability) -> bool:
    if not day.enabled:
        return False
    if not day.ranges:
        return True
    start = _minutes(slot.time)
    end = start + slot.duration
    return any(_minutes(r.start) <= start and end <= _minutes(r.end) for r in day.ranges)


def apply_filters(
    slots: Iterable[TimeSlot],
    prefs: UserPreferences,
    now: datetime | None = None,
    *,
    duration: Duration = "60+",
    location: str | None = None,
    club: str | None = None,
    show_all: bool = False,
) -> list[TimeSlot]:
    """
    Keep the slots the user can actually book.

    A slot passes when it starts more than an hour from *now*, matches the
    duration/location/club selectors, and (unless *show_all*) fits the
    user's saved clubs, enabled weekdays and time windows.
    """
    cutoff = bali_now(now) + BOOKING_LEAD_TIME
    matches_duration = DURATION_FILTERS[duration]

    result: list[TimeSlot] = []
    for slot in slots:
        if slot_start(slot.date, slot.time) <= cutoff:
            continue
        if not matches_duration(slot.duration):
            continue
        if location and location != "all" and slot.location != location:
            continue
        if club and club != "all" and slot.club != club:
            continue
        if not show_all:
            if prefs.clubs and slot.club not in prefs.clubs:
                continue
            weekday = js_weekday(date.fromisoformat(slot.date))
            if not _fits_day(slot, prefs.availability.get(weekday, DayAvailability())):
                continue
        result.append(slot)
    return result


def skip_reason(
    date_str: str,
    duration: Duration,
    prefs: UserPreferences,
    *,
    show_all: bool = False,
) -> SkipReason | None:
    """
    Why fetching *date_str* would be pointless, or None.

    Callers use this to skip the slots request entirely; ``apply_filters``
    enforces the same rules on its own.
    """
    if show_all or not has_active_preferences(prefs):
        return None
    day = prefs.availability.get(js_weekday(date.fromisoformat(date_str)), DayAvailability())
    if not day.enabled:
        return "day-disabled"
    if not day.ranges:
        return None
    needed = 90 if duration == "90" else 60
    if any(_minutes(r.end) - _minutes(r.start) >= needed for r in day.ranges):
        return None
    return "duration-too-long"
