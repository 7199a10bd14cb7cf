"""
Bali (WITA, UTC+8) time helpers.

Playtomic reports slot start times in UTC; everything user-facing is in
Bali local time. Bali has no daylight saving, so a fixed offset is exact.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

BALI_TZ = timezone(timedelta(hours=8), "WITA")
BALI_OFFSET_HOURS = 8


def convert_to_bali_time(utc_time: str) -> str:
    """
    Convert a UTC ``HH:MM:SS`` string to Bali local time, wrapping past midnight.

    Empty or unparseable input is returned unchanged. Seconds default to 0
    when the input is ``HH:MM``.
    """
    if not utc_time:
        return utc_time
    parts = utc_time.split(":")
    try:
        hour = int(parts[0])
        minute = int(parts[1]) if len(parts) > 1 else 0
        second = int(parts[2]) if len(parts) > 2 else 0
    except ValueError:
        return utc_time
    bali_hour = (hour + BALI_OFFSET_HOURS) % 24
    return f"{bali_hour:02d}:{minute:02d}:{second:02d}"


def bali_now(now: datetime | None = None) -> datetime:
    if now is None:
        return datetime.now(BALI_TZ)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(BALI_TZ)


def bali_today(now: datetime | None = None) -> date:
    return bali_now(now).date()


def get_date_string(offset: int = 0, now: datetime | None = None) -> str:
    """Bali calendar date *offset* days from today, as ``YYYY-MM-DD``."""
    return (bali_today(now) + timedelta(days=offset)).isoformat()


def get_next_days(count: int = 14, now: datetime | None = None) -> list[str]:
    return [get_date_string(i, now) for i in range(count)]


def slot_start(date_str: str, time_str: str) -> datetime:
    """Aware datetime for a slot's local date + time."""
    clock = time_str[:8] if time_str.count(":") == 2 else f"{time_str[:5]}:00"
    naive = datetime.strptime(f"{date_str} {clock}", "%Y-%m-%d %H:%M:%S")
    return naive.replace(tzinfo=BALI_TZ)


def js_weekday(day: date) -> int:
    """Weekday index with 0 = Sunday, matching stored preference keys."""
    return (day.weekday() + 1) % 7
