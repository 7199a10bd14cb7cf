#!/usr/bin/env python3
"""
Terminal client for the Padel Slot Finder API.

Loads the locally stored preferences, asks the API for the slots of one
or more days, filters them and prints bookable slots with booking links.

Usage::

    python scripts/find_slots.py                      # today
    python scripts/find_slots.py --days 3 --duration 90
    python scripts/find_slots.py --date 2026-03-01 --location Sanur
    python scripts/find_slots.py --set-day 2 18:00-21:00 --set-day 2 07:00-09:00
    python scripts/find_slots.py --disable-day 0 --club "Simply Padel Sanur"
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date, timedelta

import httpx

from app.config import PREFERENCES_PATH
from app.models import DayAvailability, TimeRange, TimeSlot, UserPreferences
from app.services.bali_time import get_date_string
from app.services.formatting import (
    DURATION_OPTIONS,
    WEEKDAYS,
    format_court_name,
    format_price,
)
from app.services.playtomic.config import CLUB_WEBSITES, playtomic_tenant_url
from app.services.preferences import (
    PreferencesStore,
    apply_filters,
    skip_reason,
)

logger = logging.getLogger("find_slots")

API_URL = os.getenv("PADEL_API_URL", "http://localhost:8000")


def booking_link(slot: TimeSlot) -> str:
    return CLUB_WEBSITES.get(slot.club) or playtomic_tenant_url(
        slot.tenant_id, slot.tenant_slug, slot.date
    )


def parse_range(value: str) -> TimeRange:
    try:
        start, end = value.split("-", 1)
        return TimeRange(start=start.strip(), end=end.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected HH:MM-HH:MM, got {value!r}") from exc


def parse_weekday(value: str) -> int:
    if value.isdigit() and 0 <= int(value) <= 6:
        return int(value)
    labels = [w.lower() for w in WEEKDAYS]
    if value[:3].lower() in labels:
        return labels.index(value[:3].lower())
    raise argparse.ArgumentTypeError(f"unknown weekday {value!r} (0=Sun .. 6=Sat)")


def update_preferences(store: PreferencesStore, args: argparse.Namespace) -> UserPreferences:
    """Apply --set-day / --disable-day / --club to the stored preferences."""
    def _update(prefs: UserPreferences) -> UserPreferences:
        availability = dict(prefs.availability)
        touched: set[int] = set()
        for weekday, time_range in args.set_day or []:
            day = availability.get(weekday, DayAvailability())
            ranges = list(day.ranges) if weekday in touched else []
            availability[weekday] = DayAvailability(enabled=True, ranges=[*ranges, time_range])
            touched.add(weekday)
        for weekday in args.disable_day or []:
            availability[weekday] = DayAvailability(enabled=False, ranges=[])
        clubs = list(args.club) if args.club is not None else prefs.clubs
        if args.all_clubs:
            clubs = []
        return UserPreferences(availability=availability, clubs=clubs)

    return store.update(_update)


def fetch_slots(client: httpx.Client, date_str: str) -> list[TimeSlot]:
    resp = client.get("/api/playtomic/slots", params={"date": date_str})
    resp.raise_for_status()
    return [TimeSlot.model_validate(item) for item in resp.json()]


def print_slots(date_str: str, slots: list[TimeSlot]) -> None:
    print(f"\n{date_str}: {len(slots)} slot(s)")
    for slot in slots:
        print(
            f"  {slot.time[:5]}  {slot.duration:>3} min  {format_price(slot.price):>12}  "
            f"{slot.club} · {format_court_name(slot.court)} ({slot.location})"
        )
        print(f"      {booking_link(slot)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find bookable padel slots in Bali")
    parser.add_argument("--date", help="First day to search (YYYY-MM-DD), default today")
    parser.add_argument("--days", type=int, default=1, help="Number of days to search")
    parser.add_argument("--duration", choices=list(DURATION_OPTIONS), default="60+")
    parser.add_argument("--location", choices=["all", "Ubud", "Sanur"], default="all")
    parser.add_argument("--show-all", action="store_true", help="Ignore saved preferences")
    parser.add_argument("--prefs", default=PREFERENCES_PATH, help="Preferences file")
    parser.add_argument(
        "--set-day",
        nargs=2,
        action="append",
        metavar=("WEEKDAY", "HH:MM-HH:MM"),
        help="Replace a weekday's time windows (repeat to add several)",
    )
    parser.add_argument("--disable-day", type=parse_weekday, action="append", metavar="WEEKDAY")
    parser.add_argument("--club", action="append", help="Only show this club (repeatable)")
    parser.add_argument("--all-clubs", action="store_true", help="Clear the saved club list")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.set_day:
        try:
            args.set_day = [(parse_weekday(day), parse_range(window)) for day, window in args.set_day]
        except argparse.ArgumentTypeError as exc:
            parser.error(str(exc))

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper())

    store = PreferencesStore(args.prefs)
    if args.set_day or args.disable_day or args.club is not None or args.all_clubs:
        prefs = update_preferences(store, args)
        print(f"Saved preferences to {args.prefs}")
    else:
        prefs = store.load()

    if args.date:
        try:
            first = date.fromisoformat(args.date)
        except ValueError:
            parser.error(f"invalid --date {args.date!r}, expected YYYY-MM-DD")
        dates = [(first + timedelta(days=i)).isoformat() for i in range(args.days)]
    else:
        dates = [get_date_string(i) for i in range(args.days)]

    with httpx.Client(base_url=API_URL, timeout=30) as client:
        for date_str in dates:
            reason = skip_reason(date_str, args.duration, prefs, show_all=args.show_all)
            if reason is not None:
                print(f"\n{date_str}: skipped ({reason})")
                continue
            try:
                slots = fetch_slots(client, date_str)
            except httpx.HTTPError as exc:
                logger.error("Could not load slots for %s: %s", date_str, exc)
                return 1
            filtered = apply_filters(
                slots,
                prefs,
                duration=args.duration,
                location=args.location,
                show_all=args.show_all,
            )
            print_slots(date_str, filtered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
