"""Display helpers shared by API consumers."""

from __future__ import annotations

import re

_UUID_PREFIX = re.compile(r"^[0-9a-f]{8}-")

WEEKDAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

DURATION_OPTIONS: dict[str, str] = {
    "60+": "60+ min",
    "60": "60 min",
    "90": "90 min",
}


def format_price(price: int) -> str:
    """Indonesian rupiah with dot thousands separators, e.g. ``Rp 150.000``."""
    return "Rp " + f"{price:,}".replace(",", ".")


def format_court_name(name: str) -> str:
    if _UUID_PREFIX.match(name):
        return f"Court {name[-8:-4].upper()}"
    return name if name.startswith("Court") else f"Court {name}"
