"""
Application configuration from environment variables.

All settings have sensible defaults for local development.
A .env file in the project root is loaded automatically (if present).
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file before reading any env vars
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# ── Environment ───────────────────────────────────────────────────────────

ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info").upper()

# ── Paths ─────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# Local stand-in for the browser's storage: one JSON document per user.
PREFERENCES_PATH: str = os.getenv(
    "PREFERENCES_PATH", str(DATA_DIR / "preferences.json")
)

# ── Playtomic upstream ────────────────────────────────────────────────────

PLAYTOMIC_BASE_URL: str = os.getenv("PLAYTOMIC_BASE_URL", "https://api.playtomic.io/v1")
PLAYTOMIC_FALLBACK_URL: str = os.getenv(
    "PLAYTOMIC_FALLBACK_URL", "https://playtomic.io/api/v1"
)
PLAYTOMIC_TIMEOUT: float = float(os.getenv("PLAYTOMIC_TIMEOUT", "15"))

# Tenant search radius around each region's reference point (metres).
PLAYTOMIC_SEARCH_RADIUS: int = int(os.getenv("PLAYTOMIC_SEARCH_RADIUS", "8000"))

# ── Cache TTLs (seconds) ──────────────────────────────────────────────────

TENANTS_TTL: float = float(os.getenv("TENANTS_TTL", str(10 * 60)))
AVAILABILITY_TTL: float = float(os.getenv("AVAILABILITY_TTL", str(5 * 60)))
RESOURCES_TTL: float = float(os.getenv("RESOURCES_TTL", str(24 * 60 * 60)))

# Aggregated slot lists: today changes fast, future days less so.
SLOTS_TODAY_TTL: float = float(os.getenv("SLOTS_TODAY_TTL", str(5 * 60)))
SLOTS_FUTURE_TTL: float = float(os.getenv("SLOTS_FUTURE_TTL", str(10 * 60)))

# ── Warm-up worker ────────────────────────────────────────────────────────

SLOT_WARMUP_ENABLED: bool = os.getenv("SLOT_WARMUP_ENABLED", "true").lower() == "true"

# How often the worker checks whether a new day needs warming (seconds).
SLOT_WARMUP_INTERVAL: float = float(os.getenv("SLOT_WARMUP_INTERVAL", "300"))

# Number of days ahead (including today) the date strip shows.
SLOT_WARMUP_DAYS: int = int(os.getenv("SLOT_WARMUP_DAYS", "14"))
