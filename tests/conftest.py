"""
Shared test fixtures.

Provides a FastAPI TestClient wired to:
  • a service registry backed by the in-memory FakePlaytomicClient
    (no external HTTP)
  • the warm-up worker switched off
  • rate limiting disabled

The `client` fixture runs the full lifespan so startup/shutdown of the
registry is exercised as well.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.registry import ServiceRegistry
from tests.mocks.services import FakePlaytomicClient


@pytest.fixture()
def fake_client() -> FakePlaytomicClient:
    return FakePlaytomicClient()


@pytest.fixture()
def _test_env(monkeypatch, fake_client):
    """
    Internal fixture that swaps in a registry built around the fake
    Playtomic client and turns the rate limiter off.
    """
    test_registry = ServiceRegistry(client=fake_client, warmup=False)

    # Patch everywhere `registry` was imported
    for mod_path in (
        "app.services.registry",
        "app.main",
        "app.routers.playtomic",
    ):
        monkeypatch.setattr(f"{mod_path}.registry", test_registry)

    # ── Disable rate limiting in tests ────────────────────────────────
    from app.rate_limit import limiter as _limiter
    monkeypatch.setattr(_limiter, "enabled", False)

    return test_registry


@pytest.fixture()
def mock_registry(_test_env) -> ServiceRegistry:
    """Public alias for tests that reference the registry directly."""
    return _test_env


@pytest.fixture()
def client(_test_env: ServiceRegistry) -> TestClient:
    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc
