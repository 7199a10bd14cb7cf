"""Tests for the Playtomic HTTP client and its payload parsers."""

from __future__ import annotations

import httpx

from app.services.cache import TTLCache
from app.services.playtomic.api_models import (
    parse_availability,
    parse_price,
    parse_resources,
    parse_tenants,
    unwrap_items,
)
from app.services.playtomic.client import PlaytomicClient
from app.services.playtomic.config import SANUR, UBUD
from tests.mocks.models import (
    AVAILABILITY_PAYLOAD,
    NO_COORD_CLUB,
    RESOURCES_PAYLOAD,
    SANUR_CLUB,
    SLOT_DATE,
    TENANTS_PAYLOAD,
    UBUD_CLUB,
    UBUD_COURT_1,
    UBUD_COURT_2,
)

PRIMARY = "https://primary.test/v1"
FALLBACK = "https://fallback.test/api/v1"


def _client(handler, cache: TTLCache | None = None) -> PlaytomicClient:
    return PlaytomicClient(
        cache,
        base_urls=(PRIMARY, FALLBACK),
        transport=httpx.MockTransport(handler),
    )


class Recorder:
    """MockTransport handler that records requests and answers per host."""

    def __init__(self, responses: dict[str, httpx.Response]) -> None:
        self._responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses[request.url.host]


# ── Parsers ────────────────────────────────────────────────────────────────


class TestParsePrice:
    def test_dotted_string(self):
        assert parse_price("150.000") == 150000

    def test_string_with_currency(self):
        assert parse_price("150000 IDR") == 150000

    def test_number(self):
        assert parse_price(150000) == 150000
        assert parse_price(99.9) == 99

    def test_missing(self):
        assert parse_price(None) == 0
        assert parse_price("") == 0
        assert parse_price("free") == 0


class TestParsers:
    def test_unwrap_items(self):
        assert unwrap_items([1]) == [1]
        assert unwrap_items({"items": [1, 2]}) == [1, 2]
        assert unwrap_items({"id": "x"}) == [{"id": "x"}]
        assert unwrap_items("nope") == []

    def test_tenants_fold_alternate_fields(self):
        tenants = parse_tenants(TENANTS_PAYLOAD)
        assert [t.id for t in tenants] == [UBUD_CLUB.id, SANUR_CLUB.id, NO_COORD_CLUB.id]
        ubud, sanur, mystery = tenants
        assert ubud.name == "Bam Bam Padel Ubud"
        assert ubud.slug == "bam-bam-padel-ubud"
        assert ubud.coordinate.lat == -8.512
        assert sanur.coordinate.lon == 115.258
        # Zero coordinates mean "unknown".
        assert mystery.coordinate is None

    def test_availability_normalizes_prices_and_dates(self):
        entries = parse_availability(AVAILABILITY_PAYLOAD)
        assert entries[0].start_date == SLOT_DATE
        assert [s.price for s in entries[0].slots] == [150000, 200000]
        assert entries[1].slots == []

    def test_availability_error_object_yields_nothing(self):
        assert parse_availability({"status": "error", "message": "boom"}) == []

    def test_resources_from_items_wrapper(self):
        resources = parse_resources(RESOURCES_PAYLOAD)
        assert [(r.id, r.name) for r in resources] == [
            (UBUD_COURT_1.id, "Court 1"),
            (UBUD_COURT_2.id, "Jungle Court"),
        ]


# ── Client ─────────────────────────────────────────────────────────────────


class TestPlaytomicClient:
    async def test_fetch_tenants_sends_region_params(self):
        handler = Recorder({"primary.test": httpx.Response(200, json=TENANTS_PAYLOAD)})
        client = _client(handler)
        tenants = await client.fetch_tenants(UBUD)
        await client.close()

        assert len(tenants) == 3
        params = handler.requests[0].url.params
        assert handler.requests[0].url.path == "/v1/tenants"
        assert params["coordinate"] == "-8.506,115.262"
        assert params["sport_id"] == "PADEL"
        assert params["playtomic_status"] == "ACTIVE"
        assert params["radius"] == str(UBUD.radius)

    async def test_region_key_accepted(self):
        handler = Recorder({"primary.test": httpx.Response(200, json=[])})
        client = _client(handler)
        await client.fetch_tenants("sanur")
        await client.close()
        assert handler.requests[0].url.params["coordinate"] == SANUR.coordinate

    async def test_falls_back_on_server_error(self):
        handler = Recorder({
            "primary.test": httpx.Response(500, text="oops"),
            "fallback.test": httpx.Response(200, json=AVAILABILITY_PAYLOAD),
        })
        client = _client(handler)
        entries = await client.fetch_availability(UBUD_CLUB.id, SLOT_DATE)
        await client.close()

        assert [r.url.host for r in handler.requests] == ["primary.test", "fallback.test"]
        assert handler.requests[1].url.path == "/api/v1/availability"
        assert handler.requests[1].url.params["start_min"] == f"{SLOT_DATE}T00:00:00"
        assert handler.requests[1].url.params["start_max"] == f"{SLOT_DATE}T23:59:59"
        assert len(entries) == 2

    async def test_falls_back_on_non_json_response(self):
        handler = Recorder({
            "primary.test": httpx.Response(200, text="<html>captcha</html>",
                                           headers={"content-type": "text/html"}),
            "fallback.test": httpx.Response(200, json=RESOURCES_PAYLOAD),
        })
        client = _client(handler)
        resources = await client.fetch_resources(UBUD_CLUB.id)
        await client.close()

        assert len(resources) == 2
        assert handler.requests[1].url.path == f"/api/v1/tenants/{UBUD_CLUB.id}/resources"

    async def test_all_urls_failing_returns_empty(self):
        handler = Recorder({
            "primary.test": httpx.Response(503),
            "fallback.test": httpx.Response(404, json={"error": "not found"}),
        })
        client = _client(handler)
        assert await client.fetch_tenants(UBUD) == []
        await client.close()

    async def test_network_error_returns_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        client = _client(handler)
        assert await client.fetch_availability(UBUD_CLUB.id, SLOT_DATE) == []
        await client.close()

    async def test_successful_responses_are_cached(self):
        handler = Recorder({"primary.test": httpx.Response(200, json=TENANTS_PAYLOAD)})
        client = _client(handler, TTLCache())
        first = await client.fetch_tenants(UBUD)
        second = await client.fetch_tenants(UBUD)
        await client.close()

        assert first == second
        assert len(handler.requests) == 1

    async def test_failures_are_not_cached(self):
        handler = Recorder({
            "primary.test": httpx.Response(500),
            "fallback.test": httpx.Response(500),
        })
        client = _client(handler, TTLCache())
        await client.fetch_tenants(UBUD)
        await client.fetch_tenants(UBUD)
        await client.close()

        assert len(handler.requests) == 4

    async def test_cache_keys_are_per_region(self):
        handler = Recorder({"primary.test": httpx.Response(200, json=[])})
        client = _client(handler, TTLCache())
        await client.fetch_tenants(UBUD)
        await client.fetch_tenants(SANUR)
        await client.close()

        assert len(handler.requests) == 2
