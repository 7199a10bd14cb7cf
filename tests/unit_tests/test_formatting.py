"""Tests for display formatting helpers."""

from app.services.formatting import format_court_name, format_price
from app.services.playtomic.config import playtomic_tenant_url


class TestFormatPrice:
    def test_thousands_use_dots(self):
        assert format_price(150000) == "Rp 150.000"

    def test_millions(self):
        assert format_price(1250000) == "Rp 1.250.000"

    def test_small_and_zero(self):
        assert format_price(500) == "Rp 500"
        assert format_price(0) == "Rp 0"


class TestFormatCourtName:
    def test_plain_name_gets_prefix(self):
        assert format_court_name("1") == "Court 1"

    def test_court_prefix_kept(self):
        assert format_court_name("Court 1") == "Court 1"

    def test_uuid_name_shortened(self):
        assert format_court_name("1a2b3c4d-0000-4000-8000-0000abcd1234") == "Court ABCD"


class TestPlaytomicTenantUrl:
    def test_slug_url(self):
        url = playtomic_tenant_url("tid", "bam-bam", "2026-03-01")
        assert url == "https://playtomic.com/clubs/bam-bam?date=2026-03-01"

    def test_tenant_id_url(self):
        assert playtomic_tenant_url("tid") == "https://playtomic.io/tenant/tid"
