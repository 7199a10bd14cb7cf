"""Tests for the Bali time helpers."""

from datetime import date, datetime, timezone

from app.services.bali_time import (
    BALI_TZ,
    bali_now,
    convert_to_bali_time,
    get_date_string,
    get_next_days,
    js_weekday,
    slot_start,
)


class TestConvertToBaliTime:
    def test_adds_eight_hours(self):
        assert convert_to_bali_time("01:30:00") == "09:30:00"

    def test_wraps_past_midnight(self):
        assert convert_to_bali_time("16:00:00") == "00:00:00"
        assert convert_to_bali_time("23:15:00") == "07:15:00"

    def test_seconds_default_to_zero(self):
        assert convert_to_bali_time("10:00") == "18:00:00"

    def test_zero_pads(self):
        assert convert_to_bali_time("0:5:7") == "08:05:07"

    def test_empty_string_unchanged(self):
        assert convert_to_bali_time("") == ""

    def test_garbage_unchanged(self):
        assert convert_to_bali_time("noon") == "noon"


class TestDates:
    def test_bali_now_from_naive_utc(self):
        now = bali_now(datetime(2026, 3, 1, 20, 0))
        assert now.tzinfo is BALI_TZ
        assert (now.date(), now.hour) == (date(2026, 3, 2), 4)

    def test_date_string_uses_bali_calendar(self):
        # 17:00 UTC on the 1st is already the 2nd in Bali.
        now = datetime(2026, 3, 1, 17, 0, tzinfo=timezone.utc)
        assert get_date_string(now=now) == "2026-03-02"
        assert get_date_string(2, now=now) == "2026-03-04"

    def test_next_days(self):
        now = datetime(2026, 2, 27, 2, 0, tzinfo=timezone.utc)
        days = get_next_days(4, now=now)
        assert days == ["2026-02-27", "2026-02-28", "2026-03-01", "2026-03-02"]

    def test_next_days_default_is_two_weeks(self):
        assert len(get_next_days()) == 14

    def test_slot_start_accepts_short_times(self):
        assert slot_start("2026-03-01", "18:00") == slot_start("2026-03-01", "18:00:00")
        assert slot_start("2026-03-01", "18:00:00").utcoffset().total_seconds() == 8 * 3600


class TestJsWeekday:
    def test_sunday_is_zero(self):
        assert js_weekday(date(2026, 3, 1)) == 0

    def test_tuesday_is_two(self):
        assert js_weekday(date(2026, 3, 3)) == 2

    def test_saturday_is_six(self):
        assert js_weekday(date(2026, 3, 7)) == 6
