"""Tests for the injectable clock and ISO date parsing."""

from datetime import UTC, date, datetime, timedelta, timezone

from trialmatchrx.scoring.clock import FixedClock, SystemClock, parse_iso_date


def test_fixed_clock_from_date_is_midnight_utc():
    clock = FixedClock(date(2026, 1, 15))
    assert clock.now() == datetime(2026, 1, 15, tzinfo=UTC)
    assert clock.today() == date(2026, 1, 15)


def test_fixed_clock_converts_to_utc():
    eastern = timezone(timedelta(hours=-5))
    clock = FixedClock(datetime(2026, 1, 15, 22, 0, tzinfo=eastern))
    assert clock.today() == date(2026, 1, 16)


def test_system_clock_is_timezone_aware():
    assert SystemClock().now().tzinfo is not None


def test_parse_date_only():
    assert parse_iso_date("2025-03-04") == date(2025, 3, 4)


def test_parse_datetime_with_offset():
    assert parse_iso_date("2025-03-04T23:00:00-05:00") == date(2025, 3, 5)


def test_parse_rejects_garbage():
    assert parse_iso_date("March 2025") is None
    assert parse_iso_date("") is None
    assert parse_iso_date(None) is None


def test_parse_year_month_is_first_of_month():
    assert parse_iso_date("2025-12") == date(2025, 12, 1)


def test_parse_year_only_is_first_of_january():
    assert parse_iso_date(" 2025 ") == date(2025, 1, 1)
