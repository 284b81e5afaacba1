"""Tests for local-timezone date parsing and formatting."""

import sys
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from squad_analytics.dates import (
    format_local_date_key,
    local_today,
    parse_local_date,
    parse_timestamp,
    resolve_now,
)

requires_tzset = pytest.mark.skipif(not hasattr(time, "tzset"), reason="time.tzset is POSIX only")

TIMEZONES = [
    "UTC",
    "America/New_York",
    "America/Los_Angeles",
    "Pacific/Pago_Pago",
    "Europe/Berlin",
    "Asia/Tokyo",
    "Pacific/Kiritimati",
]


@pytest.fixture
def local_timezone(monkeypatch):
    """Switch the process-local time zone for the duration of a test."""

    def _set(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()


@requires_tzset
@pytest.mark.parametrize("tz_name", TIMEZONES)
@pytest.mark.parametrize("date_str", ["2026-02-18", "2026-01-01", "2026-12-31", "2024-02-29", "2000-06-15"])
def test_date_only_string_round_trips_in_every_timezone(local_timezone, tz_name, date_str):
    """Verify bare calendar dates survive parse/format unchanged regardless of time zone."""
    local_timezone(tz_name)

    assert format_local_date_key(parse_local_date(date_str)) == date_str


@requires_tzset
@pytest.mark.parametrize(
    "tz_name, date_str",
    [
        ("America/Sao_Paulo", "2018-11-04"),
        ("America/Santiago", "2022-09-11"),
        ("Asia/Beirut", "2023-03-26"),
        ("America/Havana", "2023-03-12"),
    ],
)
def test_date_only_string_round_trips_when_dst_skips_midnight(local_timezone, tz_name, date_str):
    """Verify days whose local midnight does not exist still parse onto the same day."""
    local_timezone(tz_name)

    parsed = parse_local_date(date_str)

    assert format_local_date_key(parsed) == date_str
    assert parsed.hour == 1


@requires_tzset
def test_date_only_string_is_local_midnight(local_timezone):
    """Verify bare dates resolve to local midnight rather than UTC midnight."""
    local_timezone("America/New_York")

    parsed = parse_local_date("2026-06-15")

    assert (parsed.year, parsed.month, parsed.day) == (2026, 6, 15)
    assert (parsed.hour, parsed.minute) == (0, 0)
    assert parsed.utcoffset() == timedelta(hours=-4)


def test_timestamp_with_z_suffix_is_utc():
    """Verify a trailing Z is read as UTC."""
    parsed = parse_local_date("2026-02-18T00:30:00Z")

    assert parsed == datetime(2026, 2, 18, 0, 30, tzinfo=timezone.utc)


def test_timestamp_with_offset_keeps_offset():
    """Verify explicit offsets are honored as given."""
    parsed = parse_local_date("2026-02-18T00:30:00-05:00")

    assert parsed.utcoffset() == timedelta(hours=-5)
    assert parsed == datetime(2026, 2, 18, 5, 30, tzinfo=timezone.utc)


@requires_tzset
def test_naive_timestamp_is_read_as_local_time(local_timezone):
    """Verify timestamps without an offset are interpreted as local wall-clock time."""
    local_timezone("Asia/Tokyo")

    parsed = parse_local_date("2026-02-18T10:00:00")

    assert parsed.utcoffset() == timedelta(hours=9)
    assert parsed.hour == 10


@requires_tzset
def test_format_uses_local_calendar_fields(local_timezone):
    """Verify an early-UTC instant formats as the previous day west of Greenwich."""
    local_timezone("America/New_York")

    instant = datetime(2026, 2, 18, 3, 0, tzinfo=timezone.utc)

    assert format_local_date_key(instant) == "2026-02-17"


def test_format_pads_single_digit_months_and_days():
    """Verify date keys are zero padded."""
    assert format_local_date_key(datetime(2026, 1, 5)) == "2026-01-05"
    assert format_local_date_key(datetime(2026, 12, 31, 23, 0)) == "2026-12-31"


def test_invalid_strings_raise_value_error():
    """Verify malformed input is rejected rather than silently defaulted."""
    with pytest.raises(ValueError):
        parse_local_date("not-a-date")
    with pytest.raises(ValueError):
        parse_local_date("2026-13-01")


def test_parse_timestamp_maps_empty_values_to_none():
    """Verify optional timestamp fields treat None and empty strings as missing."""
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    assert parse_timestamp("2026-02-18") == parse_local_date("2026-02-18")


def test_resolve_now_returns_aware_values():
    """Verify naive and missing reference instants become aware local datetimes."""
    assert resolve_now().tzinfo is not None
    naive = datetime(2026, 3, 15, 12, 0)
    resolved = resolve_now(naive)
    assert resolved.tzinfo is not None
    assert (resolved.hour, resolved.day) == (12, 15)
    assert local_today(naive).isoformat() == "2026-03-15"
