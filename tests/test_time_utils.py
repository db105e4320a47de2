from datetime import datetime, timezone

import pytest

from utils.time import from_epoch_seconds, parse_upstream_datetime


def test_from_epoch_seconds_is_aware_utc():
    parsed = from_epoch_seconds(1700000000)

    assert parsed == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert parsed.tzinfo is timezone.utc


@pytest.mark.parametrize("value", ["1700000000", None, True])
def test_from_epoch_seconds_rejects_non_numbers(value):
    with pytest.raises(TypeError):
        from_epoch_seconds(value)


def test_parse_upstream_datetime_reads_listing_format_as_local_time():
    parsed = parse_upstream_datetime("18 Oct 2025  20:00:00", "Asia/Kolkata")

    assert parsed == datetime(2025, 10, 18, 14, 30, tzinfo=timezone.utc)


def test_parse_upstream_datetime_respects_explicit_offset():
    parsed = parse_upstream_datetime("2025-10-18T20:00:00+05:30", "UTC")

    assert parsed == datetime(2025, 10, 18, 14, 30, tzinfo=timezone.utc)


def test_parse_upstream_datetime_naive_iso_uses_local_zone():
    parsed = parse_upstream_datetime("2025-10-18 20:00:00", "Asia/Kolkata")

    assert parsed == datetime(2025, 10, 18, 14, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["not-a-date", "", "   ", None, 1700000000])
def test_parse_upstream_datetime_rejects_invalid_input(value):
    assert parse_upstream_datetime(value, "Asia/Kolkata") is None
