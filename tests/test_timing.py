"""Tests for offset parsing, start-time parsing and time resolution."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from src.transcript.models import ResolvedTime
from src.transcript.timing import (
    MalformedOffsetError,
    MalformedTimestampError,
    TranscriptParseError,
    parse_offset,
    parse_start_time,
    resolve_offset,
)

ANCHOR = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
FROZEN_NOW = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)


class TestParseOffset:
    def test_basic(self) -> None:
        assert parse_offset("0:00:05") == timedelta(seconds=5)

    def test_hours_minutes_seconds(self) -> None:
        assert parse_offset("1:02:03") == timedelta(hours=1, minutes=2, seconds=3)

    def test_no_fixed_width(self) -> None:
        assert parse_offset("12:3:7") == timedelta(hours=12, minutes=3, seconds=7)

    def test_components_may_overflow(self) -> None:
        assert parse_offset("0:90:00") == timedelta(hours=1, minutes=30)

    @pytest.mark.parametrize("token", ["bad:data", "1:2", "1:2:3:4", "", "a:b:c", "1:-2:3", "1:2:3.5"])
    def test_malformed_raises(self, token: str) -> None:
        with pytest.raises(MalformedOffsetError):
            parse_offset(token)

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_offset("nope")
        assert issubclass(MalformedOffsetError, TranscriptParseError)


class TestParseStartTime:
    def test_utc(self) -> None:
        assert parse_start_time("2024-01-01T09:00UTC") == ANCHOR

    def test_known_abbreviation_offset(self) -> None:
        parsed = parse_start_time("2024-01-01T09:00EST")
        assert parsed.utcoffset() == timedelta(hours=-5)
        assert parsed == datetime(2024, 1, 1, 14, 0, tzinfo=timezone.utc)

    def test_half_hour_offset(self) -> None:
        parsed = parse_start_time("2024-01-01T09:00ACST")
        assert parsed.utcoffset() == timedelta(hours=9, minutes=30)

    def test_unlisted_abbreviation_is_zero_offset(self) -> None:
        parsed = parse_start_time("2024-01-01T09:00XYZ")
        assert parsed.utcoffset() == timedelta(0)
        assert parsed.tzname() == "XYZ"

    def test_custom_format(self) -> None:
        parsed = parse_start_time("01/02/2024 09:00UTC", fmt="%d/%m/%Y %H:%M")
        assert parsed == datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "token",
        ["2024-01-01T09:00", "tomorrow", "2024-13-01T09:00UTC", "2024-01-01 09:00UTC", ""],
    )
    def test_malformed_raises(self, token: str) -> None:
        with pytest.raises(MalformedTimestampError):
            parse_start_time(token)


class TestResolveOffset:
    def test_anchored(self) -> None:
        resolved = resolve_offset(ANCHOR, timedelta(0), "0:00:20")
        assert resolved == ResolvedTime(when=ANCHOR + timedelta(seconds=20), degraded=False)

    def test_correction_is_subtracted(self) -> None:
        resolved = resolve_offset(ANCHOR, timedelta(seconds=1), "0:00:20")
        assert resolved.when == ANCHOR + timedelta(seconds=19)
        assert not resolved.degraded

    def test_start_line_resolves_to_anchor(self) -> None:
        resolved = resolve_offset(ANCHOR, timedelta(minutes=3), "0:03:00")
        assert resolved.when == ANCHOR

    def test_monotonic_in_offset(self) -> None:
        offsets = ["0:00:01", "0:00:02", "0:01:00", "1:00:00"]
        times = [resolve_offset(ANCHOR, timedelta(seconds=1), o).when for o in offsets]
        assert times == sorted(times)
        assert all(t >= ANCHOR for t in times)

    def test_deterministic(self) -> None:
        first = resolve_offset(ANCHOR, timedelta(0), "0:10:00")
        second = resolve_offset(ANCHOR, timedelta(0), "0:10:00")
        assert first == second

    def test_no_anchor_uses_now_plus_offset(self) -> None:
        with patch("src.transcript.timing._now", return_value=FROZEN_NOW):
            resolved = resolve_offset(None, timedelta(0), "0:00:30")
        assert resolved.when == FROZEN_NOW + timedelta(seconds=30)
        assert resolved.degraded

    def test_malformed_offset_uses_now(self) -> None:
        with patch("src.transcript.timing._now", return_value=FROZEN_NOW):
            resolved = resolve_offset(ANCHOR, timedelta(0), "bad:data")
        assert resolved.when == FROZEN_NOW
        assert resolved.degraded

    def test_real_clock_fallback_is_aware(self) -> None:
        resolved = resolve_offset(None, timedelta(0), "bad:data")
        assert resolved.when.tzinfo is not None
