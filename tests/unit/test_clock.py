"""Unit tests for timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from radar.core.clock import advance_timestamp, as_utc


def test_as_utc_attaches_timezone_to_naive_values() -> None:
    naive = datetime(2026, 1, 1, 12, 0)

    assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_advance_timestamp_uses_now_when_later() -> None:
    previous = datetime(2026, 1, 1, tzinfo=timezone.utc)
    now = previous + timedelta(minutes=5)

    assert advance_timestamp(previous, now) == now


def test_advance_timestamp_is_strictly_increasing_when_clock_lags() -> None:
    previous = datetime(2026, 1, 1, tzinfo=timezone.utc)

    same = advance_timestamp(previous, previous)
    behind = advance_timestamp(previous, previous - timedelta(seconds=3))

    assert same > previous
    assert behind > previous


def test_advance_timestamp_handles_naive_previous() -> None:
    previous = datetime(2026, 1, 1)

    assert advance_timestamp(previous) > as_utc(previous)
