"""Timestamp helpers shared by the SQL and in-memory stores."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

_MIN_STEP = timedelta(microseconds=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values (SQLite drops tzinfo on round-trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def advance_timestamp(previous: datetime | None, now: datetime | None = None) -> datetime:
    """Return a timestamp strictly after ``previous``, normally ``now``.

    Keeps ``last_seen`` monotonic even when two writes land within the clock
    resolution or the wall clock steps backwards.
    """
    current = as_utc(now) if now is not None else utc_now()
    if previous is None:
        return current
    floor = as_utc(previous) + _MIN_STEP
    return current if current >= floor else floor
