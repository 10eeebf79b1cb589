"""Time helpers shared by services and reports."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC; naive values are taken as UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def today_window_utc(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return today's UTC window boundaries.

    Order timestamps are stored in UTC, so "created today" filtering uses UTC
    boundaries as well.
    """
    current = as_utc(now or utc_now())
    start = current.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start, end


def days_ago(days: int, now: datetime | None = None) -> datetime:
    return (now or utc_now()) - timedelta(days=days)
