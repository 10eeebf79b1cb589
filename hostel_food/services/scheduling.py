"""Scheduled ordering window: date keys, advance window and cut-off checks.

Every scheduled date is stored as a DateOnlyKey, the UTC midnight of the
calendar day the caller selected. The checks below render that key and "now"
in the university's own time zone before comparing calendar days.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from hostel_food.utils.time import as_utc, utc_now

DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
CUTOFF_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")
MIN_ADVANCE_DAYS = 1
MAX_ADVANCE_DAYS = 14


class OrderingError(Exception):
    """Expected, user-facing rejection of a scheduling or checkout request."""

    message: str = "Order could not be placed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class ParseError(OrderingError, ValueError):
    """Raised when a date-like value cannot be turned into a date key."""

    message = "Invalid date"


class WindowExceededError(OrderingError):
    """Raised when the scheduled date is beyond the advance window."""

    message = "Selected date is beyond allowed window"


class CutoffPassedError(OrderingError):
    """Raised when the ordering cut-off for the scheduled date has elapsed."""

    message = "Cutoff time has passed for the selected date"


@dataclass(frozen=True)
class UniversityTimeConfig:
    """Per-university ordering window settings."""

    timezone: str
    order_cutoff_time: str
    max_advance_days: int

    @classmethod
    def from_university(cls, university) -> UniversityTimeConfig:
        return cls(
            timezone=university.timezone,
            order_cutoff_time=university.order_cutoff_time,
            max_advance_days=university.max_advance_days,
        )


def to_utc_date_only(value: str | date | datetime) -> datetime:
    """Return the DateOnlyKey (UTC midnight) for a date-like value.

    Values without an offset are taken as UTC. Values carrying an offset are
    converted to UTC first, so a local timestamp close to midnight may land on
    the neighbouring day; callers send plain ``YYYY-MM-DD`` strings.
    """
    if isinstance(value, str):
        try:
            parsed: datetime = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ParseError(f"Invalid date: {value!r}") from exc
    elif isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        raise ParseError(f"Invalid date: {value!r}")

    return as_utc(parsed).replace(hour=0, minute=0, second=0, microsecond=0)


def format_date_key(value: date | datetime) -> str:
    """Render a date key as ``YYYY-MM-DD``."""
    if isinstance(value, datetime):
        value = as_utc(value).date()
    return value.isoformat()


def parse_cutoff_time(value: str) -> time:
    """Parse a ``HH:MM`` cut-off string."""
    if not CUTOFF_TIME_PATTERN.match(value or ""):
        raise ValueError(f"Cut-off time must be HH:MM, got {value!r}")
    hours, minutes = (int(part) for part in value.split(":"))
    return time(hour=hours, minute=minutes)


def _local_date(instant: datetime, zone: ZoneInfo) -> date:
    return as_utc(instant).astimezone(zone).date()


def is_within_advance_window(
    target_date: datetime,
    cfg: UniversityTimeConfig,
    now: datetime | None = None,
) -> bool:
    """Return True when the target day is at most ``max_advance_days`` ahead of local today."""
    zone = ZoneInfo(cfg.timezone)
    today_local: date = _local_date(now or utc_now(), zone)
    last_allowed_local: date = today_local + timedelta(days=cfg.max_advance_days)
    target_local: date = _local_date(target_date, zone)
    return target_local <= last_allowed_local


def is_past_cutoff_for_date(
    target_date: datetime,
    cfg: UniversityTimeConfig,
    now: datetime | None = None,
) -> bool:
    """Return True once the cut-off on the local day before the target day has passed."""
    zone = ZoneInfo(cfg.timezone)
    cutoff_day: date = _local_date(target_date, zone) - timedelta(days=1)
    cutoff_local = datetime.combine(cutoff_day, parse_cutoff_time(cfg.order_cutoff_time), tzinfo=zone)
    return as_utc(now or utc_now()) > cutoff_local.astimezone(timezone.utc)


def ensure_orderable_date(
    target_date: datetime,
    cfg: UniversityTimeConfig,
    now: datetime | None = None,
) -> None:
    """Raise the matching rejection when the target date cannot be ordered for."""
    current: datetime = now or utc_now()
    if not is_within_advance_window(target_date, cfg, current):
        raise WindowExceededError
    if is_past_cutoff_for_date(target_date, cfg, current):
        raise CutoffPassedError
