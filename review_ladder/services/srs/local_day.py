"""
Local-day clock.

Turns a learner's timezone preference into day boundaries expressed as
naive UTC datetimes, the representation used for storage and comparison.
Unknown or empty zone identifiers fall back to UTC with a warning.
"""

import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

UTC_ZONE = "UTC"


def utc_now() -> datetime:
    """Current instant as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage(instant: datetime) -> datetime:
    """Normalize an instant to naive UTC (naive input is assumed to be UTC)."""
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(timezone.utc).replace(tzinfo=None)


def resolve_zone(name: Optional[str]) -> tzinfo:
    """Resolve a zone identifier, falling back to UTC on any failure."""
    if not name or not name.strip():
        if name is not None:
            logger.warning("Empty timezone identifier, falling back to UTC")
        return timezone.utc
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(f"Unknown timezone '{name}', falling back to UTC: {e}")
        return timezone.utc


def is_valid_zone(name: Optional[str]) -> bool:
    if not name or not name.strip():
        return False
    try:
        ZoneInfo(name.strip())
        return True
    except (ZoneInfoNotFoundError, ValueError):
        return False


def local_date(tz_name: Optional[str], now: Optional[datetime] = None) -> date:
    """Calendar date in the learner's zone at ``now``."""
    now = to_storage(now or utc_now())
    return now.replace(tzinfo=timezone.utc).astimezone(resolve_zone(tz_name)).date()


def local_midnight(tz_name: Optional[str], day: date) -> datetime:
    """00:00 of ``day`` in the learner's zone, as naive UTC."""
    zone = resolve_zone(tz_name)
    midnight = datetime(day.year, day.month, day.day, tzinfo=zone)
    return midnight.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_local_day(
    tz_name: Optional[str], now: Optional[datetime] = None, days_ahead: int = 0
) -> datetime:
    """Start of the learner's local day, optionally shifted by whole days.

    Shifting happens on the calendar date before converting back to UTC,
    so the result is always a local midnight even across DST changes.

    Args:
        tz_name: IANA zone identifier; None or invalid means UTC.
        now: Reference instant (naive UTC or aware); defaults to the current time.
        days_ahead: Number of local days to add.

    Returns:
        Naive UTC datetime of the local midnight.
    """
    today = local_date(tz_name, now)
    return local_midnight(tz_name, today + timedelta(days=days_ahead))


def start_of_next_local_day(tz_name: Optional[str], now: Optional[datetime] = None) -> datetime:
    return start_of_local_day(tz_name, now, days_ahead=1)


def due_boundary(tz_name: Optional[str], now: Optional[datetime] = None) -> datetime:
    """Inclusive upper bound on ``next_due_at`` for "due today"."""
    return start_of_next_local_day(tz_name, now)
