"""
Framework-agnostic date/time helpers.

MongoDB returns naive datetimes unless the client is configured with
``tz_aware=True``; every comparison goes through ``ensure_utc`` so stored
values and ``utcnow()`` are always comparable.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_iso_date(value: str) -> Optional[datetime]:
    """Parse a strict ``YYYY-MM-DD`` string into a UTC midnight datetime.

    Returns:
        The parsed date, or ``None`` if *value* is not a valid calendar date
        in that exact format.
    """
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except (TypeError, ValueError):
        return None
    return parsed.replace(tzinfo=timezone.utc)


def age_on(birth_date: datetime, today: datetime) -> int:
    """Whole years between *birth_date* and *today*."""
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years
