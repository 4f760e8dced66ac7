"""
Datetime utilities for consistent handling of timestamps and calendar days.

Timestamps (``created_at``) are timezone-aware datetimes.
Booking and block dates are calendar days (``datetime.date``) stored as
``YYYY-MM-DD`` strings and never carry a time of day.
"""

from datetime import date, datetime, timezone
from typing import Union

from utils.constants import DATE_FORMAT


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def parse_iso_datetime(iso_string: str) -> datetime:
    """
    Parse ISO format datetime string to timezone-aware datetime.
    Handles both 'Z' suffix and '+00:00' timezone formats.

    Raises:
        ValueError: If datetime string cannot be parsed
    """
    normalized = iso_string.replace("Z", "+00:00")

    try:
        dt = datetime.fromisoformat(normalized)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except ValueError as e:
        raise ValueError(f"Invalid datetime string: {iso_string}") from e


def to_iso_string(dt: datetime) -> str:
    """Convert datetime to ISO format string, assuming UTC for naive values."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.isoformat()


def parse_date_string(value: Union[str, date]) -> date:
    """
    Parse a ``YYYY-MM-DD`` calendar-day string.

    A ``date`` passes through unchanged. Datetimes are rejected: a calendar
    day must not be derived from an instant implicitly.

    Raises:
        ValueError: If the value is not a calendar-day string
    """
    if isinstance(value, datetime):
        raise ValueError(f"Expected a calendar day, got a datetime: {value!r}")
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid date string: {value!r}") from e


def to_date_string(day: date) -> str:
    """Format a calendar day for storage and filtering."""
    return day.strftime(DATE_FORMAT)


def format_long_date(day: date) -> str:
    """Human-readable day, e.g. ``Thursday, July 10, 2025``."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"
