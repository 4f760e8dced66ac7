"""
Calendar-day helpers.

Booking dates are calendar days (``datetime.date``). Stored values are
``YYYY-MM-DD`` strings whose meaning depends on ``settings.day_interpretation``:

* ``calendar``: the string is the local calendar day, nothing else.
* ``utc_midnight``: the string names a UTC-midnight instant, and the local
  calendar day is wherever that instant falls in ``settings.timezone``.
  West of UTC this is the previous day.

"Today" is always the calendar day in ``settings.timezone``.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional, Union
from zoneinfo import ZoneInfo

from config import DayInterpretation, settings
from utils.datetime_utils import parse_date_string, to_date_string


def _zone(tz_name: Optional[str]) -> ZoneInfo:
    return ZoneInfo(tz_name or settings.timezone)


def _interpretation(
    interpretation: Optional[DayInterpretation],
) -> DayInterpretation:
    return DayInterpretation(interpretation or settings.day_interpretation)


def today(tz_name: Optional[str] = None, now: Optional[datetime] = None) -> date:
    """Current calendar day in the configured timezone."""
    zone = _zone(tz_name)
    current = now or datetime.now(zone)
    if current.tzinfo is None:
        return current.date()
    return current.astimezone(zone).date()


def local_time(moment: datetime, tz_name: Optional[str] = None) -> datetime:
    """Project a stored timestamp onto the configured timezone; naive values are UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(_zone(tz_name))


def local_day(
    value: Union[str, date],
    interpretation: Optional[DayInterpretation] = None,
    tz_name: Optional[str] = None,
) -> date:
    """Map a stored date value onto the local calendar."""
    day = parse_date_string(value)
    if _interpretation(interpretation) == DayInterpretation.CALENDAR:
        return day

    instant = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return instant.astimezone(_zone(tz_name)).date()


def storage_day(
    day: date,
    interpretation: Optional[DayInterpretation] = None,
    tz_name: Optional[str] = None,
) -> str:
    """
    Inverse of ``local_day``: the stored string for a local calendar day.

    Offsets are within one day of UTC, so the stored day is the local day
    or one of its neighbours.
    """
    if _interpretation(interpretation) == DayInterpretation.CALENDAR:
        return to_date_string(day)

    for offset in (0, 1, -1):
        candidate = day + timedelta(days=offset)
        if local_day(candidate, DayInterpretation.UTC_MIDNIGHT, tz_name) == day:
            return to_date_string(candidate)
    # Offsets beyond a day (UTC+14 edge cases) fall back to the plain day
    return to_date_string(day)


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def month_bounds(day: date) -> tuple[date, date]:
    """First and last calendar day of the month containing ``day``."""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
