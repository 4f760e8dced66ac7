"""
Calendar display states for the booking and admin calendars.

Each day is classified from the availability snapshot; the customer
calendar additionally limits selection to the booking window
(today through today + horizon). The admin calendar has no bounds.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from charter.availability import AvailabilitySnapshot, resolve_for_date
from charter.dates import add_months, iter_days, today as local_today
from config import settings


class DayState(str, Enum):
    """How a day is drawn on the calendar."""

    OPEN = "open"
    AM_MARKED = "am-marked"
    PM_MARKED = "pm-marked"
    FULLY_BOOKED = "fully-booked"


@dataclass(frozen=True)
class BookingWindow:
    """Days a customer may pick: ``start`` through ``end`` inclusive."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def booking_window(
    today: Optional[date] = None, months: Optional[int] = None
) -> BookingWindow:
    """Window starting today (computed once per render) and ending ``months`` later."""
    start = today or local_today()
    horizon = settings.booking_horizon_months if months is None else months
    return BookingWindow(start=start, end=add_months(start, horizon))


@dataclass(frozen=True)
class CalendarDay:
    day: date
    state: DayState
    selectable: bool


@dataclass(frozen=True)
class MonthView:
    year: int
    month: int
    weeks: list  # list[list[Optional[CalendarDay]]], Monday first
    has_previous: bool
    has_next: bool


def classify_day(snapshot: Optional[AvailabilitySnapshot], day: date) -> DayState:
    availability = resolve_for_date(snapshot, day)
    if availability.fully_booked:
        return DayState.FULLY_BOOKED
    if not availability.am:
        return DayState.AM_MARKED
    if not availability.pm:
        return DayState.PM_MARKED
    return DayState.OPEN


def present_day(
    snapshot: Optional[AvailabilitySnapshot],
    day: date,
    window: Optional[BookingWindow] = None,
) -> CalendarDay:
    """
    Classify one day.

    With a ``window`` (customer view) days outside it are never selectable,
    and neither are fully booked days. Without one (admin view) every day
    can be selected.
    """
    state = classify_day(snapshot, day)
    if window is None:
        return CalendarDay(day=day, state=state, selectable=True)
    selectable = window.contains(day) and state != DayState.FULLY_BOOKED
    return CalendarDay(day=day, state=state, selectable=selectable)


def present_range(
    snapshot: Optional[AvailabilitySnapshot],
    start: date,
    end: date,
    window: Optional[BookingWindow] = None,
) -> list[CalendarDay]:
    return [present_day(snapshot, day, window) for day in iter_days(start, end)]


def present_month(
    snapshot: Optional[AvailabilitySnapshot],
    year: int,
    month: int,
    window: Optional[BookingWindow] = None,
) -> MonthView:
    """Weeks grid for one month; days of neighbouring months are ``None``."""
    weeks = []
    for week in calendar.Calendar(firstweekday=0).monthdatescalendar(year, month):
        weeks.append(
            [
                present_day(snapshot, day, window) if day.month == month else None
                for day in week
            ]
        )

    first = date(year, month, 1)
    if window is None:
        has_previous = has_next = True
    else:
        has_previous = add_months(first, -1) >= window.start.replace(day=1)
        has_next = add_months(first, 1) <= window.end

    return MonthView(
        year=year,
        month=month,
        weeks=weeks,
        has_previous=has_previous,
        has_next=has_next,
    )
