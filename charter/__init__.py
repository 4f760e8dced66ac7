"""Booking rules: availability, calendar display, selection, submission and admin actions."""

from .admin import AdminBlockManager, BookingAdmin, StatusAction, transition
from .availability import (
    ALL_CLOSED,
    ALL_OPEN,
    AvailabilitySnapshot,
    SlotAvailability,
    SlotEntry,
    resolve,
    resolve_for_date,
)
from .calendar_view import (
    BookingWindow,
    CalendarDay,
    DayState,
    MonthView,
    booking_window,
    classify_day,
    present_month,
    present_range,
)
from .export import bookings_to_csv, export_filename
from .selection import (
    EMPTY_SELECTION,
    ResetSelection,
    SelectDate,
    Selection,
    SelectSlot,
    reduce,
)
from .submission import BookingSubmission, validate_contact

__all__ = [
    "ALL_CLOSED",
    "ALL_OPEN",
    "AdminBlockManager",
    "AvailabilitySnapshot",
    "BookingAdmin",
    "BookingSubmission",
    "BookingWindow",
    "CalendarDay",
    "DayState",
    "EMPTY_SELECTION",
    "MonthView",
    "ResetSelection",
    "SelectDate",
    "SelectSlot",
    "Selection",
    "SlotAvailability",
    "SlotEntry",
    "StatusAction",
    "booking_window",
    "bookings_to_csv",
    "classify_day",
    "export_filename",
    "present_month",
    "present_range",
    "reduce",
    "resolve",
    "resolve_for_date",
    "transition",
    "validate_contact",
]
