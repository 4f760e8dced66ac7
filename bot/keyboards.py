"""
Inline keyboards for bot interactions.
"""

from datetime import date
from typing import List, Optional

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from charter.availability import SlotAvailability
from charter.calendar_view import CalendarDay, DayState, MonthView
from models.blocked_slot import BlockedSlot
from models.booking import Booking, BookingStatus, SlotType
from models.trip import get_all_trips
from utils.constants import BOOKING_ID_DISPLAY_LENGTH, MAX_PARTY_SIZE, MIN_PARTY_SIZE
from utils.datetime_utils import to_date_string

NOOP = "noop"

WEEKDAY_LABELS = ["Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"]

DAY_MARKERS = {
    DayState.OPEN: "",
    DayState.AM_MARKED: "◐",
    DayState.PM_MARKED: "◑",
    DayState.FULLY_BOOKED: "✖",
}

CALENDAR_LEGEND = "◐ morning taken · ◑ afternoon taken · ✖ fully booked"


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def day_label(cell: CalendarDay) -> str:
    if not cell.selectable and cell.state != DayState.FULLY_BOOKED:
        return "·"
    return f"{cell.day.day}{DAY_MARKERS[cell.state]}"


def get_main_menu_keyboard() -> InlineKeyboardMarkup:
    """Get main menu keyboard."""
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(text="🎣 Book a Charter", callback_data="book_charter")
    )
    builder.row(
        InlineKeyboardButton(text="ℹ️ Trip Info", callback_data="info")
    )

    return builder.as_markup()


def get_calendar_keyboard(
    view: MonthView,
    day_prefix: str = "day_",
    nav_prefix: str = "cal_",
    back_callback: str = "main_menu",
) -> InlineKeyboardMarkup:
    """
    Month grid with navigation.

    Selectable days call back ``{day_prefix}YYYY-MM-DD``; everything else
    is inert.
    """
    builder = InlineKeyboardBuilder()

    first = date(view.year, view.month, 1)
    previous_month = (view.year - 1, 12) if view.month == 1 else (view.year, view.month - 1)
    next_month = (view.year + 1, 1) if view.month == 12 else (view.year, view.month + 1)

    builder.row(
        InlineKeyboardButton(
            text="◀️" if view.has_previous else " ",
            callback_data=f"{nav_prefix}{month_key(*previous_month)}" if view.has_previous else NOOP,
        ),
        InlineKeyboardButton(text=first.strftime("%B %Y"), callback_data=NOOP),
        InlineKeyboardButton(
            text="▶️" if view.has_next else " ",
            callback_data=f"{nav_prefix}{month_key(*next_month)}" if view.has_next else NOOP,
        ),
    )
    builder.row(
        *[InlineKeyboardButton(text=label, callback_data=NOOP) for label in WEEKDAY_LABELS]
    )

    for week in view.weeks:
        buttons = []
        for cell in week:
            if cell is None:
                buttons.append(InlineKeyboardButton(text=" ", callback_data=NOOP))
            elif cell.selectable:
                buttons.append(
                    InlineKeyboardButton(
                        text=day_label(cell),
                        callback_data=f"{day_prefix}{to_date_string(cell.day)}",
                    )
                )
            else:
                buttons.append(InlineKeyboardButton(text=day_label(cell), callback_data=NOOP))
        builder.row(*buttons)

    builder.row(InlineKeyboardButton(text="🔙 Back", callback_data=back_callback))

    return builder.as_markup()


def get_slot_keyboard(availability: SlotAvailability, selected_day: date) -> InlineKeyboardMarkup:
    """Trip choices for a day; taken trips are shown but inert."""
    builder = InlineKeyboardBuilder()

    for trip in get_all_trips():
        if availability[trip.slot_type]:
            builder.row(
                InlineKeyboardButton(
                    text=f"{trip.label} · {trip.time} · ${trip.price_usd}",
                    callback_data=f"slot_{trip.slot_type.value}",
                )
            )
        else:
            builder.row(
                InlineKeyboardButton(
                    text=f"❌ {trip.label} (booked)", callback_data=NOOP
                )
            )

    builder.row(
        InlineKeyboardButton(
            text="🔙 Back to Calendar",
            callback_data=f"cal_{month_key(selected_day.year, selected_day.month)}",
        )
    )

    return builder.as_markup()


def get_party_size_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        *[
            InlineKeyboardButton(text=str(size), callback_data=f"party_{size}")
            for size in range(MIN_PARTY_SIZE, MAX_PARTY_SIZE + 1)
        ]
    )
    builder.row(InlineKeyboardButton(text="❌ Cancel", callback_data="cancel_booking"))
    return builder.as_markup()


def get_skip_notes_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="⏭ Skip", callback_data="skip_notes"))
    builder.row(InlineKeyboardButton(text="❌ Cancel", callback_data="cancel_booking"))
    return builder.as_markup()


def get_cancel_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="❌ Cancel", callback_data="cancel_booking"))
    return builder.as_markup()


def get_confirm_booking_keyboard() -> InlineKeyboardMarkup:
    """Get booking confirmation keyboard."""
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(text="✅ Confirm Booking", callback_data="confirm_booking")
    )
    builder.row(
        InlineKeyboardButton(text="❌ Cancel", callback_data="cancel_booking")
    )

    return builder.as_markup()


def get_back_to_menu_keyboard() -> InlineKeyboardMarkup:
    """Get simple back to menu keyboard."""
    builder = InlineKeyboardBuilder()

    builder.row(InlineKeyboardButton(text="🔙 Main Menu", callback_data="main_menu"))

    return builder.as_markup()


# ========== Admin ==========


def short_id(value: Optional[str]) -> str:
    return (value or "")[:BOOKING_ID_DISPLAY_LENGTH]


def get_admin_menu_keyboard() -> InlineKeyboardMarkup:
    """Get admin menu keyboard."""
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(text="📅 Calendar", callback_data="admin_calendar")
    )
    builder.row(
        InlineKeyboardButton(text="🗓 Next 7 Days", callback_data="admin_upcoming")
    )
    builder.row(
        InlineKeyboardButton(text="📤 Export CSV", callback_data="admin_export")
    )
    builder.row(
        InlineKeyboardButton(text="🚪 Log Out", callback_data="admin_logout")
    )

    return builder.as_markup()


def get_admin_day_keyboard(
    day: date, bookings: List[Booking], blocks: List[BlockedSlot]
) -> InlineKeyboardMarkup:
    """Actions for every booking and block on ``day``, plus new-block buttons."""
    builder = InlineKeyboardBuilder()

    for booking in bookings:
        label = f"{booking.slot_type.value} {booking.name} #{short_id(booking.id)}"
        if booking.status == BookingStatus.CONFIRMED:
            toggle = InlineKeyboardButton(
                text=f"❌ Cancel {label}", callback_data=f"admin_cancel_{booking.id}"
            )
        else:
            toggle = InlineKeyboardButton(
                text=f"↩️ Restore {label}", callback_data=f"admin_restore_{booking.id}"
            )
        builder.row(
            toggle,
            InlineKeyboardButton(text="🗑", callback_data=f"admin_delete_{booking.id}"),
        )

    for block in blocks:
        builder.row(
            InlineKeyboardButton(
                text=f"🔓 Unblock {block.slot_type.value}",
                callback_data=f"admin_unblock_{block.id}",
            )
        )

    day_str = to_date_string(day)
    builder.row(
        *[
            InlineKeyboardButton(
                text=f"🚫 Block {slot.value}",
                callback_data=f"admin_block_{day_str}_{slot.value}",
            )
            for slot in SlotType
        ]
    )
    builder.row(
        InlineKeyboardButton(
            text="🔙 Back to Calendar",
            callback_data=f"admin_cal_{month_key(day.year, day.month)}",
        )
    )

    return builder.as_markup()


def get_skip_reason_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="⏭ No reason", callback_data="admin_noreason"))
    builder.row(InlineKeyboardButton(text="🔙 Admin Menu", callback_data="admin_menu"))
    return builder.as_markup()


def get_back_to_admin_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="🔙 Admin Menu", callback_data="admin_menu"))
    return builder.as_markup()
