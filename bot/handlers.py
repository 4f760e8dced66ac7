"""
Bot handlers for the charter booking bot.
Handles customer interactions: calendar, trip selection, contact form, confirmation.
"""

import logging
from datetime import date
from typing import Optional, Tuple

from aiogram import Router
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message

from bot.keyboards import (
    CALENDAR_LEGEND,
    get_back_to_menu_keyboard,
    get_calendar_keyboard,
    get_cancel_keyboard,
    get_confirm_booking_keyboard,
    get_main_menu_keyboard,
    get_party_size_keyboard,
    get_skip_notes_keyboard,
    get_slot_keyboard,
)
from bot.states import BookingStates
from charter.availability import AvailabilitySnapshot, resolve_for_date
from charter.calendar_view import BookingWindow, booking_window, present_day, present_month
from charter.selection import SelectDate, Selection, SelectSlot, reduce
from charter.submission import FIELD_MESSAGES, BookingSubmission
from config import settings
from db import get_db_client
from models.booking import SlotType
from models.trip import get_all_trips, get_trip
from notifications import get_dispatcher
from utils.datetime_utils import format_long_date, parse_date_string
from utils.exceptions import BookingValidationError, DatabaseError, SlotUnavailableError
from utils.validation import sanitize_text, validate_email, validate_name, validate_notes, validate_phone

logger = logging.getLogger(__name__)

router = Router()


def welcome_text() -> str:
    return (
        f"🎣 Welcome to {settings.business_name}!\n\n"
        "Book a half-day or full-day fishing charter.\n"
        "Choose an option:"
    )


async def load_snapshot(window: BookingWindow) -> Optional[AvailabilitySnapshot]:
    """Availability for the booking window, or None if it cannot be read."""
    db = get_db_client()
    try:
        return await db.get_availability_snapshot(window.start, window.end)
    except DatabaseError as e:
        logger.error(f"Failed to load availability: {e}")
        return None


def parse_month(value: str) -> Tuple[int, int]:
    year, month = value.split("-")
    return int(year), int(month)


async def build_calendar(
    year: Optional[int] = None, month: Optional[int] = None
) -> Tuple[str, InlineKeyboardMarkup]:
    """Customer calendar text and keyboard; the month is clamped to the booking window."""
    window = booking_window()
    if year is None or month is None:
        year, month = window.start.year, window.start.month

    requested = date(year, month, 1)
    if requested < window.start.replace(day=1):
        requested = window.start.replace(day=1)
    elif requested > window.end:
        requested = window.end.replace(day=1)

    snapshot = await load_snapshot(window)
    view = present_month(snapshot, requested.year, requested.month, window)

    text = (
        "📅 Pick a date\n\n"
        f"Bookings are open through {format_long_date(window.end)}.\n"
        f"{CALENDAR_LEGEND}"
    )
    return text, get_calendar_keyboard(view)


def booking_summary(data: dict) -> str:
    selection = Selection.from_state(data)
    trip = get_trip(selection.slot)
    lines = [
        "📋 Booking Summary\n",
        f"Date: {format_long_date(selection.date)}",
        f"Trip: {trip.label} ({trip.time}, {trip.duration})",
        f"Price: ${trip.price_usd}",
        f"Party Size: {data.get('party_size')}",
        f"Name: {data.get('name')}",
        f"Phone: {data.get('phone')}",
        f"Email: {data.get('email')}",
    ]
    if data.get("notes"):
        lines.append(f"Notes: {data['notes']}")
    lines.append("\nConfirm your booking?")
    return "\n".join(lines)


# ========== Start Command & Main Menu ==========


@router.message(Command("start"))
async def cmd_start(message: Message, state: FSMContext):
    """Handle /start command."""
    await state.clear()
    await message.answer(welcome_text(), reply_markup=get_main_menu_keyboard())


@router.callback_query(lambda c: c.data == "main_menu")
async def show_main_menu(callback: CallbackQuery, state: FSMContext):
    """Show main menu."""
    await state.clear()
    await callback.message.edit_text(welcome_text(), reply_markup=get_main_menu_keyboard())
    await callback.answer()


@router.callback_query(lambda c: c.data == "noop")
async def ignore_inert_button(callback: CallbackQuery):
    await callback.answer()


# ========== Calendar & Slot Selection ==========


@router.message(Command("book"))
async def cmd_book(message: Message, state: FSMContext):
    await state.clear()
    await state.set_state(BookingStates.selecting_date)
    text, markup = await build_calendar()
    await message.answer(text, reply_markup=markup)


@router.callback_query(lambda c: c.data == "book_charter")
async def start_booking(callback: CallbackQuery, state: FSMContext):
    """Start booking flow."""
    await state.clear()
    await state.set_state(BookingStates.selecting_date)
    text, markup = await build_calendar()
    await callback.message.edit_text(text, reply_markup=markup)
    await callback.answer()


@router.callback_query(lambda c: c.data.startswith("cal_"))
async def change_month(callback: CallbackQuery, state: FSMContext):
    """Navigate the calendar; also used to go back from the slot selector."""
    try:
        year, month = parse_month(callback.data.split("_", 1)[1])
    except ValueError:
        await callback.answer("Invalid month", show_alert=True)
        return

    await state.set_state(BookingStates.selecting_date)
    text, markup = await build_calendar(year, month)
    await callback.message.edit_text(text, reply_markup=markup)
    await callback.answer()


@router.callback_query(lambda c: c.data.startswith("day_"))
async def select_date(callback: CallbackQuery, state: FSMContext):
    """Handle date selection."""
    try:
        day = parse_date_string(callback.data.split("_", 1)[1])
    except ValueError:
        await callback.answer("Invalid date", show_alert=True)
        return

    window = booking_window()
    snapshot = await load_snapshot(window)
    if not present_day(snapshot, day, window).selectable:
        await callback.answer("This date can't be booked. Please pick another.", show_alert=True)
        return

    data = await state.get_data()
    selection = reduce(Selection.from_state(data), SelectDate(day))
    await state.update_data(**selection.to_state())
    await state.set_state(BookingStates.selecting_slot)

    await callback.message.edit_text(
        f"🗓 {format_long_date(day)}\n\nChoose your trip:",
        reply_markup=get_slot_keyboard(resolve_for_date(snapshot, day), day),
    )
    await callback.answer()


@router.callback_query(lambda c: c.data.startswith("slot_"))
async def select_slot(callback: CallbackQuery, state: FSMContext):
    """Handle trip (slot) selection."""
    try:
        slot = SlotType(callback.data.split("_", 1)[1])
    except ValueError:
        await callback.answer("Invalid trip selection", show_alert=True)
        return

    data = await state.get_data()
    current = Selection.from_state(data)
    if current.date is None:
        await callback.answer("Please pick a date first.", show_alert=True)
        return

    snapshot = await load_snapshot(booking_window())
    selection = reduce(current, SelectSlot(slot), snapshot)
    if selection.slot != slot:
        await callback.answer(SlotUnavailableError.DEFAULT_MESSAGE, show_alert=True)
        await callback.message.edit_reply_markup(
            reply_markup=get_slot_keyboard(resolve_for_date(snapshot, current.date), current.date)
        )
        return

    await state.update_data(**selection.to_state())
    await state.set_state(BookingStates.entering_name)

    trip = get_trip(slot)
    await callback.message.edit_text(
        f"✅ {trip.label} on {format_long_date(selection.date)}\n\n"
        "Please enter your full name:",
        reply_markup=get_cancel_keyboard(),
    )
    await callback.answer()


# ========== Contact Details ==========


@router.message(StateFilter(BookingStates.entering_name))
async def handle_name(message: Message, state: FSMContext):
    name = (message.text or "").strip()
    if not validate_name(name):
        await message.answer(f"⚠️ {FIELD_MESSAGES['name']} (2-100 characters).")
        return

    await state.update_data(name=name)
    await state.set_state(BookingStates.entering_phone)
    await message.answer("📞 Phone number:", reply_markup=get_cancel_keyboard())


@router.message(StateFilter(BookingStates.entering_phone))
async def handle_phone(message: Message, state: FSMContext):
    phone = (message.text or "").strip()
    if not validate_phone(phone):
        await message.answer(f"⚠️ {FIELD_MESSAGES['phone']}.")
        return

    await state.update_data(phone=phone)
    await state.set_state(BookingStates.entering_email)
    await message.answer("📧 Email address:", reply_markup=get_cancel_keyboard())


@router.message(StateFilter(BookingStates.entering_email))
async def handle_email(message: Message, state: FSMContext):
    email = (message.text or "").strip()
    if not validate_email(email):
        await message.answer(f"⚠️ {FIELD_MESSAGES['email']}.")
        return

    await state.update_data(email=email)
    await state.set_state(BookingStates.selecting_party_size)
    await message.answer("👥 How many people in your party?", reply_markup=get_party_size_keyboard())


@router.callback_query(
    lambda c: c.data.startswith("party_"), StateFilter(BookingStates.selecting_party_size)
)
async def select_party_size(callback: CallbackQuery, state: FSMContext):
    try:
        party_size = int(callback.data.split("_", 1)[1])
    except ValueError:
        await callback.answer(FIELD_MESSAGES["party_size"], show_alert=True)
        return

    await state.update_data(party_size=party_size)
    await state.set_state(BookingStates.entering_notes)
    await callback.message.edit_text(
        "📝 Any notes for the captain? (special requests, experience level)\n\n"
        "Type them or tap Skip.",
        reply_markup=get_skip_notes_keyboard(),
    )
    await callback.answer()


@router.message(StateFilter(BookingStates.entering_notes))
async def handle_notes(message: Message, state: FSMContext):
    notes = sanitize_text(message.text or "")
    if not validate_notes(notes):
        await message.answer(f"⚠️ {FIELD_MESSAGES['notes']}.")
        return

    await state.update_data(notes=notes or None)
    await state.set_state(BookingStates.confirming_booking)
    data = await state.get_data()
    await message.answer(booking_summary(data), reply_markup=get_confirm_booking_keyboard())


@router.callback_query(lambda c: c.data == "skip_notes", StateFilter(BookingStates.entering_notes))
async def skip_notes(callback: CallbackQuery, state: FSMContext):
    await state.update_data(notes=None)
    await state.set_state(BookingStates.confirming_booking)
    data = await state.get_data()
    await callback.message.edit_text(
        booking_summary(data), reply_markup=get_confirm_booking_keyboard()
    )
    await callback.answer()


# ========== Confirmation ==========


@router.callback_query(
    lambda c: c.data == "confirm_booking", StateFilter(BookingStates.confirming_booking)
)
async def confirm_booking(callback: CallbackQuery, state: FSMContext):
    """Submit the booking."""
    data = await state.get_data()
    selection = Selection.from_state(data)
    contact = {
        "name": data.get("name"),
        "phone": data.get("phone"),
        "email": data.get("email"),
        "party_size": data.get("party_size"),
        "notes": data.get("notes"),
    }

    snapshot = await load_snapshot(booking_window())
    submission = BookingSubmission(get_db_client(), get_dispatcher())

    try:
        booking = await submission.submit(selection, contact, snapshot)
    except BookingValidationError as e:
        errors = "\n".join(f"• {message}" for message in e.errors.values())
        await callback.message.edit_text(
            f"⚠️ Please fix the following:\n{errors}\n\nLet's start again with your name:",
            reply_markup=get_cancel_keyboard(),
        )
        await state.set_state(BookingStates.entering_name)
        await callback.answer()
        return
    except SlotUnavailableError as e:
        # Selection is reset; the customer picks again from a fresh calendar
        await state.clear()
        await state.set_state(BookingStates.selecting_date)
        text, markup = await build_calendar(
            selection.date.year if selection.date else None,
            selection.date.month if selection.date else None,
        )
        await callback.message.edit_text(f"❌ {e}\n\n{text}", reply_markup=markup)
        await callback.answer()
        return

    await state.clear()

    trip = get_trip(booking.slot_type)
    first_name = booking.name.split(" ")[0]
    await callback.message.edit_text(
        "✅ Booking Confirmed!\n\n"
        f"Thanks, {first_name}! We'll see you on the water.\n\n"
        f"Date: {format_long_date(booking.date)}\n"
        f"Trip: {trip.label} ({trip.time})\n"
        f"Party Size: {booking.party_size}\n\n"
        "What's next:\n"
        f"• A confirmation email is on its way to {booking.email}\n"
        "• We'll text you meeting location details\n",
        reply_markup=get_main_menu_keyboard(),
    )
    await callback.answer()


@router.callback_query(lambda c: c.data == "cancel_booking")
async def cancel_booking(callback: CallbackQuery, state: FSMContext):
    """Abandon the booking flow."""
    await state.clear()
    await callback.message.edit_text(
        "Booking canceled. Nothing was saved.\n\n" + welcome_text(),
        reply_markup=get_main_menu_keyboard(),
    )
    await callback.answer()


@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext):
    await state.clear()
    await message.answer("Booking canceled. Nothing was saved.", reply_markup=get_main_menu_keyboard())


# ========== Trip Info ==========


def info_text() -> str:
    trips = "\n".join(
        f"• {trip.label} ({trip.time}, {trip.duration}) - ${trip.price_usd}"
        for trip in get_all_trips()
    )
    return (
        f"ℹ️ {settings.business_name}\n\n"
        f"Trips:\n{trips}\n"
        "💵 Cash preferred. Deposit optional on request.\n\n"
        "What's included:\n"
        "• All fishing tackle and gear\n"
        "• Live and artificial bait\n"
        "• Fishing license coverage\n"
        "• Cooler with ice and fish cleaning\n"
        "• Bottled water on board\n\n"
        "What to bring:\n"
        "• Sunscreen, sunglasses and a hat\n"
        "• Non-marking shoes (no black soles)\n"
        "• Snacks and drinks (no glass)\n"
        "• Rain jacket, just in case\n\n"
        "Arrive 15 minutes before departure. We'll text you exact directions after booking.\n\n"
        "Cancellation policy:\n"
        "• 48+ hours notice: full refund or reschedule\n"
        "• 24-48 hours notice: 50% refund or reschedule\n"
        "• Less than 24 hours: no refund (weather exceptions apply)\n"
        "• Weather cancellations: full reschedule or refund"
    )


@router.message(Command("info"))
async def cmd_info(message: Message):
    await message.answer(info_text(), reply_markup=get_main_menu_keyboard())


@router.callback_query(lambda c: c.data == "info")
async def show_info(callback: CallbackQuery):
    """Show trip information."""
    await callback.message.edit_text(info_text(), reply_markup=get_back_to_menu_keyboard())
    await callback.answer()


def register_handlers(dp) -> None:
    """Register all handlers with dispatcher."""
    dp.include_router(router)
