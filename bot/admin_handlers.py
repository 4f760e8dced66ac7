"""
Admin panel handlers for bookings and blocked slots.
Accessible after signing in with a Supabase Auth account (/admin).
"""

import logging
from datetime import date
from typing import List, Optional, Tuple

from aiogram import Router
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import BufferedInputFile, CallbackQuery, InlineKeyboardMarkup, Message

from bot.keyboards import (
    CALENDAR_LEGEND,
    get_admin_day_keyboard,
    get_admin_menu_keyboard,
    get_back_to_admin_keyboard,
    get_calendar_keyboard,
    get_skip_reason_keyboard,
    short_id,
)
from bot.states import AdminStates
from charter.admin import AdminBlockManager, BookingAdmin
from charter.calendar_view import present_month
from charter.dates import month_bounds, today
from charter.export import bookings_to_csv, export_filename
from db import get_admin_auth, get_db_client
from models.booking import Booking, BookingStatus, SlotType
from models.trip import get_trip
from utils.constants import BOOKINGS_DISPLAY_LIMIT, MAX_BLOCK_REASON_LENGTH, UPCOMING_DAYS
from utils.datetime_utils import format_long_date, parse_date_string, to_date_string
from utils.exceptions import (
    AuthenticationError,
    BookingNotFoundError,
    DatabaseError,
    InvalidStatusTransitionError,
    SlotConflictError,
)
from utils.validation import validate_block_reason

logger = logging.getLogger(__name__)

admin_router = Router()


def is_admin_user(chat_id: int) -> bool:
    """Check if the chat has a signed-in admin session."""
    return get_admin_auth().is_signed_in(chat_id)


async def require_admin(callback: CallbackQuery) -> bool:
    """Check admin access and alert if not signed in."""
    if not is_admin_user(callback.from_user.id):
        await callback.answer("🔐 Please sign in with /admin first.", show_alert=True)
        return False
    return True


def format_booking(booking: Booking) -> str:
    trip = get_trip(booking.slot_type)
    status = "✅" if booking.status == BookingStatus.CONFIRMED else "❌ canceled"
    lines = [
        f"{status} {booking.slot_type.value} · {trip.label} #{short_id(booking.id)}",
        f"   {booking.name} · party of {booking.party_size}",
        f"   📞 {booking.phone} · 📧 {booking.email}",
    ]
    if booking.notes:
        lines.append(f"   📝 {booking.notes}")
    return "\n".join(lines)


# ========== Sign In ==========


@admin_router.message(Command("admin"))
async def cmd_admin(message: Message, state: FSMContext):
    """Admin panel entry point."""
    if is_admin_user(message.from_user.id):
        await state.set_state(None)
        await message.answer("🔐 Admin Panel", reply_markup=get_admin_menu_keyboard())
        return

    await state.clear()
    await state.set_state(AdminStates.entering_email)
    await message.answer("🔐 Admin sign-in\n\nEmail:")


@admin_router.message(StateFilter(AdminStates.entering_email))
async def handle_admin_email(message: Message, state: FSMContext):
    await state.update_data(admin_email=(message.text or "").strip())
    await state.set_state(AdminStates.entering_password)
    await message.answer("Password:")


@admin_router.message(StateFilter(AdminStates.entering_password))
async def handle_admin_password(message: Message, state: FSMContext):
    data = await state.get_data()
    password = message.text or ""

    # Don't leave the password in the chat history
    try:
        await message.delete()
    except Exception as e:
        logger.warning(f"Could not delete password message: {e}")

    auth = get_admin_auth()
    try:
        await auth.sign_in(message.from_user.id, data.get("admin_email", ""), password)
    except AuthenticationError as e:
        await state.set_state(AdminStates.entering_email)
        await message.answer(f"❌ {e}\n\nEmail:")
        return

    await state.clear()
    await message.answer("✅ Signed in.\n\n🔐 Admin Panel", reply_markup=get_admin_menu_keyboard())


@admin_router.callback_query(lambda c: c.data == "admin_logout")
async def admin_logout(callback: CallbackQuery, state: FSMContext):
    get_admin_auth().sign_out(callback.from_user.id)
    await state.clear()
    await callback.message.edit_text("👋 Signed out.")
    await callback.answer()


@admin_router.callback_query(lambda c: c.data == "admin_menu")
async def show_admin_menu(callback: CallbackQuery, state: FSMContext):
    if not await require_admin(callback):
        return
    await state.set_state(None)
    await callback.message.edit_text("🔐 Admin Panel", reply_markup=get_admin_menu_keyboard())
    await callback.answer()


# ========== Calendar & Day View ==========


async def build_admin_calendar(year: int, month: int) -> Tuple[str, InlineKeyboardMarkup]:
    """Unbounded month view: every day is selectable."""
    start, end = month_bounds(date(year, month, 1))
    db = get_db_client()
    try:
        snapshot = await db.get_availability_snapshot(start, end)
    except DatabaseError as e:
        logger.error(f"Failed to load admin calendar: {e}")
        snapshot = None

    view = present_month(snapshot, year, month)
    text = f"📅 Admin calendar\n\n{CALENDAR_LEGEND}"
    markup = get_calendar_keyboard(
        view, day_prefix="admin_day_", nav_prefix="admin_cal_", back_callback="admin_menu"
    )
    return text, markup


async def build_day_view(day: date) -> Tuple[str, InlineKeyboardMarkup]:
    db = get_db_client()
    bookings = await BookingAdmin(db).bookings_for_date(day)
    blocks = await AdminBlockManager(db).blocks_for_date(day)

    lines = [f"🗓 {format_long_date(day)}\n"]
    if bookings:
        lines.append("Bookings:")
        lines.extend(format_booking(booking) for booking in bookings)
    else:
        lines.append("No bookings.")

    if blocks:
        lines.append("\nBlocked:")
        for block in blocks:
            reason = f" ({block.reason})" if block.reason else ""
            lines.append(f"🚫 {block.slot_type.value}{reason}")

    return "\n".join(lines), get_admin_day_keyboard(day, bookings, blocks)


async def load_day_view(day: date) -> Tuple[str, InlineKeyboardMarkup]:
    """Day view, or an error screen with a way back when the store fails."""
    try:
        return await build_day_view(day)
    except DatabaseError as e:
        logger.error(f"Error loading day {day}: {e}", exc_info=True)
        return f"❌ Error loading {format_long_date(day)}", get_back_to_admin_keyboard()


async def refresh_day(callback: CallbackQuery, state: FSMContext) -> None:
    data = await state.get_data()
    day = parse_date_string(data["admin_day"]) if data.get("admin_day") else today()
    text, markup = await load_day_view(day)
    await callback.message.edit_text(text, reply_markup=markup)


@admin_router.callback_query(lambda c: c.data == "admin_calendar")
async def show_admin_calendar(callback: CallbackQuery):
    if not await require_admin(callback):
        return
    current = today()
    text, markup = await build_admin_calendar(current.year, current.month)
    await callback.message.edit_text(text, reply_markup=markup)
    await callback.answer()


@admin_router.callback_query(lambda c: c.data.startswith("admin_cal_"))
async def change_admin_month(callback: CallbackQuery):
    if not await require_admin(callback):
        return
    try:
        year, month = (int(part) for part in callback.data[len("admin_cal_"):].split("-"))
    except ValueError:
        await callback.answer("Invalid month", show_alert=True)
        return

    text, markup = await build_admin_calendar(year, month)
    await callback.message.edit_text(text, reply_markup=markup)
    await callback.answer()


@admin_router.callback_query(lambda c: c.data.startswith("admin_day_"))
async def show_admin_day(callback: CallbackQuery, state: FSMContext):
    if not await require_admin(callback):
        return
    try:
        day = parse_date_string(callback.data[len("admin_day_"):])
    except ValueError:
        await callback.answer("Invalid date", show_alert=True)
        return

    try:
        text, markup = await build_day_view(day)
    except DatabaseError as e:
        logger.error(f"Error loading day {day}: {e}", exc_info=True)
        await callback.answer("❌ Error loading bookings", show_alert=True)
        return

    await state.update_data(admin_day=to_date_string(day))
    await callback.message.edit_text(text, reply_markup=markup)
    await callback.answer()


# ========== Booking Status ==========


@admin_router.callback_query(lambda c: c.data.startswith("admin_cancel_"))
async def admin_cancel_booking(callback: CallbackQuery, state: FSMContext):
    if not await require_admin(callback):
        return
    booking_id = callback.data[len("admin_cancel_"):]

    try:
        await BookingAdmin(get_db_client()).cancel(booking_id)
    except (BookingNotFoundError, InvalidStatusTransitionError) as e:
        await callback.answer(f"❌ {e}", show_alert=True)
        await refresh_day(callback, state)
        return
    except DatabaseError as e:
        logger.error(f"Error canceling booking {booking_id}: {e}", exc_info=True)
        await callback.answer("❌ Could not cancel the booking", show_alert=True)
        return

    await callback.answer("Booking canceled")
    await refresh_day(callback, state)


@admin_router.callback_query(lambda c: c.data.startswith("admin_restore_"))
async def admin_restore_booking(callback: CallbackQuery, state: FSMContext):
    if not await require_admin(callback):
        return
    booking_id = callback.data[len("admin_restore_"):]

    try:
        await BookingAdmin(get_db_client()).restore(booking_id)
    except SlotConflictError:
        await callback.answer(
            "❌ That slot has been booked since. Cancel the other booking first.",
            show_alert=True,
        )
        return
    except (BookingNotFoundError, InvalidStatusTransitionError) as e:
        await callback.answer(f"❌ {e}", show_alert=True)
        await refresh_day(callback, state)
        return
    except DatabaseError as e:
        logger.error(f"Error restoring booking {booking_id}: {e}", exc_info=True)
        await callback.answer("❌ Could not restore the booking", show_alert=True)
        return

    await callback.answer("Booking restored")
    await refresh_day(callback, state)


@admin_router.callback_query(lambda c: c.data.startswith("admin_delete_"))
async def admin_delete_booking(callback: CallbackQuery, state: FSMContext):
    if not await require_admin(callback):
        return
    booking_id = callback.data[len("admin_delete_"):]

    try:
        deleted = await BookingAdmin(get_db_client()).delete_booking(booking_id)
    except DatabaseError as e:
        logger.error(f"Error deleting booking {booking_id}: {e}", exc_info=True)
        await callback.answer("❌ Could not delete the booking", show_alert=True)
        return

    await callback.answer("Booking deleted" if deleted else "Booking was already removed")
    await refresh_day(callback, state)


# ========== Blocked Slots ==========


@admin_router.callback_query(lambda c: c.data.startswith("admin_block_"))
async def admin_start_block(callback: CallbackQuery, state: FSMContext):
    if not await require_admin(callback):
        return
    try:
        day_str, slot_str = callback.data[len("admin_block_"):].rsplit("_", 1)
        day = parse_date_string(day_str)
        slot = SlotType(slot_str)
    except ValueError:
        await callback.answer("Invalid block", show_alert=True)
        return

    await state.update_data(
        admin_day=to_date_string(day), block_date=to_date_string(day), block_slot=slot.value
    )
    await state.set_state(AdminStates.entering_block_reason)
    await callback.message.edit_text(
        f"🚫 Block {slot.value} on {format_long_date(day)}\n\n"
        "Type a reason (e.g. maintenance) or tap No reason:",
        reply_markup=get_skip_reason_keyboard(),
    )
    await callback.answer()


async def create_pending_block(state: FSMContext, reason: Optional[str]) -> date:
    """
    Create the block chosen in ``admin_start_block`` and leave the reason step.

    Raises:
        DatabaseError: If the block could not be stored; the state is kept
    """
    data = await state.get_data()
    day = parse_date_string(data["block_date"])
    await AdminBlockManager(get_db_client()).create_block(
        day, SlotType(data["block_slot"]), reason
    )
    await state.set_state(None)
    return day


@admin_router.message(StateFilter(AdminStates.entering_block_reason))
async def handle_block_reason(message: Message, state: FSMContext):
    if not is_admin_user(message.from_user.id):
        await state.clear()
        await message.answer("🔐 Please sign in with /admin first.")
        return

    reason = message.text or ""
    if not validate_block_reason(reason):
        await message.answer(
            f"❌ Reason must be {MAX_BLOCK_REASON_LENGTH} characters or fewer.\n\n"
            "Type a shorter reason or tap No reason:",
            reply_markup=get_skip_reason_keyboard(),
        )
        return

    try:
        day = await create_pending_block(state, reason)
    except DatabaseError as e:
        logger.error(f"Error creating block: {e}", exc_info=True)
        await message.answer(
            "❌ Could not block the slot. Try again or tap No reason:",
            reply_markup=get_skip_reason_keyboard(),
        )
        return

    text, markup = await load_day_view(day)
    await message.answer(f"✅ Slot blocked.\n\n{text}", reply_markup=markup)


@admin_router.callback_query(
    lambda c: c.data == "admin_noreason", StateFilter(AdminStates.entering_block_reason)
)
async def admin_block_without_reason(callback: CallbackQuery, state: FSMContext):
    if not await require_admin(callback):
        return

    try:
        day = await create_pending_block(state, None)
    except DatabaseError as e:
        logger.error(f"Error creating block: {e}", exc_info=True)
        await callback.answer("❌ Could not block the slot", show_alert=True)
        return

    text, markup = await load_day_view(day)
    await callback.message.edit_text(f"✅ Slot blocked.\n\n{text}", reply_markup=markup)
    await callback.answer()


@admin_router.callback_query(lambda c: c.data.startswith("admin_unblock_"))
async def admin_unblock(callback: CallbackQuery, state: FSMContext):
    if not await require_admin(callback):
        return
    block_id = callback.data[len("admin_unblock_"):]

    try:
        deleted = await AdminBlockManager(get_db_client()).delete_block(block_id)
    except DatabaseError as e:
        logger.error(f"Error removing block {block_id}: {e}", exc_info=True)
        await callback.answer("❌ Could not remove the block", show_alert=True)
        return

    await callback.answer("Block removed" if deleted else "Block was already removed")
    await refresh_day(callback, state)


# ========== Upcoming & Export ==========


def format_upcoming(bookings: List[Booking]) -> str:
    if not bookings:
        return f"🗓 No charters in the next {UPCOMING_DAYS} days."

    lines = [f"🗓 Next {UPCOMING_DAYS} days\n"]
    for booking in bookings[:BOOKINGS_DISPLAY_LIMIT]:
        trip = get_trip(booking.slot_type)
        lines.append(
            f"• {format_long_date(booking.date)} · {trip.label}\n"
            f"   {booking.name} · party of {booking.party_size} · 📞 {booking.phone}"
        )
    if len(bookings) > BOOKINGS_DISPLAY_LIMIT:
        lines.append(f"\n... and {len(bookings) - BOOKINGS_DISPLAY_LIMIT} more (see CSV export)")
    return "\n".join(lines)


@admin_router.callback_query(lambda c: c.data == "admin_upcoming")
async def show_upcoming(callback: CallbackQuery):
    if not await require_admin(callback):
        return

    try:
        bookings = await BookingAdmin(get_db_client()).upcoming(today())
    except DatabaseError as e:
        logger.error(f"Error fetching upcoming bookings: {e}", exc_info=True)
        await callback.answer("❌ Error loading bookings", show_alert=True)
        return

    await callback.message.edit_text(
        format_upcoming(bookings), reply_markup=get_back_to_admin_keyboard()
    )
    await callback.answer()


@admin_router.callback_query(lambda c: c.data == "admin_export")
async def export_bookings(callback: CallbackQuery):
    if not await require_admin(callback):
        return

    try:
        bookings = await BookingAdmin(get_db_client()).all_bookings()
    except DatabaseError as e:
        logger.error(f"Error exporting bookings: {e}", exc_info=True)
        await callback.answer("❌ Export failed", show_alert=True)
        return

    document = BufferedInputFile(
        bookings_to_csv(bookings).encode("utf-8"), filename=export_filename(today())
    )
    await callback.message.answer_document(document, caption=f"📤 {len(bookings)} bookings")
    await callback.answer()


def register_admin_handlers(dp) -> None:
    """Register admin handlers with dispatcher."""
    dp.include_router(admin_router)
