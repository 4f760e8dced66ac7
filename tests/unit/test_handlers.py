"""
Unit tests for customer bot handlers.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiogram.types import User

from bot import handlers
from bot.states import BookingStates
from charter.availability import AvailabilitySnapshot, SlotEntry
from charter.dates import today
from models.booking import SlotType
from utils.datetime_utils import to_date_string
from utils.exceptions import SlotConflictError

USER = User(id=123456789, is_bot=False, first_name="Test")


@pytest.fixture
def mock_callback():
    """Create mock callback query."""
    callback = MagicMock()
    callback.from_user = USER
    callback.message = MagicMock()
    callback.message.edit_text = AsyncMock()
    callback.message.edit_reply_markup = AsyncMock()
    callback.message.answer = AsyncMock()
    callback.answer = AsyncMock()
    return callback


@pytest.fixture
def mock_message():
    """Create mock message."""
    message = MagicMock()
    message.from_user = USER
    message.answer = AsyncMock()
    return message


@pytest.fixture
def mock_db(sample_booking):
    db = MagicMock()
    db.get_availability_snapshot = AsyncMock(return_value=AvailabilitySnapshot())
    db.create_booking = AsyncMock(return_value=sample_booking)
    return db


@pytest.fixture
def patched_db(mock_db):
    with patch("bot.handlers.get_db_client", return_value=mock_db):
        yield mock_db


async def fill_contact(state, day, slot="AM"):
    await state.update_data(
        selected_date=to_date_string(day),
        selected_slot=slot,
        name="Jane Doe",
        phone="555-123-4567",
        email="jane@example.com",
        party_size=3,
        notes=None,
    )
    await state.set_state(BookingStates.confirming_booking)


@pytest.mark.asyncio
async def test_cmd_start(mock_message, fsm_state):
    await fsm_state.set_state(BookingStates.entering_name)

    await handlers.cmd_start(mock_message, fsm_state)

    assert await fsm_state.get_state() is None
    text = mock_message.answer.await_args.args[0]
    assert "Welcome to" in text


@pytest.mark.asyncio
async def test_start_booking_shows_calendar(mock_callback, fsm_state, patched_db):
    mock_callback.data = "book_charter"

    await handlers.start_booking(mock_callback, fsm_state)

    assert await fsm_state.get_state() == BookingStates.selecting_date.state
    text = mock_callback.message.edit_text.await_args.args[0]
    assert "Pick a date" in text
    patched_db.get_availability_snapshot.assert_awaited_once()


@pytest.mark.asyncio
async def test_calendar_survives_store_outage(mock_callback, fsm_state, patched_db):
    from utils.exceptions import DatabaseError

    patched_db.get_availability_snapshot.side_effect = DatabaseError("down")
    mock_callback.data = "book_charter"

    await handlers.start_booking(mock_callback, fsm_state)

    mock_callback.message.edit_text.assert_awaited_once()


@pytest.mark.asyncio
async def test_select_date(mock_callback, fsm_state, patched_db):
    day = today()
    await fsm_state.update_data(selected_date="2000-01-01", selected_slot="PM")
    mock_callback.data = f"day_{to_date_string(day)}"

    await handlers.select_date(mock_callback, fsm_state)

    data = await fsm_state.get_data()
    assert data["selected_date"] == to_date_string(day)
    assert data["selected_slot"] is None
    assert await fsm_state.get_state() == BookingStates.selecting_slot.state


@pytest.mark.asyncio
async def test_select_past_date_rejected(mock_callback, fsm_state, patched_db):
    mock_callback.data = "day_2000-01-01"

    await handlers.select_date(mock_callback, fsm_state)

    mock_callback.answer.assert_awaited_once()
    assert mock_callback.answer.await_args.kwargs.get("show_alert") is True
    assert await fsm_state.get_data() == {}


@pytest.mark.asyncio
async def test_select_taken_slot_rejected(mock_callback, fsm_state, patched_db):
    day = today()
    patched_db.get_availability_snapshot.return_value = AvailabilitySnapshot(
        bookings=(SlotEntry(day, SlotType.AM),)
    )
    await fsm_state.update_data(selected_date=to_date_string(day), selected_slot=None)
    mock_callback.data = "slot_FULL"

    await handlers.select_slot(mock_callback, fsm_state)

    assert (await fsm_state.get_data())["selected_slot"] is None
    assert "may no longer be available" in mock_callback.answer.await_args.args[0]
    mock_callback.message.edit_reply_markup.assert_awaited_once()


@pytest.mark.asyncio
async def test_select_open_slot_starts_form(mock_callback, fsm_state, patched_db):
    day = today()
    await fsm_state.update_data(selected_date=to_date_string(day), selected_slot=None)
    mock_callback.data = "slot_PM"

    await handlers.select_slot(mock_callback, fsm_state)

    assert (await fsm_state.get_data())["selected_slot"] == "PM"
    assert await fsm_state.get_state() == BookingStates.entering_name.state


@pytest.mark.asyncio
async def test_invalid_name_keeps_state(mock_message, fsm_state):
    await fsm_state.set_state(BookingStates.entering_name)
    mock_message.text = "J"

    await handlers.handle_name(mock_message, fsm_state)

    assert await fsm_state.get_state() == BookingStates.entering_name.state
    assert "Name is required" in mock_message.answer.await_args.args[0]


@pytest.mark.asyncio
async def test_contact_steps(mock_message, mock_callback, fsm_state):
    await fsm_state.set_state(BookingStates.entering_name)

    mock_message.text = "Jane Doe"
    await handlers.handle_name(mock_message, fsm_state)
    mock_message.text = "555-123-4567"
    await handlers.handle_phone(mock_message, fsm_state)
    mock_message.text = "jane@example.com"
    await handlers.handle_email(mock_message, fsm_state)
    assert await fsm_state.get_state() == BookingStates.selecting_party_size.state

    mock_callback.data = "party_6"
    await handlers.select_party_size(mock_callback, fsm_state)
    assert await fsm_state.get_state() == BookingStates.entering_notes.state

    data = await fsm_state.get_data()
    assert data["name"] == "Jane Doe"
    assert data["phone"] == "555-123-4567"
    assert data["email"] == "jane@example.com"
    assert data["party_size"] == 6


@pytest.mark.asyncio
async def test_invalid_phone_and_email(mock_message, fsm_state):
    await fsm_state.set_state(BookingStates.entering_phone)
    mock_message.text = "12345"
    await handlers.handle_phone(mock_message, fsm_state)
    assert await fsm_state.get_state() == BookingStates.entering_phone.state

    await fsm_state.set_state(BookingStates.entering_email)
    mock_message.text = "jane@"
    await handlers.handle_email(mock_message, fsm_state)
    assert await fsm_state.get_state() == BookingStates.entering_email.state


@pytest.mark.asyncio
async def test_skip_notes_shows_summary(mock_callback, fsm_state):
    await fill_contact(fsm_state, today())
    await fsm_state.set_state(BookingStates.entering_notes)
    mock_callback.data = "skip_notes"

    await handlers.skip_notes(mock_callback, fsm_state)

    assert await fsm_state.get_state() == BookingStates.confirming_booking.state
    summary = mock_callback.message.edit_text.await_args.args[0]
    assert "Booking Summary" in summary
    assert "Half-Day Morning" in summary


@pytest.mark.asyncio
async def test_confirm_booking_success(mock_callback, fsm_state, patched_db, sample_booking):
    await fill_contact(fsm_state, today())
    dispatcher = MagicMock()
    mock_callback.data = "confirm_booking"

    with patch("bot.handlers.get_dispatcher", return_value=dispatcher):
        await handlers.confirm_booking(mock_callback, fsm_state)

    patched_db.create_booking.assert_awaited_once()
    dispatcher.dispatch.assert_called_once_with(sample_booking)
    assert await fsm_state.get_state() is None
    assert "Booking Confirmed" in mock_callback.message.edit_text.await_args.args[0]


@pytest.mark.asyncio
async def test_confirm_booking_conflict_resets_selection(mock_callback, fsm_state, patched_db):
    await fill_contact(fsm_state, today())
    patched_db.create_booking.side_effect = SlotConflictError("taken")
    dispatcher = MagicMock()
    mock_callback.data = "confirm_booking"

    with patch("bot.handlers.get_dispatcher", return_value=dispatcher):
        await handlers.confirm_booking(mock_callback, fsm_state)

    dispatcher.dispatch.assert_not_called()
    assert await fsm_state.get_state() == BookingStates.selecting_date.state
    assert (await fsm_state.get_data()).get("selected_slot") is None
    assert "may no longer be available" in mock_callback.message.edit_text.await_args.args[0]


@pytest.mark.asyncio
async def test_confirm_booking_invalid_party_size(mock_callback, fsm_state, patched_db):
    await fill_contact(fsm_state, today())
    await fsm_state.update_data(party_size=7)
    mock_callback.data = "confirm_booking"

    with patch("bot.handlers.get_dispatcher", return_value=MagicMock()):
        await handlers.confirm_booking(mock_callback, fsm_state)

    patched_db.create_booking.assert_not_awaited()
    assert "Party size" in mock_callback.message.edit_text.await_args.args[0]
    assert await fsm_state.get_state() == BookingStates.entering_name.state


@pytest.mark.asyncio
async def test_cancel_booking_clears_state(mock_callback, fsm_state):
    await fill_contact(fsm_state, today())
    mock_callback.data = "cancel_booking"

    await handlers.cancel_booking(mock_callback, fsm_state)

    assert await fsm_state.get_state() is None
    assert await fsm_state.get_data() == {}


@pytest.mark.asyncio
async def test_show_info(mock_callback):
    mock_callback.data = "info"

    await handlers.show_info(mock_callback)

    text = mock_callback.message.edit_text.await_args.args[0]
    assert "Full Day" in text
    assert "Cancellation policy" in text
