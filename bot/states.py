"""
FSM (Finite State Machine) states for bot conversation flow.
"""

from aiogram.fsm.state import State, StatesGroup


class BookingStates(StatesGroup):
    """States for booking flow."""

    selecting_date = State()
    selecting_slot = State()
    entering_name = State()
    entering_phone = State()
    entering_email = State()
    selecting_party_size = State()
    entering_notes = State()
    confirming_booking = State()


class AdminStates(StatesGroup):
    """States for admin sign-in and block creation."""

    entering_email = State()
    entering_password = State()
    entering_block_reason = State()
