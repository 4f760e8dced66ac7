"""
Pytest configuration and shared fixtures.
"""

import os
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("BOT_TOKEN", "test_token")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test_key")
os.environ.setdefault("ENVIRONMENT", "test")

from aiogram.fsm.context import FSMContext  # noqa: E402
from aiogram.fsm.storage.base import StorageKey  # noqa: E402
from aiogram.fsm.storage.memory import MemoryStorage  # noqa: E402

from models.booking import Booking, BookingStatus, SlotType  # noqa: E402


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = MagicMock()
    mock_table = MagicMock()
    mock_client.table.return_value = mock_table
    return mock_client, mock_table


@pytest.fixture
def booking_row():
    """Raw bookings row as returned by PostgREST."""
    return {
        "id": "3f2a9c1e-5b7d-4e8f-9a0b-1c2d3e4f5a6b",
        "date": "2025-07-10",
        "slot_type": "AM",
        "name": "John Smith",
        "phone": "(555) 123-4567",
        "email": "john@example.com",
        "party_size": 4,
        "notes": None,
        "status": "confirmed",
        "created_at": "2025-06-01T14:30:00+00:00",
    }


@pytest.fixture
def sample_booking():
    return Booking(
        id="3f2a9c1e-5b7d-4e8f-9a0b-1c2d3e4f5a6b",
        date=date(2025, 7, 10),
        slot_type=SlotType.AM,
        name="John Smith",
        phone="(555) 123-4567",
        email="john@example.com",
        party_size=4,
        status=BookingStatus.CONFIRMED,
        created_at=datetime(2025, 6, 1, 14, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def fsm_state():
    """Real FSM context backed by in-memory storage."""
    return FSMContext(
        storage=MemoryStorage(),
        key=StorageKey(bot_id=1, chat_id=123456789, user_id=123456789),
    )
