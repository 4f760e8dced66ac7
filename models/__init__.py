"""Pydantic models for data validation and serialization."""

from .blocked_slot import BlockedSlot, BlockedSlotCreate
from .booking import Booking, BookingCreate, BookingStatus, ContactDetails, SlotType
from .trip import Trip, get_all_trips, get_trip

__all__ = [
    "BlockedSlot",
    "BlockedSlotCreate",
    "Booking",
    "BookingCreate",
    "BookingStatus",
    "ContactDetails",
    "SlotType",
    "Trip",
    "get_all_trips",
    "get_trip",
]
