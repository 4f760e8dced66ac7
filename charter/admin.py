"""
Admin operations on blocked slots and bookings.

Blocks are manual overrides: creating one does not check existing
bookings. Bookings toggle between confirmed and canceled and can be
deleted from either state.
"""

import logging
from datetime import date, timedelta
from enum import Enum
from typing import List, Optional

from models.blocked_slot import BlockedSlot, BlockedSlotCreate
from models.booking import Booking, BookingStatus, SlotType
from utils.constants import UPCOMING_DAYS
from utils.exceptions import BookingNotFoundError, InvalidStatusTransitionError

logger = logging.getLogger(__name__)


class StatusAction(str, Enum):
    CANCEL = "cancel"
    RESTORE = "restore"


_TRANSITIONS = {
    (BookingStatus.CONFIRMED, StatusAction.CANCEL): BookingStatus.CANCELED,
    (BookingStatus.CANCELED, StatusAction.RESTORE): BookingStatus.CONFIRMED,
}


def transition(current: BookingStatus, action: StatusAction) -> BookingStatus:
    """
    Next booking status.

    Raises:
        InvalidStatusTransitionError: Canceling a canceled booking or
            restoring a confirmed one
    """
    key = (BookingStatus(current), StatusAction(action))
    if key not in _TRANSITIONS:
        raise InvalidStatusTransitionError(
            f"Cannot {key[1].value} a booking that is {key[0].value}"
        )
    return _TRANSITIONS[key]


class AdminBlockManager:
    """Create and remove blocked slots."""

    def __init__(self, db):
        self.db = db

    async def create_block(
        self, day: date, slot_type: SlotType, reason: Optional[str] = None
    ) -> BlockedSlot:
        block = await self.db.create_blocked_slot(
            BlockedSlotCreate(date=day, slot_type=slot_type, reason=reason)
        )
        logger.info(f"Blocked {block.slot_type.value} on {block.date}")
        return block

    async def delete_block(self, block_id: str) -> bool:
        """Remove a block. Unknown IDs return False."""
        deleted = await self.db.delete_blocked_slot(block_id)
        if deleted:
            logger.info(f"Removed block {block_id}")
        return deleted

    async def blocks_for_date(self, day: date) -> List[BlockedSlot]:
        return await self.db.get_blocked_slots(start_date=day, end_date=day)

    async def list_blocks(self, from_date: Optional[date] = None) -> List[BlockedSlot]:
        return await self.db.get_blocked_slots(start_date=from_date)


class BookingAdmin:
    """Status changes, deletion and listings for the admin panel."""

    def __init__(self, db):
        self.db = db

    async def _change_status(self, booking_id: str, action: StatusAction) -> Booking:
        booking = await self.db.get_booking_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")

        new_status = transition(booking.status, action)
        updated = await self.db.update_booking_status(booking_id, new_status)
        if updated is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")

        logger.info(f"Booking {booking_id}: {booking.status.value} -> {new_status.value}")
        return updated

    async def cancel(self, booking_id: str) -> Booking:
        return await self._change_status(booking_id, StatusAction.CANCEL)

    async def restore(self, booking_id: str) -> Booking:
        """
        Restore a canceled booking.

        Raises ``SlotConflictError`` if the slot has been taken since.
        """
        return await self._change_status(booking_id, StatusAction.RESTORE)

    async def delete_booking(self, booking_id: str) -> bool:
        deleted = await self.db.delete_booking(booking_id)
        if deleted:
            logger.info(f"Deleted booking {booking_id}")
        return deleted

    async def bookings_for_date(self, day: date) -> List[Booking]:
        return await self.db.get_bookings_for_date(day)

    async def all_bookings(self) -> List[Booking]:
        return await self.db.get_all_bookings()

    async def upcoming(self, today: date, days: int = UPCOMING_DAYS) -> List[Booking]:
        """Confirmed charters from ``today`` through ``today + days``."""
        return await self.db.get_all_bookings(
            status=BookingStatus.CONFIRMED,
            start_date=today,
            end_date=today + timedelta(days=days),
        )
