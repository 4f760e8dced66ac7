"""
Supabase database client with CRUD operations.
Handles all database interactions for bookings and blocked slots.

Row Level Security (RLS) Notes:
==============================
Policies live in ``db/schema.sql``:
1. Anyone may insert a booking and read the ``date, slot_type, status``
   columns needed for availability.
2. Blocked slots are readable by everyone, writable by authenticated admins.
3. Everything else (full booking rows, status changes, deletes) requires an
   authenticated admin or the service_role key.

Conflicting confirmed bookings are rejected by the database itself
(trigger ``bookings_prevent_overlap`` and a partial unique index); this
client turns those rejections into ``SlotConflictError``.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from postgrest.exceptions import APIError
from supabase import Client as SupabaseClientType
from supabase import create_client

from charter.availability import AvailabilitySnapshot, SlotEntry
from charter.dates import local_day, storage_day
from config import settings
from models.blocked_slot import BlockedSlot, BlockedSlotCreate
from models.booking import Booking, BookingCreate, BookingStatus, SlotType
from utils.datetime_utils import parse_iso_datetime, utc_now
from utils.exceptions import DatabaseError, SlotConflictError

logger = logging.getLogger(__name__)

# SQLSTATE codes raised for overlapping confirmed bookings
CONFLICT_CODES = frozenset({"23505", "23P01"})

AVAILABILITY_CACHE_PREFIX = "availability:"


def is_conflict_error(error: APIError) -> bool:
    return str(getattr(error, "code", "")) in CONFLICT_CODES


class SupabaseClient:
    """
    Supabase database client wrapper.

    Uses service_role key which bypasses RLS for admin operations.

    Availability snapshots are cached in memory for
    ``settings.availability_cache_seconds``; every mutation clears them so
    the next read reflects it.
    """

    def __init__(self):
        self.client: SupabaseClientType = create_client(
            settings.supabase_url, settings.supabase_key
        )

        # Format: {cache_key: (data, expiry_time)}
        self._cache: Dict[str, Tuple[Any, datetime]] = {}
        self._cache_ttl = timedelta(seconds=settings.availability_cache_seconds)

    # ========== Cache Helpers ==========

    def _get_from_cache(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired."""
        if key not in self._cache:
            return None

        data, expiry = self._cache[key]
        if utc_now() > expiry:
            del self._cache[key]
            return None

        return data

    def _set_cache(self, key: str, value: Any) -> None:
        """Set value in cache with TTL."""
        expiry = utc_now() + self._cache_ttl
        self._cache[key] = (value, expiry)

    def _clear_cache(self, pattern: Optional[str] = None) -> None:
        """Clear cache entries matching pattern, or all if pattern is None."""
        if pattern is None:
            self._cache.clear()
        else:
            keys_to_remove = [k for k in self._cache.keys() if pattern in k]
            for k in keys_to_remove:
                del self._cache[k]

    def invalidate_availability(self) -> None:
        """Drop cached availability snapshots after a local mutation."""
        self._clear_cache(AVAILABILITY_CACHE_PREFIX)

    # ========== Availability ==========

    async def get_availability_snapshot(
        self, start_date: date, end_date: date
    ) -> AvailabilitySnapshot:
        """
        Confirmed bookings and all blocks between two days (inclusive).

        A failing blocked-slots read degrades to "no blocks" so customers
        still see availability from bookings alone.
        """
        cache_key = f"{AVAILABILITY_CACHE_PREFIX}{start_date}:{end_date}"
        cached = self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        start_str = storage_day(start_date)
        end_str = storage_day(end_date)

        try:
            bookings_response = (
                self.client.table("bookings")
                .select("date, slot_type, status")
                .gte("date", start_str)
                .lte("date", end_str)
                .eq("status", BookingStatus.CONFIRMED.value)
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to load bookings for availability: {e}") from e

        blocked_rows: List[dict] = []
        try:
            blocked_response = (
                self.client.table("blocked_slots")
                .select("date, slot_type")
                .gte("date", start_str)
                .lte("date", end_str)
                .execute()
            )
            blocked_rows = blocked_response.data or []
        except Exception as e:
            logger.warning(f"blocked_slots unavailable, continuing without blocks: {e}")

        snapshot = AvailabilitySnapshot(
            bookings=tuple(self._parse_entry(row) for row in bookings_response.data or []),
            blocks=tuple(self._parse_entry(row) for row in blocked_rows),
            fetched_at=utc_now(),
        )
        self._set_cache(cache_key, snapshot)
        return snapshot

    # ========== Booking Operations ==========

    async def create_booking(self, booking_data: BookingCreate) -> Booking:
        """
        Create a new booking.

        Raises:
            SlotConflictError: If a confirmed booking already holds the slot
            DatabaseError: For any other failure
        """
        data = booking_data.to_record()
        data["date"] = storage_day(booking_data.date)

        try:
            response = self.client.table("bookings").insert(data).execute()
        except APIError as e:
            if is_conflict_error(e):
                raise SlotConflictError(
                    f"{booking_data.slot_type.value} on {booking_data.date} is already booked"
                ) from e
            raise DatabaseError(f"Failed to create booking: {e}") from e
        except Exception as e:
            raise DatabaseError(f"Failed to create booking: {e}") from e
        finally:
            self.invalidate_availability()

        if not response.data:
            raise DatabaseError("Failed to create booking: no data returned")

        booking = self._parse_booking(response.data[0])
        logger.info(
            f"Booking {booking.id} created for {booking.date} {booking.slot_type.value}"
        )
        return booking

    async def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        """Get booking by ID."""
        try:
            response = (
                self.client.table("bookings").select("*").eq("id", booking_id).execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to get booking: {e}") from e

        if response.data:
            return self._parse_booking(response.data[0])
        return None

    async def get_all_bookings(
        self,
        status: Optional[BookingStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Booking]:
        """
        Get bookings (admin operation), ordered by date then newest first.

        Args:
            status: Filter by booking status
            start_date: Only bookings on or after this day
            end_date: Only bookings on or before this day
        """
        try:
            query = self.client.table("bookings").select("*")

            if status:
                query = query.eq("status", BookingStatus(status).value)
            if start_date:
                query = query.gte("date", storage_day(start_date))
            if end_date:
                query = query.lte("date", storage_day(end_date))

            query = query.order("date", desc=False).order("created_at", desc=True)
            response = query.execute()
        except Exception as e:
            raise DatabaseError(f"Failed to get bookings: {e}") from e

        return [self._parse_booking(item) for item in response.data or []]

    async def get_bookings_for_date(self, day: date) -> List[Booking]:
        """All bookings (any status) on one calendar day."""
        return await self.get_all_bookings(start_date=day, end_date=day)

    async def update_booking_status(
        self, booking_id: str, status: BookingStatus
    ) -> Optional[Booking]:
        """
        Update booking status.

        Returns None when no booking has this ID.

        Raises:
            SlotConflictError: If restoring would overlap a confirmed booking
        """
        update_data = {"status": BookingStatus(status).value}

        try:
            response = (
                self.client.table("bookings")
                .update(update_data)
                .eq("id", booking_id)
                .execute()
            )
        except APIError as e:
            if is_conflict_error(e):
                raise SlotConflictError(
                    f"Booking {booking_id} overlaps a confirmed booking"
                ) from e
            raise DatabaseError(f"Failed to update booking status: {e}") from e
        except Exception as e:
            raise DatabaseError(f"Failed to update booking status: {e}") from e
        finally:
            self.invalidate_availability()

        if not response.data:
            return None

        return self._parse_booking(response.data[0])

    async def delete_booking(self, booking_id: str) -> bool:
        """
        Delete a booking (admin operation).

        Returns:
            True if a row was deleted, False if none matched
        """
        try:
            response = (
                self.client.table("bookings")
                .delete()
                .eq("id", booking_id)
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to delete booking: {e}") from e
        finally:
            self.invalidate_availability()

        return len(response.data or []) > 0

    # ========== Blocked Slot Operations ==========

    async def create_blocked_slot(self, block_data: BlockedSlotCreate) -> BlockedSlot:
        """Create a blocked slot (admin operation)."""
        data = block_data.to_record()
        data["date"] = storage_day(block_data.date)

        try:
            response = self.client.table("blocked_slots").insert(data).execute()
        except Exception as e:
            raise DatabaseError(f"Failed to create blocked slot: {e}") from e
        finally:
            self.invalidate_availability()

        if not response.data:
            raise DatabaseError("Failed to create blocked slot: no data returned")

        return self._parse_blocked_slot(response.data[0])

    async def get_blocked_slots(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[BlockedSlot]:
        """Get blocked slots ordered by date."""
        try:
            query = self.client.table("blocked_slots").select("*")

            if start_date:
                query = query.gte("date", storage_day(start_date))
            if end_date:
                query = query.lte("date", storage_day(end_date))

            response = query.order("date", desc=False).execute()
        except Exception as e:
            raise DatabaseError(f"Failed to get blocked slots: {e}") from e

        return [self._parse_blocked_slot(item) for item in response.data or []]

    async def delete_blocked_slot(self, block_id: str) -> bool:
        """
        Delete a blocked slot (admin operation).

        Returns:
            True if a row was deleted, False if none matched
        """
        try:
            response = (
                self.client.table("blocked_slots")
                .delete()
                .eq("id", block_id)
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to delete blocked slot: {e}") from e
        finally:
            self.invalidate_availability()

        return len(response.data or []) > 0

    # ========== Helper Methods ==========

    def _parse_entry(self, item: dict) -> SlotEntry:
        status = item.get("status")
        return SlotEntry(
            date=local_day(item["date"]),
            slot_type=SlotType(item["slot_type"]),
            status=BookingStatus(status) if status else None,
        )

    def _parse_booking(self, item: dict) -> Booking:
        """
        Parse booking data from database response.

        Args:
            item: Raw booking data from database

        Returns:
            Parsed Booking object
        """
        item = item.copy()
        item["date"] = local_day(item["date"])
        if item.get("created_at"):
            item["created_at"] = parse_iso_datetime(item["created_at"])
        return Booking(**item)

    def _parse_blocked_slot(self, item: dict) -> BlockedSlot:
        item = item.copy()
        item["date"] = local_day(item["date"])
        if item.get("created_at"):
            item["created_at"] = parse_iso_datetime(item["created_at"])
        return BlockedSlot(**item)


# Global database client instance
_db_client: Optional[SupabaseClient] = None


def get_db_client() -> SupabaseClient:
    """Get or create database client instance."""
    global _db_client
    if _db_client is None:
        _db_client = SupabaseClient()
    return _db_client
