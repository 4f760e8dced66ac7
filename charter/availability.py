"""
Slot availability for a single calendar day.

A day offers three slot types: AM, PM and FULL. What remains bookable is
derived from the confirmed bookings and all admin blocks on that day:

* any FULL entry closes the whole day;
* an AM or PM entry closes that half and FULL with it;
* AM and PM are otherwise independent.

Canceled bookings never take part. Everything here is pure: no I/O, no
clock, and the result does not depend on the order of the inputs.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from itertools import chain
from typing import Any, Iterable, NamedTuple, Optional

from models.booking import BookingStatus, SlotType
from utils.datetime_utils import parse_date_string


class SlotEntry(NamedTuple):
    """Minimal view of a booking or block row: which slot, which day."""

    date: date
    slot_type: SlotType
    status: Optional[BookingStatus] = None


@dataclass(frozen=True)
class SlotAvailability:
    """Which slot types can still be booked on one day."""

    am: bool = True
    pm: bool = True
    full: bool = True

    def __getitem__(self, slot_type) -> bool:
        slot = SlotType(slot_type)
        if slot == SlotType.AM:
            return self.am
        if slot == SlotType.PM:
            return self.pm
        return self.full

    def is_available(self, slot_type) -> bool:
        return self[slot_type]

    @property
    def fully_booked(self) -> bool:
        return not (self.am or self.pm or self.full)

    def to_dict(self) -> dict[str, bool]:
        return {
            SlotType.AM.value: self.am,
            SlotType.PM.value: self.pm,
            SlotType.FULL.value: self.full,
        }


ALL_OPEN = SlotAvailability(am=True, pm=True, full=True)
ALL_CLOSED = SlotAvailability(am=False, pm=False, full=False)


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def slot_of(entry: Any) -> SlotType:
    return SlotType(_field(entry, "slot_type"))


def day_of(entry: Any) -> date:
    return parse_date_string(_field(entry, "date"))


def resolve(
    bookings_for_date: Iterable[Any], blocks_for_date: Iterable[Any]
) -> SlotAvailability:
    """
    Availability of one day.

    Both inputs must already be limited to the day in question, and
    bookings to confirmed ones. Entries are anything carrying a
    ``slot_type`` (models, ``SlotEntry`` or raw row dicts).
    """
    taken = {slot_of(entry) for entry in chain(bookings_for_date, blocks_for_date)}

    if SlotType.FULL in taken:
        return ALL_CLOSED

    am_taken = SlotType.AM in taken
    pm_taken = SlotType.PM in taken
    return SlotAvailability(
        am=not am_taken,
        pm=not pm_taken,
        full=not am_taken and not pm_taken,
    )


def entries_for_date(entries: Iterable[Any], day: date) -> list:
    """Entries whose calendar day is exactly ``day``."""
    return [entry for entry in entries if day_of(entry) == day]


def confirmed_only(bookings: Iterable[Any]) -> list:
    """Drop canceled bookings; entries without a status count as confirmed."""
    result = []
    for booking in bookings:
        status = _field(booking, "status")
        if status is None or BookingStatus(status) == BookingStatus.CONFIRMED:
            result.append(booking)
    return result


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """Bookings and blocks as last fetched, used to gate customer choices."""

    bookings: tuple = ()
    blocks: tuple = ()
    fetched_at: Optional[datetime] = field(default=None, compare=False)

    def for_date(self, day: date) -> SlotAvailability:
        return resolve_for_date(self, day)

    def is_available(self, day: date, slot_type) -> bool:
        return self.for_date(day)[slot_type]


def resolve_for_date(
    snapshot: Optional[AvailabilitySnapshot], day: date
) -> SlotAvailability:
    """
    Availability of ``day`` according to ``snapshot``.

    With no snapshot nothing is known to be taken, so every slot is open;
    the store still rejects conflicting writes.
    """
    if snapshot is None:
        return ALL_OPEN
    bookings = entries_for_date(confirmed_only(snapshot.bookings), day)
    blocks = entries_for_date(snapshot.blocks, day)
    return resolve(bookings, blocks)
