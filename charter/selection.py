"""
Customer selection (date and slot) as an immutable value with a reducer.

The bot keeps the selection in FSM storage between updates; every change
goes through ``reduce`` so the rules live in one place:

* picking a date clears any previously picked slot;
* a slot can only be picked once a date is picked, and only if the latest
  availability snapshot shows it open;
* reset returns the empty selection.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Union

from charter.availability import AvailabilitySnapshot, resolve_for_date
from models.booking import SlotType
from utils.datetime_utils import parse_date_string, to_date_string


@dataclass(frozen=True)
class Selection:
    date: Optional[date] = None
    slot: Optional[SlotType] = None

    @property
    def is_complete(self) -> bool:
        return self.date is not None and self.slot is not None

    def to_state(self) -> dict:
        """Plain dict for FSM storage."""
        return {
            "selected_date": to_date_string(self.date) if self.date else None,
            "selected_slot": self.slot.value if self.slot else None,
        }

    @classmethod
    def from_state(cls, data: dict) -> "Selection":
        raw_date = data.get("selected_date")
        raw_slot = data.get("selected_slot")
        return cls(
            date=parse_date_string(raw_date) if raw_date else None,
            slot=SlotType(raw_slot) if raw_slot else None,
        )


@dataclass(frozen=True)
class SelectDate:
    day: date


@dataclass(frozen=True)
class SelectSlot:
    slot: SlotType


@dataclass(frozen=True)
class ResetSelection:
    pass


SelectionAction = Union[SelectDate, SelectSlot, ResetSelection]

EMPTY_SELECTION = Selection()


def reduce(
    selection: Selection,
    action: SelectionAction,
    snapshot: Optional[AvailabilitySnapshot] = None,
) -> Selection:
    """Apply ``action``; an action that is not allowed leaves the selection unchanged."""
    if isinstance(action, ResetSelection):
        return EMPTY_SELECTION

    if isinstance(action, SelectDate):
        return Selection(date=action.day, slot=None)

    if isinstance(action, SelectSlot):
        if selection.date is None:
            return selection
        slot = SlotType(action.slot)
        if snapshot is not None and not resolve_for_date(snapshot, selection.date)[slot]:
            return selection
        return replace(selection, slot=slot)

    raise TypeError(f"Unknown selection action: {action!r}")
