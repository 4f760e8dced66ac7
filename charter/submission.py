"""
Booking submission: validate, persist, notify.

The availability snapshot only gates what the customer may pick. Whether
the slot is really free is decided by the database when the row is
inserted, so two customers racing for the same slot end with one booking
and one ``SlotUnavailableError``.
"""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from charter.availability import AvailabilitySnapshot, resolve_for_date
from charter.selection import Selection
from models.booking import Booking, BookingCreate, BookingStatus, ContactDetails
from utils.exceptions import (
    BookingValidationError,
    DatabaseError,
    SlotConflictError,
    SlotUnavailableError,
)

logger = logging.getLogger(__name__)

FIELD_MESSAGES = {
    "name": "Name is required",
    "phone": "Valid phone number required",
    "email": "Valid email required",
    "party_size": "Party size must be between 1 and 6",
    "notes": "Notes must be 500 characters or fewer",
}


def validate_contact(data: Union[ContactDetails, Mapping[str, Any]]) -> ContactDetails:
    """
    Validate contact details collected from the customer.

    Raises:
        BookingValidationError: With one message per failing field
    """
    if isinstance(data, ContactDetails):
        return data

    try:
        return ContactDetails(**dict(data))
    except ValidationError as e:
        errors = {}
        for error in e.errors():
            field = str(error["loc"][0]) if error.get("loc") else "__root__"
            errors.setdefault(field, FIELD_MESSAGES.get(field, error["msg"]))
        raise BookingValidationError(errors) from e


class BookingSubmission:
    """Turns a complete selection plus contact details into a confirmed booking."""

    def __init__(self, db, dispatcher=None):
        self.db = db
        self.dispatcher = dispatcher

    async def submit(
        self,
        selection: Selection,
        contact: Union[ContactDetails, Mapping[str, Any]],
        snapshot: Optional[AvailabilitySnapshot] = None,
    ) -> Booking:
        """
        Submit a booking.

        Raises:
            SlotUnavailableError: Selection incomplete, slot already taken
                in ``snapshot``, or rejected by the store
            BookingValidationError: Contact details invalid (nothing is sent)
        """
        if not selection.is_complete:
            raise SlotUnavailableError("Please select a date and a trip first.")

        if not resolve_for_date(snapshot, selection.date)[selection.slot]:
            raise SlotUnavailableError()

        details = validate_contact(contact)

        booking_data = BookingCreate(
            **details.model_dump(),
            date=selection.date,
            slot_type=selection.slot,
            status=BookingStatus.CONFIRMED,
        )

        try:
            booking = await self.db.create_booking(booking_data)
        except SlotConflictError as e:
            logger.info(f"Slot conflict on submit: {e}")
            raise SlotUnavailableError() from e
        except DatabaseError as e:
            logger.error(f"Booking insert failed: {e}")
            raise SlotUnavailableError() from e

        if self.dispatcher is not None:
            try:
                self.dispatcher.dispatch(booking)
            except Exception as e:
                logger.error(f"Failed to schedule notifications for {booking.id}: {e}")

        return booking
