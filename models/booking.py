"""Booking models for charter trips."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from utils.constants import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_PARTY_SIZE,
    MAX_PHONE_LENGTH,
    MIN_NAME_LENGTH,
    MIN_PARTY_SIZE,
    MIN_PHONE_LENGTH,
)
from utils.validation import sanitize_text, validate_email


class SlotType(str, Enum):
    """Bookable unit of time on a given day."""

    AM = "AM"
    PM = "PM"
    FULL = "FULL"


class BookingStatus(str, Enum):
    """Booking status."""

    CONFIRMED = "confirmed"
    CANCELED = "canceled"


class ContactDetails(BaseModel):
    """Customer contact details collected by the booking form."""

    name: str = Field(..., min_length=MIN_NAME_LENGTH, max_length=MAX_NAME_LENGTH)
    phone: str = Field(..., min_length=MIN_PHONE_LENGTH, max_length=MAX_PHONE_LENGTH)
    email: str = Field(..., max_length=MAX_EMAIL_LENGTH)
    party_size: int = Field(..., ge=MIN_PARTY_SIZE, le=MAX_PARTY_SIZE)
    notes: Optional[str] = Field(default=None, max_length=MAX_NOTES_LENGTH)

    @field_validator("name", "phone", "email", mode="before")
    @classmethod
    def _strip(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not validate_email(value):
            raise ValueError("Valid email required")
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def _empty_notes_to_none(cls, value):
        if value is None:
            return None
        cleaned = sanitize_text(value)
        return cleaned or None


class BookingCreate(ContactDetails):
    """Booking creation model."""

    date: date
    slot_type: SlotType
    status: BookingStatus = BookingStatus.CONFIRMED

    def to_record(self) -> dict:
        """Row payload for insertion, with the date as ``YYYY-MM-DD``."""
        return self.model_dump(mode="json")


class Booking(BaseModel):
    """Booking model."""

    id: Optional[str] = None
    date: date
    slot_type: SlotType
    name: str
    phone: str
    email: str
    party_size: int = Field(..., ge=MIN_PARTY_SIZE, le=MAX_PARTY_SIZE)
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "date": "2025-07-10",
                "slot_type": "AM",
                "name": "John Smith",
                "phone": "(555) 123-4567",
                "email": "john@example.com",
                "party_size": 4,
                "status": "confirmed",
            }
        }

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED
