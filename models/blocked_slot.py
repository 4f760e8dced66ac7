"""Blocked slot models for admin blackout dates."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.booking import SlotType
from utils.constants import MAX_BLOCK_REASON_LENGTH
from utils.validation import sanitize_text


class BlockedSlot(BaseModel):
    """A date/slot closed by an admin without a customer booking."""

    id: Optional[str] = None
    date: date
    slot_type: SlotType
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "date": "2025-07-11",
                "slot_type": "FULL",
                "reason": "maintenance",
            }
        }


class BlockedSlotCreate(BaseModel):
    """Blocked slot creation model."""

    date: date
    slot_type: SlotType
    reason: Optional[str] = Field(default=None, max_length=MAX_BLOCK_REASON_LENGTH)

    @field_validator("reason", mode="before")
    @classmethod
    def _empty_reason_to_none(cls, value):
        if value is None:
            return None
        cleaned = sanitize_text(value)
        return cleaned or None

    def to_record(self) -> dict:
        return self.model_dump(mode="json")
