"""Trip catalogue: what each slot type means to a customer."""

from pydantic import BaseModel, Field

from models.booking import SlotType


class Trip(BaseModel):
    """Trip offered for a slot type."""

    slot_type: SlotType
    label: str
    time: str
    duration: str
    price_usd: int = Field(..., ge=0, description="Price in USD")

    class Config:
        json_schema_extra = {
            "example": {
                "slot_type": "AM",
                "label": "Half-Day Morning",
                "time": "6:00 AM – 12:00 PM",
                "duration": "6 hours",
                "price_usd": 350,
            }
        }


TRIPS = {
    SlotType.AM: Trip(
        slot_type=SlotType.AM,
        label="Half-Day Morning",
        time="6:00 AM – 12:00 PM",
        duration="6 hours",
        price_usd=350,
    ),
    SlotType.PM: Trip(
        slot_type=SlotType.PM,
        label="Half-Day Afternoon",
        time="1:00 PM – 7:00 PM",
        duration="6 hours",
        price_usd=350,
    ),
    SlotType.FULL: Trip(
        slot_type=SlotType.FULL,
        label="Full Day",
        time="6:00 AM – 4:00 PM",
        duration="10 hours",
        price_usd=600,
    ),
}


def get_trip(slot_type: SlotType) -> Trip:
    """Get trip by slot type."""
    return TRIPS[SlotType(slot_type)]


def get_all_trips() -> list[Trip]:
    """Get all trips in display order (AM, PM, FULL)."""
    return list(TRIPS.values())
