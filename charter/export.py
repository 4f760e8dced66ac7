"""CSV export of bookings for the admin."""

import csv
import io
from datetime import date
from typing import Iterable

from charter.dates import local_time
from models.booking import Booking
from utils.constants import CREATED_AT_FORMAT
from utils.datetime_utils import to_date_string

CSV_HEADER = [
    "Date",
    "Slot",
    "Name",
    "Phone",
    "Email",
    "Party Size",
    "Notes",
    "Status",
    "Created",
]


def booking_row(booking: Booking) -> list:
    created = ""
    if booking.created_at:
        created = local_time(booking.created_at).strftime(CREATED_AT_FORMAT)
    return [
        to_date_string(booking.date),
        booking.slot_type.value,
        booking.name,
        booking.phone,
        booking.email,
        str(booking.party_size),
        booking.notes or "",
        booking.status.value,
        created,
    ]


def bookings_to_csv(bookings: Iterable[Booking]) -> str:
    """Every field quoted, embedded quotes doubled."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for booking in bookings:
        writer.writerow(booking_row(booking))
    return buffer.getvalue()


def export_filename(today: date) -> str:
    return f"bookings-{to_date_string(today)}.csv"
