"""Email bodies for booking notifications."""

from html import escape
from typing import List, NamedTuple, Optional

from config import settings
from models.booking import Booking
from models.trip import get_trip
from utils.datetime_utils import format_long_date


class EmailContent(NamedTuple):
    subject: str
    text: str
    html: str


def detail_lines(booking: Booking) -> List[str]:
    trip = get_trip(booking.slot_type)
    lines = [
        f"Date: {format_long_date(booking.date)}",
        f"Time: {trip.time}",
        f"Trip Type: {trip.label} ({trip.duration})",
        f"Party Size: {booking.party_size}",
        f"Name: {booking.name}",
        f"Email: {booking.email}",
        f"Phone: {booking.phone}",
    ]
    if booking.notes:
        lines.append(f"Notes: {booking.notes}")
    return lines


def _html_list(lines: List[str]) -> str:
    items = "".join(f"<li>{escape(line)}</li>" for line in lines)
    return f"<ul>{items}</ul>"


def customer_email(booking: Booking, business_name: Optional[str] = None) -> EmailContent:
    name = business_name or settings.business_name
    lines = detail_lines(booking)
    text = "\n".join(
        [
            f"Thanks for booking with {name}!",
            "",
            *lines,
            "",
            "If you have any questions, reply to this email.",
        ]
    )
    html = (
        f"<h2>{escape(name)} – Booking Confirmed</h2>"
        f"<p>Thanks for booking with {escape(name)}!</p>"
        f"{_html_list(lines)}"
        "<p>If you have any questions, reply to this email.</p>"
    )
    return EmailContent(subject=f"{name} - Booking Confirmed", text=text, html=html)


def owner_email(booking: Booking, business_name: Optional[str] = None) -> EmailContent:
    name = business_name or settings.business_name
    lines = detail_lines(booking)
    text = "\n".join(["New booking received.", "", *lines])
    html = f"<h2>New booking received</h2>{_html_list(lines)}"
    return EmailContent(subject=f"New Booking – {name}", text=text, html=html)
