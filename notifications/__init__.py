"""Booking email notifications via the Gmail API."""

from .dispatcher import NotificationDispatcher, get_dispatcher
from .gmail import GmailClient
from .templates import EmailContent, customer_email, owner_email

__all__ = [
    "EmailContent",
    "GmailClient",
    "NotificationDispatcher",
    "customer_email",
    "get_dispatcher",
    "owner_email",
]
