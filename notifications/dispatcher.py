"""
Fire-and-forget booking notifications.

``dispatch`` schedules the customer confirmation and the owner
notification on the running event loop and returns immediately. Failures
are logged and never reach the booking flow.
"""

import asyncio
import logging
from typing import Optional, Set

from config import settings
from models.booking import Booking
from notifications.gmail import GmailClient
from notifications.templates import customer_email, owner_email
from utils.exceptions import NotificationError

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Sends booking emails in background tasks."""

    def __init__(self, gmail: Optional[GmailClient] = None, owner_address: Optional[str] = None):
        self.gmail = gmail or GmailClient()
        self.owner_address = owner_address or settings.owner_email
        self._tasks: Set[asyncio.Task] = set()

    async def send_booking_emails(self, booking: Booking) -> None:
        """
        Send both emails in order: customer first, then owner.

        Raises:
            NotificationError: On the first failed send
        """
        customer = customer_email(booking)
        logger.info(f"Sending customer email for booking {booking.id}")
        await self.gmail.send(booking.email, customer.subject, customer.text, customer.html)

        owner = owner_email(booking)
        logger.info(f"Sending owner email for booking {booking.id}")
        await self.gmail.send(self.owner_address, owner.subject, owner.text, owner.html)

    async def _send_safely(self, booking: Booking) -> None:
        try:
            await self.send_booking_emails(booking)
        except NotificationError as e:
            logger.error(f"Notification for booking {booking.id} failed: {e}")
        except Exception as e:
            logger.error(
                f"Unexpected error sending notification for booking {booking.id}: {e}",
                exc_info=True,
            )

    def dispatch(self, booking: Booking) -> asyncio.Task:
        """Schedule notifications for ``booking``; must be called inside the event loop."""
        task = asyncio.create_task(self._send_safely(booking))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for all scheduled notifications (used on shutdown)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        await self.drain()
        await self.gmail.close()


# Global dispatcher instance
_dispatcher: Optional[NotificationDispatcher] = None


def get_dispatcher() -> NotificationDispatcher:
    """Get or create notification dispatcher instance."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = NotificationDispatcher()
    return _dispatcher
