"""
Custom exception classes for better error handling.
Provides specific error types instead of generic exceptions.
"""

from typing import Dict, Optional


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class BookingNotFoundError(DatabaseError):
    """Raised when a booking is not found."""

    pass


class SlotConflictError(DatabaseError):
    """Raised when the store rejects a booking that overlaps a confirmed one."""

    pass


class SlotUnavailableError(Exception):
    """
    Raised to the customer when the chosen slot cannot be booked.

    Covers both the local availability gate and a write-time conflict.
    The customer recovers by selecting again.
    """

    DEFAULT_MESSAGE = "This slot may no longer be available. Please select another."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.DEFAULT_MESSAGE)


class BookingValidationError(Exception):
    """Raised when submitted contact details fail validation."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        details = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        super().__init__(f"Invalid booking details: {details}")


class InvalidStatusTransitionError(Exception):
    """Raised when a booking status change is not allowed."""

    pass


class NotificationError(Exception):
    """Raised when a booking notification cannot be delivered."""

    pass


class AuthenticationError(Exception):
    """Raised when admin sign-in fails. The message comes from the auth provider."""

    pass
