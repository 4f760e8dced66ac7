"""
Input validation utilities for customer and admin input.
"""

import re
from typing import Optional

from utils.constants import (
    MAX_BLOCK_REASON_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_PARTY_SIZE,
    MAX_PHONE_LENGTH,
    MIN_NAME_LENGTH,
    MIN_PARTY_SIZE,
    MIN_PHONE_LENGTH,
)

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_name(name: str) -> bool:
    """Validate a customer name (2-100 characters after trimming)."""
    if not name or not isinstance(name, str):
        return False
    return MIN_NAME_LENGTH <= len(name.strip()) <= MAX_NAME_LENGTH


def validate_email(email: str) -> bool:
    """
    Validate email address format.

    Args:
        email: Email address string

    Returns:
        True if valid format, False otherwise
    """
    if not email or not isinstance(email, str):
        return False
    if len(email) > MAX_EMAIL_LENGTH:
        return False

    # Basic email regex (RFC 5322 simplified)
    return bool(_EMAIL_PATTERN.match(email))


def validate_phone(phone: str) -> bool:
    """
    Validate phone number.

    Only the length is checked (10-20 characters), so local formats such
    as "(555) 123-4567" are accepted as typed.
    """
    if not phone or not isinstance(phone, str):
        return False
    return MIN_PHONE_LENGTH <= len(phone.strip()) <= MAX_PHONE_LENGTH


def validate_party_size(party_size: int) -> bool:
    """Validate party size (1-6 guests)."""
    if isinstance(party_size, bool) or not isinstance(party_size, int):
        return False
    return MIN_PARTY_SIZE <= party_size <= MAX_PARTY_SIZE


def validate_notes(notes: Optional[str]) -> bool:
    """Notes are optional; when given they are limited to 500 characters."""
    if notes is None:
        return True
    return isinstance(notes, str) and len(notes) <= MAX_NOTES_LENGTH


def validate_block_reason(reason: Optional[str]) -> bool:
    """Block reasons are optional and limited to 200 characters."""
    if reason is None:
        return True
    return isinstance(reason, str) and len(sanitize_text(reason)) <= MAX_BLOCK_REASON_LENGTH


def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize user input text.

    Args:
        text: Input text
        max_length: Optional maximum length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    # Remove control characters except newlines and tabs
    sanitized = re.sub(r'[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]', '', str(text))

    # Trim whitespace
    sanitized = sanitized.strip()

    # Apply length limit if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
