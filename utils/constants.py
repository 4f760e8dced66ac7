"""
Application-wide constants.
Centralizes magic numbers and configuration values.
"""

# Display formatting
BOOKING_ID_DISPLAY_LENGTH = 8  # Length of booking ID to show in UI
BOOKINGS_DISPLAY_LIMIT = 10  # Maximum bookings to show in one admin message
UPCOMING_DAYS = 7  # Admin "upcoming charters" window

# Validation limits
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MIN_PHONE_LENGTH = 10
MAX_PHONE_LENGTH = 20
MAX_EMAIL_LENGTH = 255
MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 6
MAX_NOTES_LENGTH = 500
MAX_BLOCK_REASON_LENGTH = 200

# Date formats
DATE_FORMAT = "%Y-%m-%d"  # Storage format for calendar days
CREATED_AT_FORMAT = "%Y-%m-%d %H:%M"  # CSV export format for created_at
