"""
Configuration module for the charter booking bot.
Loads environment variables and provides typed configuration.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)


class DayInterpretation(str, Enum):
    """How stored ``YYYY-MM-DD`` dates map onto the local calendar."""

    CALENDAR = "calendar"  # plain calendar day, no timezone involved
    UTC_MIDNIGHT = "utc_midnight"  # legacy: UTC midnight instant seen in local time


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    bot_token: str = ""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # Gmail (OAuth refresh-token flow)
    gmail_client_id: Optional[str] = None
    gmail_client_secret: Optional[str] = None
    gmail_refresh_token: Optional[str] = None
    gmail_user: Optional[str] = None  # Sender address
    owner_email: str = "owner@example.com"

    # Business
    business_name: str = "Captain Mike's Charters"

    # Calendar
    timezone: str = "America/New_York"
    day_interpretation: DayInterpretation = DayInterpretation.CALENDAR
    booking_horizon_months: int = 3
    availability_cache_seconds: int = 30

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"

    # Webhook Configuration
    bot_webhook_url: Optional[str] = (
        None  # Full webhook URL for bot (e.g., https://yourdomain.com/webhook/telegram)
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def gmail_configured(self) -> bool:
        """True when every Gmail credential needed to send mail is present."""
        return all(
            [
                self.gmail_client_id,
                self.gmail_client_secret,
                self.gmail_refresh_token,
                self.gmail_user,
            ]
        )

    def validate_all_required(self) -> None:
        """
        Validate that all required settings are present.

        Gmail credentials are optional: without them bookings still succeed
        and the missing notification is logged.

        Raises:
            ValueError: If required fields are missing or invalid
        """
        required_fields = [
            "bot_token",
            "supabase_url",
            "supabase_key",
        ]

        missing = []
        for field in required_fields:
            value = getattr(self, field, None)

            if not value:
                missing.append(field)
                continue

            # Check for placeholder values
            if str(value).lower().startswith("your_"):
                missing.append(field)

        if self.booking_horizon_months < 1:
            missing.append("booking_horizon_months")

        if missing:
            raise ValueError(
                f"Missing or invalid required configuration: "
                f"{', '.join(missing)}. "
                f"Please check your .env file and ensure all required "
                f"values are set."
            )


# Global settings instance
settings = Settings()
