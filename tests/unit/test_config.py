"""
Unit tests for settings and validation helpers.
"""

import pytest

from config import DayInterpretation, Settings
from utils.validation import (
    sanitize_text,
    validate_block_reason,
    validate_email,
    validate_name,
    validate_notes,
    validate_party_size,
    validate_phone,
)


def make_settings(**overrides):
    values = {
        "bot_token": "123:abc",
        "supabase_url": "https://project.supabase.co",
        "supabase_key": "service-role-key",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_defaults():
    settings = make_settings()
    assert settings.business_name == "Captain Mike's Charters"
    assert settings.timezone == "America/New_York"
    assert settings.day_interpretation == DayInterpretation.CALENDAR
    assert settings.booking_horizon_months == 3
    assert settings.availability_cache_seconds == 30


def test_validate_all_required_ok():
    make_settings().validate_all_required()


@pytest.mark.parametrize(
    "overrides,missing",
    [
        ({"bot_token": ""}, "bot_token"),
        ({"supabase_url": "your_supabase_url"}, "supabase_url"),
        ({"booking_horizon_months": 0}, "booking_horizon_months"),
    ],
)
def test_validate_all_required_reports_missing(overrides, missing):
    with pytest.raises(ValueError, match=missing):
        make_settings(**overrides).validate_all_required()


def test_day_interpretation_from_string():
    assert make_settings(day_interpretation="utc_midnight").day_interpretation == (
        DayInterpretation.UTC_MIDNIGHT
    )


def test_gmail_configured():
    assert not make_settings().gmail_configured
    assert make_settings(
        gmail_client_id="id",
        gmail_client_secret="secret",
        gmail_refresh_token="token",
        gmail_user="captain@example.com",
    ).gmail_configured


def test_validate_name():
    assert validate_name("Al")
    assert not validate_name("A")
    assert not validate_name("x" * 101)
    assert not validate_name("")


def test_validate_phone_checks_length_only():
    assert validate_phone("(555) 123-4567")
    assert validate_phone("+1 555 123 4567")
    assert not validate_phone("555-1234")
    assert not validate_phone("1" * 21)


def test_validate_email():
    assert validate_email("john@example.com")
    assert not validate_email("john@")
    assert not validate_email("john.example.com")
    assert not validate_email("a" * 250 + "@example.com")


def test_validate_party_size():
    assert validate_party_size(1)
    assert validate_party_size(6)
    assert not validate_party_size(0)
    assert not validate_party_size(7)
    assert not validate_party_size(True)
    assert not validate_party_size("3")


def test_validate_notes():
    assert validate_notes(None)
    assert validate_notes("x" * 500)
    assert not validate_notes("x" * 501)


def test_validate_block_reason():
    assert validate_block_reason(None)
    assert validate_block_reason("maintenance")
    assert validate_block_reason("  " + "x" * 200 + "  ")
    assert not validate_block_reason("x" * 201)


def test_sanitize_text():
    assert sanitize_text("  hello\x00 world  ") == "hello world"
    assert sanitize_text("") == ""
