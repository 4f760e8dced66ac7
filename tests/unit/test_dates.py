"""
Unit tests for calendar-day helpers.
"""

from datetime import date, datetime, timezone

import pytest

from charter.dates import (
    add_months,
    iter_days,
    local_day,
    local_time,
    month_bounds,
    storage_day,
    today,
)
from config import DayInterpretation
from utils.datetime_utils import format_long_date, parse_date_string, to_date_string


def test_parse_date_string():
    assert parse_date_string("2025-07-10") == date(2025, 7, 10)
    assert parse_date_string(" 2025-07-10 ") == date(2025, 7, 10)
    assert parse_date_string(date(2025, 7, 10)) == date(2025, 7, 10)


@pytest.mark.parametrize("value", ["10/07/2025", "", "2025-13-01", None])
def test_parse_date_string_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_date_string(value)


def test_parse_date_string_rejects_datetime():
    with pytest.raises(ValueError):
        parse_date_string(datetime(2025, 7, 10, 12, 0))


def test_to_date_string():
    assert to_date_string(date(2025, 7, 1)) == "2025-07-01"


def test_format_long_date():
    assert format_long_date(date(2025, 7, 10)) == "Thursday, July 10, 2025"


def test_calendar_interpretation_is_identity():
    assert local_day("2025-07-10", DayInterpretation.CALENDAR) == date(2025, 7, 10)
    assert storage_day(date(2025, 7, 10), DayInterpretation.CALENDAR) == "2025-07-10"


def test_utc_midnight_west_of_utc_is_previous_day():
    assert (
        local_day("2025-07-10", DayInterpretation.UTC_MIDNIGHT, "America/New_York")
        == date(2025, 7, 9)
    )


def test_utc_midnight_east_of_utc_is_same_day():
    assert (
        local_day("2025-07-10", DayInterpretation.UTC_MIDNIGHT, "Europe/Prague")
        == date(2025, 7, 10)
    )


@pytest.mark.parametrize("tz_name", ["America/New_York", "Europe/Prague", "UTC", "Asia/Tokyo"])
def test_storage_day_inverts_local_day(tz_name):
    day = date(2025, 7, 10)
    stored = storage_day(day, DayInterpretation.UTC_MIDNIGHT, tz_name)
    assert local_day(stored, DayInterpretation.UTC_MIDNIGHT, tz_name) == day


def test_today_uses_configured_zone():
    # 02:00 UTC on the 10th is still the 9th in New York
    now = datetime(2025, 7, 10, 2, 0, tzinfo=timezone.utc)
    assert today("America/New_York", now=now) == date(2025, 7, 9)
    assert today("Europe/Prague", now=now) == date(2025, 7, 10)


def test_add_months():
    assert add_months(date(2025, 7, 10), 3) == date(2025, 10, 10)
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)
    assert add_months(date(2025, 1, 15), -1) == date(2024, 12, 15)


def test_month_bounds():
    assert month_bounds(date(2025, 2, 14)) == (date(2025, 2, 1), date(2025, 2, 28))


def test_iter_days():
    assert list(iter_days(date(2025, 7, 30), date(2025, 8, 1))) == [
        date(2025, 7, 30),
        date(2025, 7, 31),
        date(2025, 8, 1),
    ]
    assert list(iter_days(date(2025, 8, 1), date(2025, 7, 31))) == []


def test_local_time_projects_utc_timestamp():
    moment = datetime(2025, 6, 1, 14, 30, tzinfo=timezone.utc)
    assert local_time(moment, "America/New_York").strftime("%Y-%m-%d %H:%M") == "2025-06-01 10:30"
    assert local_time(moment, "Europe/Prague").strftime("%Y-%m-%d %H:%M") == "2025-06-01 16:30"


def test_local_time_treats_naive_as_utc():
    moment = datetime(2025, 1, 1, 2, 0)
    assert local_time(moment, "America/New_York").date() == date(2024, 12, 31)
