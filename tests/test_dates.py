"""Tests for schedule date resolution."""

from datetime import date, timedelta

import pytest

from finger_strings.dates import (
    days_to_date,
    dow_to_date,
    is_next_week,
    is_this_week,
    is_tomorrow,
    parse_date,
    resolve_date,
    resolve_schedule_date,
    specials_to_date,
)
from finger_strings.errors import DateInPast, InvalidArgument

WEDNESDAY = date(2024, 1, 3)


class TestWeekdays:
    """Test weekday name resolution."""

    def test_following_monday(self):
        """Test a bare weekday resolves to its next occurrence."""
        assert dow_to_date("mon", WEDNESDAY) == date(2024, 1, 8)

    def test_next_monday_adds_a_week(self):
        """Test that next adds a week to the bare weekday."""
        assert dow_to_date("next mon", WEDNESDAY) == date(2024, 1, 15)
        assert dow_to_date("n mon", WEDNESDAY) == date(2024, 1, 15)

    def test_same_weekday_is_a_week_out(self):
        """Test that today's weekday means a week from today."""
        assert dow_to_date("wed", WEDNESDAY) == date(2024, 1, 10)

    def test_tomorrow_by_name(self):
        """Test the weekday after today."""
        assert dow_to_date("thu", WEDNESDAY) == date(2024, 1, 4)

    def test_case_insensitive(self):
        """Test that weekday names ignore case."""
        assert dow_to_date("Next MON", WEDNESDAY) == date(2024, 1, 15)

    def test_not_a_weekday(self):
        """Test that other words are left to later stages."""
        assert dow_to_date("monday", WEDNESDAY) is None
        assert dow_to_date("last mon", WEDNESDAY) is None
        assert dow_to_date("", WEDNESDAY) is None


class TestOtherStages:
    """Test keyword, relative and generic resolution."""

    def test_specials(self):
        """Test today and tomorrow keywords."""
        assert specials_to_date("today", WEDNESDAY) == WEDNESDAY
        assert specials_to_date("Tomorrow", WEDNESDAY) == date(2024, 1, 4)
        assert specials_to_date("yesterday", WEDNESDAY) is None

    def test_days(self):
        """Test N days expressions."""
        assert days_to_date("3 days", WEDNESDAY) == date(2024, 1, 6)
        assert days_to_date("1 day", WEDNESDAY) == date(2024, 1, 4)
        assert days_to_date("10days", WEDNESDAY) == date(2024, 1, 13)
        assert days_to_date("days", WEDNESDAY) is None

    def test_iso_date(self):
        """Test an ISO date."""
        assert parse_date("2024-02-10", WEDNESDAY) == date(2024, 2, 10)

    def test_gibberish(self):
        """Test that nonsense parses to nothing."""
        assert parse_date("xyzzy", WEDNESDAY) is None
        assert parse_date("", WEDNESDAY) is None


class TestResolveDate:
    """Test the resolution order and error reporting."""

    def test_keyword_wins(self):
        """Test that keywords are tried before other stages."""
        assert resolve_date("today", WEDNESDAY) == WEDNESDAY

    def test_weekday_before_generic_parsing(self):
        """Test that weekdays are resolved before generic parsing."""
        assert resolve_date("fri", WEDNESDAY) == date(2024, 1, 5)

    def test_unparseable(self):
        """Test that an unreadable date raises InvalidArgument."""
        with pytest.raises(InvalidArgument):
            resolve_date("xyzzy", WEDNESDAY)

    def test_schedule_date_in_past_rejected(self):
        """Test that a past date is refused for scheduling."""
        with pytest.raises(DateInPast) as excinfo:
            resolve_schedule_date("2024-01-02", WEDNESDAY)
        assert excinfo.value.when == date(2024, 1, 2)

    def test_schedule_date_today_allowed(self):
        """Test that today is a valid schedule date."""
        assert resolve_schedule_date("today", WEDNESDAY) == WEDNESDAY


class TestWeekLabels:
    """Test helpers used to label upcoming dates."""

    def test_tomorrow(self):
        """Test the tomorrow check."""
        assert is_tomorrow(WEDNESDAY + timedelta(days=1), WEDNESDAY)
        assert not is_tomorrow(WEDNESDAY, WEDNESDAY)

    def test_this_and_next_week(self):
        """Test the week checks around a Wednesday."""
        assert is_this_week(WEDNESDAY + timedelta(days=5), WEDNESDAY)
        assert not is_this_week(WEDNESDAY + timedelta(days=6), WEDNESDAY)
        assert is_next_week(WEDNESDAY + timedelta(days=6), WEDNESDAY)
        assert is_next_week(WEDNESDAY + timedelta(days=13), WEDNESDAY)
        assert not is_next_week(WEDNESDAY + timedelta(days=14), WEDNESDAY)
