"""Tests for sun event selection."""

import pytest

from conftest import BASE_TIME, DAY, HOUR
from models.forecast import DailySunTable, SunEventType
from services.sun_event_service import (
    NoUpcomingSunEventError,
    all_sun_events,
    nearest_sun_event,
    upcoming_sun_events,
)


class TestAllSunEvents:
    """Test cases for flattening the daily table."""

    def test_chronological(self, daily_table):
        events = all_sun_events(daily_table)

        assert len(events) == 6
        assert [e.timestamp for e in events] == sorted(e.timestamp for e in events)
        assert events[0].type == SunEventType.SUNRISE
        assert events[1].type == SunEventType.SUNSET

    def test_empty_table(self):
        assert all_sun_events(DailySunTable(time=[], sunrise=[], sunset=[])) == []


class TestNearestSunEvent:
    """Test cases for picking the event to score."""

    def test_before_sunrise(self, daily_table):
        event = nearest_sun_event(daily_table, BASE_TIME)

        assert event.type == "sunrise"
        assert event.day == BASE_TIME

    def test_between_sunrise_and_sunset(self, daily_table):
        event = nearest_sun_event(daily_table, BASE_TIME + 12 * HOUR)

        assert event.type == "sunset"
        assert event.timestamp == daily_table.sunset[0]

    def test_rolls_over_to_next_day(self, daily_table):
        event = nearest_sun_event(daily_table, BASE_TIME + 20 * HOUR)

        assert event.type == "sunrise"
        assert event.day == BASE_TIME + DAY

    def test_exactly_at_event(self, daily_table):
        event = nearest_sun_event(daily_table, daily_table.sunset[0])

        assert event.timestamp == daily_table.sunset[0]

    def test_margin_keeps_recent_event(self, daily_table):
        """A sunset 20 minutes ago is still current with a 30 minute margin."""
        now = daily_table.sunset[0] + 20 * 60

        assert nearest_sun_event(daily_table, now, margin_seconds=30 * 60).timestamp == (
            daily_table.sunset[0]
        )
        assert nearest_sun_event(daily_table, now).timestamp == daily_table.sunrise[1]

    def test_all_passed(self, daily_table):
        with pytest.raises(NoUpcomingSunEventError):
            nearest_sun_event(daily_table, daily_table.sunset[-1] + 1)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            nearest_sun_event(DailySunTable(time=[], sunrise=[], sunset=[]), 0)


class TestUpcomingSunEvents:
    """Test cases for the upcoming event list."""

    def test_includes_rest_of_current_day(self, daily_table):
        """Today's sunset follows when the current event is today's sunrise."""
        sunrise = daily_table.events_for_day(0)[0]
        events = upcoming_sun_events(daily_table, sunrise)

        assert [e.timestamp for e in events] == [
            daily_table.sunset[0],
            daily_table.sunrise[1],
            daily_table.sunset[1],
            daily_table.sunrise[2],
            daily_table.sunset[2],
        ]

    def test_after_sunset_starts_next_day(self, daily_table):
        sunset = daily_table.events_for_day(0)[1]
        events = upcoming_sun_events(daily_table, sunset)

        assert [e.day for e in events] == [
            BASE_TIME + DAY,
            BASE_TIME + DAY,
            BASE_TIME + 2 * DAY,
            BASE_TIME + 2 * DAY,
        ]
        assert [e.type for e in events] == ["sunrise", "sunset", "sunrise", "sunset"]

    def test_limited_to_days(self, daily_table):
        sunrise = daily_table.events_for_day(0)[0]

        assert len(upcoming_sun_events(daily_table, sunrise, days=1)) == 3

    def test_zero_days_keeps_current_day(self, daily_table):
        sunrise = daily_table.events_for_day(0)[0]
        events = upcoming_sun_events(daily_table, sunrise, days=0)

        assert [e.timestamp for e in events] == [daily_table.sunset[0]]

    def test_last_event_has_no_upcoming(self, daily_table):
        last_sunset = daily_table.events_for_day(len(daily_table.time) - 1)[1]

        assert upcoming_sun_events(daily_table, last_sunset) == []
