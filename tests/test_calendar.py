"""Tests for core calendar logic."""

from datetime import datetime, time, timedelta, timezone

import pytest

from tardis.core.calendar import (
    CalendarInfo,
    CalendarType,
    RawEvent,
    calendars_to_search,
    dedupe_by_start,
    priority_for,
    project,
    round_to_minute,
    to_projected,
)
from tardis.core.timeline import HOUR, Timeline
from tardis.errors import NoCalendarsConfiguredError, NoCalendarsSelectedError

CALENDAR_TYPES = {
    "Meals": "meals",
    "Daily": "daily",
    "Doctor": "medical",
    "Birthdays": "special",
}


# Fixtures
@pytest.fixture
def now():
    return datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def timeline(now):
    return Timeline(now, default_span=6 * HOUR)


@pytest.fixture
def make_event(now):
    """Factory for creating raw events."""
    def _make(
        title: str,
        hour: int,
        minute: int = 0,
        calendar: str = "Daily",
        second: int = 0,
    ) -> RawEvent:
        start = datetime.combine(now.date(), time(hour, minute, second), tzinfo=timezone.utc)
        return RawEvent(
            title=title,
            start=start,
            end=start + timedelta(hours=1),
            calendar=calendar,
            color="#ff0000",
        )
    return _make


class TestPriority:
    def test_known_types(self):
        assert priority_for("meals") == 1
        assert priority_for("daily") == 2
        assert priority_for("medical") == 3
        assert priority_for("special") == 4

    def test_unknown_type_is_lowest(self):
        assert priority_for("none") == 0
        assert priority_for(None) == 0

    def test_enum_priority(self):
        assert CalendarType.SPECIAL.priority() > CalendarType.MEALS.priority()


class TestRounding:
    def test_truncates_to_minute(self):
        t = datetime(2025, 1, 15, 10, 0, 42, 123456, tzinfo=timezone.utc)
        assert round_to_minute(t) == datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)

    def test_projected_start_is_rounded(self, make_event):
        event = to_projected(make_event("Walk", 10, second=30), CALENDAR_TYPES)
        assert event.start.second == 0
        assert event.priority == 2
        assert event.color == "#ff0000"


class TestDedupe:
    def test_higher_priority_wins(self, make_event):
        low = to_projected(make_event("Snack", 10, calendar="Meals"), CALENDAR_TYPES)
        high = to_projected(make_event("Checkup", 10, calendar="Doctor"), CALENDAR_TYPES)
        assert [e.title for e in dedupe_by_start([low, high])] == ["Checkup"]
        assert [e.title for e in dedupe_by_start([high, low])] == ["Checkup"]

    def test_equal_priority_keeps_first(self, make_event):
        first = to_projected(make_event("Walk", 10), CALENDAR_TYPES)
        second = to_projected(make_event("Stretch", 10), CALENDAR_TYPES)
        assert [e.title for e in dedupe_by_start([first, second])] == ["Walk"]
        assert [e.title for e in dedupe_by_start([second, first])] == ["Stretch"]

    def test_seconds_do_not_separate_events(self, make_event):
        a = to_projected(make_event("A", 10, second=5, calendar="Meals"), CALENDAR_TYPES)
        b = to_projected(make_event("B", 10, second=50, calendar="Birthdays"), CALENDAR_TYPES)
        assert [e.title for e in dedupe_by_start([a, b])] == ["B"]


class TestProject:
    def test_sorted_by_start(self, make_event, timeline):
        raw = [make_event("Lunch", 12), make_event("Walk", 10), make_event("Nap", 11)]
        events = project(raw, timeline, CALENDAR_TYPES)
        assert [e.title for e in events] == ["Walk", "Nap", "Lunch"]

    def test_same_start_keeps_highest_priority(self, make_event, timeline):
        raw = [
            make_event("Breakfast", 10, calendar="Meals"),
            make_event("Blood test", 10, calendar="Doctor"),
        ]
        events = project(raw, timeline, CALENDAR_TYPES)
        assert len(events) == 1
        assert events[0].title == "Blood test"
        assert events[0].priority == 3

    def test_unselected_calendar_gets_lowest_priority(self, make_event, timeline):
        raw = [make_event("Mystery", 10, calendar="Other")]
        events = project(raw, timeline, CALENDAR_TYPES)
        assert events[0].priority == 0

    def test_positions_against_timeline(self, make_event, timeline):
        events = project([make_event("Walk", 10), make_event("Later", 23)], timeline, CALENDAR_TYPES)
        assert events[0].x == pytest.approx(timeline.unit_x(events[0].start))
        assert 0.2 < events[0].x < 1.0
        assert events[1].x == 1.0

    def test_empty(self, timeline):
        assert project([], timeline, CALENDAR_TYPES) == []


class TestCalendarsToSearch:
    def test_intersection(self):
        available = [CalendarInfo("Daily"), CalendarInfo("Work"), CalendarInfo("Meals")]
        assert calendars_to_search(available, CALENDAR_TYPES) == ["Daily", "Meals"]

    def test_no_calendars(self):
        with pytest.raises(NoCalendarsConfiguredError):
            calendars_to_search([], CALENDAR_TYPES)

    def test_none_selected(self):
        with pytest.raises(NoCalendarsSelectedError):
            calendars_to_search([CalendarInfo("Work")], CALENDAR_TYPES)

    def test_empty_selection(self):
        with pytest.raises(NoCalendarsSelectedError):
            calendars_to_search([CalendarInfo("Daily")], {})
