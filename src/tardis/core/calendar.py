"""Pure calendar domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from tardis.core.timeline import Timeline
from tardis.errors import NoCalendarsConfiguredError, NoCalendarsSelectedError

DEFAULT_COLOR = "#0000ff"


class CalendarType(Enum):
    """What a calendar is used for. Decides how prominently its events show."""

    MEALS = "meals"
    DAILY = "daily"
    MEDICAL = "medical"
    SPECIAL = "special"

    def priority(self) -> int:
        return _PRIORITIES[self]


_PRIORITIES = {
    CalendarType.MEALS: 1,
    CalendarType.DAILY: 2,
    CalendarType.MEDICAL: 3,
    CalendarType.SPECIAL: 4,
}


def priority_for(calendar_type: str | None) -> int:
    """Priority of a calendar type name; unknown types get the lowest."""
    try:
        return CalendarType(calendar_type).priority()
    except ValueError:
        return 0


@dataclass(frozen=True)
class CalendarInfo:
    """A calendar known to the calendar store."""

    title: str
    color: str = DEFAULT_COLOR


@dataclass
class RawEvent:
    """An event as the calendar store reports it."""

    title: str
    start: datetime
    end: datetime | None
    calendar: str
    color: str = DEFAULT_COLOR


@dataclass
class ProjectedEvent:
    """An event ready to be drawn on the timeline."""

    title: str
    start: datetime
    end: datetime | None
    calendar: str
    priority: int
    color: str
    x: float = 0.0

    def format_time(self) -> str:
        return self.start.strftime("%H:%M")


def calendars_to_search(available: list[CalendarInfo], selected: dict[str, str]) -> list[str]:
    """
    Titles of the store's calendars that are selected for display.

    Raises NoCalendarsConfiguredError if the store has none, and
    NoCalendarsSelectedError if none of them are selected.
    """
    if not available:
        raise NoCalendarsConfiguredError("The calendar store has no calendars")
    titles = [c.title for c in available if c.title in selected]
    if not titles:
        raise NoCalendarsSelectedError("None of the available calendars are selected")
    return titles


def round_to_minute(t: datetime) -> datetime:
    """Drop seconds so the start time can serve as the event's identity."""
    return t.replace(second=0, microsecond=0)


def to_projected(raw: RawEvent, calendar_types: dict[str, str]) -> ProjectedEvent:
    return ProjectedEvent(
        title=raw.title,
        start=round_to_minute(raw.start),
        end=raw.end,
        calendar=raw.calendar,
        priority=priority_for(calendar_types.get(raw.calendar)),
        color=raw.color,
    )


def dedupe_by_start(events: list[ProjectedEvent]) -> list[ProjectedEvent]:
    """
    Keep one event per start time: the highest priority one.

    Ties on priority keep whichever came first in the input.
    """
    best: dict[datetime, ProjectedEvent] = {}
    for event in events:
        current = best.get(event.start)
        if current is None or event.priority > current.priority:
            best[event.start] = event
    return list(best.values())


def project(
    raw_events: list[RawEvent],
    timeline: Timeline,
    calendar_types: dict[str, str],
) -> list[ProjectedEvent]:
    """
    Turn raw store events into sorted, deduplicated, positioned events.

    Pure function - no I/O.
    """
    projected = dedupe_by_start([to_projected(e, calendar_types) for e in raw_events])
    projected.sort(key=lambda e: e.start)
    for event in projected:
        event.x = timeline.unit_x(event.start)
    return projected


def reposition(events: list[ProjectedEvent], timeline: Timeline) -> None:
    """Recompute screen positions after the window moves."""
    for event in events:
        event.x = timeline.unit_x(event.start)
