"""Calendar repository interface."""

from datetime import datetime
from typing import Protocol

from tardis.core.calendar import CalendarInfo, RawEvent


class CalendarRepository(Protocol):
    """Interface for reading calendars and events from the calendar store."""

    def list_calendars(self) -> list[CalendarInfo]:
        """List every calendar the store knows about."""
        ...

    def events_matching(
        self, start: datetime, end: datetime, calendars: list[str]
    ) -> list[RawEvent]:
        """Fetch events between start and end from the named calendars."""
        ...
