"""Keeps the projected event list and which events are expanded."""

import asyncio
import logging
from datetime import datetime, time, tzinfo

from .adapters.settings_store import SettingsStore
from .core.calendar import CalendarInfo, ProjectedEvent, RawEvent, calendars_to_search, project, reposition as reposition_events
from .core.timeline import Timeline
from .errors import CalendarPermissionError, NoCalendarsConfiguredError, NoCalendarsSelectedError
from .ports.calendar_repo import CalendarRepository

logger = logging.getLogger(__name__)


class EventManager:
    """
    Source of truth for the events on screen.

    Expansion is tracked by start time, which is unique after projection, so
    it survives a refresh as long as the event is still there.
    """

    def __init__(
        self,
        repo: CalendarRepository,
        store: SettingsStore,
        timeline: Timeline,
        tz: tzinfo | None = None,
    ):
        self.repo = repo
        self.store = store
        self.timeline = timeline
        self.tz = tz
        self.calendars: list[CalendarInfo] = []
        self.events: list[ProjectedEvent] = []
        self.expanded: set[datetime] = set()
        self.permission_denied = False
        self.no_calendars_available = False
        self.no_calendars_selected = False
        self._last_seen: tuple[list[RawEvent], dict[str, str]] | None = None

    async def refresh(self) -> bool:
        """
        Re-read calendars and events from the store.

        Returns True if the event list changed. Store errors set the matching
        flag and leave the current events alone.
        """
        selected = self.store.get_selected_calendars()
        start = datetime.combine(self.timeline.min_day, time.min, tzinfo=self.tz)
        end = datetime.combine(self.timeline.max_day, time.max, tzinfo=self.tz)

        try:
            self.calendars = await asyncio.to_thread(self.repo.list_calendars)
            titles = calendars_to_search(self.calendars, selected)
            raw = await asyncio.to_thread(self.repo.events_matching, start, end, titles)
        except CalendarPermissionError as e:
            logger.warning(f"Calendar access denied: {e}")
            self._set_status(permission_denied=True)
            return False
        except NoCalendarsConfiguredError as e:
            logger.warning(str(e))
            self._set_status(no_calendars_available=True)
            return False
        except NoCalendarsSelectedError as e:
            logger.warning(str(e))
            self._set_status(no_calendars_selected=True)
            return False

        self._set_status()
        if (raw, selected) == self._last_seen:
            return False
        self._last_seen = (raw, selected)
        self.apply(raw, selected)
        logger.info(f"Showing {len(self.events)} events from {len(titles)} calendars")
        return True

    def _set_status(
        self,
        permission_denied: bool = False,
        no_calendars_available: bool = False,
        no_calendars_selected: bool = False,
    ) -> None:
        self.permission_denied = permission_denied
        self.no_calendars_available = no_calendars_available
        self.no_calendars_selected = no_calendars_selected

    def apply(self, raw_events: list[RawEvent], calendar_types: dict[str, str]) -> None:
        """Replace the events, keeping expanded the ones that still exist."""
        events = project(raw_events, self.timeline, calendar_types)
        starts = {e.start for e in events}
        self.expanded = {t for t in self.expanded if t in starts}
        self.events = events

    def reposition(self) -> None:
        reposition_events(self.events, self.timeline)

    def is_expanded(self, start: datetime) -> bool:
        return start in self.expanded

    def toggle(self, start: datetime) -> bool:
        """Flip an event between compact and expanded. Returns the new state."""
        if start in self.expanded:
            self.expanded.discard(start)
            return False
        if any(e.start == start for e in self.events):
            self.expanded.add(start)
            return True
        return False

    def close_all(self) -> None:
        """Tapping the background closes every expanded event."""
        self.expanded.clear()
