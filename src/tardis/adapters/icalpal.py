"""icalPal adapter - subprocess wrapper for macOS Calendar."""

import json
import logging
import subprocess
from datetime import datetime, timedelta, tzinfo

from tardis.core.calendar import DEFAULT_COLOR, CalendarInfo, RawEvent
from tardis.errors import CalendarPermissionError

logger = logging.getLogger(__name__)

# icalPal's complaints when macOS withholds access to the Calendar database.
_PERMISSION_MARKERS = ("operation not permitted", "unable to open database", "permission denied")


class IcalPalAdapter:
    """
    icalPal subprocess adapter.

    Implements CalendarRepository protocol. Reads calendars and events from
    macOS Calendar via the icalPal CLI tool.
    """

    def __init__(self, tz: tzinfo | None = None, timeout: int = 30):
        self.tz = tz
        self.timeout = timeout

    def _run(self, args: list[str]) -> list[dict]:
        """Run icalPal with JSON output. Returns [] when the tool is unusable."""
        cmd = ["icalPal", *args, "-o", "json"]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
            data = json.loads(result.stdout) if result.stdout.strip() else []
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").lower()
            if any(marker in stderr for marker in _PERMISSION_MARKERS):
                raise CalendarPermissionError(
                    "icalPal cannot read the Calendar database - grant Full Disk Access"
                ) from e
            logger.warning(f"icalPal command failed: {e}")
            return []
        except FileNotFoundError:
            logger.warning("icalPal not found - install with 'brew install icalpal'")
            return []
        except subprocess.TimeoutExpired:
            logger.warning(f"icalPal timed out after {self.timeout}s")
            return []
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse icalPal output: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Unexpected icalPal output: {type(data).__name__}")
            return []
        return data

    def list_calendars(self) -> list[CalendarInfo]:
        """List every calendar in macOS Calendar."""
        calendars = {}
        for item in self._run(["calendars"]):
            title = item.get("calendar") or item.get("title")
            if title and title not in calendars:
                calendars[title] = CalendarInfo(title=title, color=item.get("color") or DEFAULT_COLOR)
        return list(calendars.values())

    def events_matching(
        self, start: datetime, end: datetime, calendars: list[str]
    ) -> list[RawEvent]:
        """Fetch events starting between start and end from the named calendars."""
        if not calendars:
            return []

        data = self._run(
            [
                "events",
                "--from",
                start.date().isoformat(),
                "--to",
                (end.date() + timedelta(days=1)).isoformat(),
            ]
        )
        wanted = set(calendars)
        events = []
        for item in data:
            if item.get("calendar", "") not in wanted:
                continue
            try:
                event = self._parse_event(item)
            except (ValueError, KeyError, TypeError) as e:
                logger.debug(f"Skipping malformed event: {e}")
                continue
            if event and start <= event.start <= end:
                events.append(event)
        return events

    def _parse_time(self, text: str, seconds: float | None) -> datetime | None:
        # Format: "2026-01-27 14:00:00 -0500"
        if text:
            try:
                parsed = datetime.strptime(text, "%Y-%m-%d %H:%M:%S %z")
            except ValueError:
                parsed = datetime.strptime(text[:19], "%Y-%m-%d %H:%M:%S").replace(tzinfo=self.tz)
            return parsed.astimezone(self.tz) if self.tz else parsed
        if seconds:
            return datetime.fromtimestamp(seconds, tz=self.tz)
        return None

    def _parse_event(self, item: dict) -> RawEvent | None:
        """Parse a single event from icalPal data."""
        # sctime/ectime have correct dates for recurring events
        start = self._parse_time(item.get("sctime", ""), item.get("sseconds"))
        if start is None:
            return None
        end = self._parse_time(item.get("ectime", ""), item.get("eseconds"))

        return RawEvent(
            title=item.get("title") or "Untitled",
            start=start,
            end=end,
            calendar=item.get("calendar", ""),
            color=item.get("color") or DEFAULT_COLOR,
        )
