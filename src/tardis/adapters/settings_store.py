"""File-based settings and cache storage adapter."""

import json
import logging
from datetime import datetime
from pathlib import Path

from tardis.core.location import Location

logger = logging.getLogger(__name__)


class SettingsStore:
    """
    JSON file holding everything that survives a restart.

    Each setter writes the whole file straight away; last writer wins.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self._data = self._load()

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Settings file {self.path} is unreadable, starting fresh: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Settings file {self.path} does not hold an object, starting fresh")
            return {}
        return data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2))

    def _set(self, key: str, value) -> None:
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value
        self._save()

    # Calendars

    def get_selected_calendars(self) -> dict[str, str]:
        """Calendar title -> calendar type for every calendar shown."""
        value = self._data.get("selected_calendars")
        return dict(value) if isinstance(value, dict) else {}

    def set_selected_calendars(self, calendars: dict[str, str]) -> None:
        self._set("selected_calendars", dict(calendars))

    def has_calendar_selection(self) -> bool:
        return "selected_calendars" in self._data

    # Location

    def get_last_location(self) -> Location | None:
        value = self._data.get("last_location")
        if not value:
            return None
        try:
            return Location.from_dict(value)
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Ignoring malformed stored location: {value!r}")
            return None

    def set_last_location(self, location: Location | None) -> None:
        self._set("last_location", location.to_dict() if location else None)

    def get_location_authorized(self) -> bool:
        return bool(self._data.get("location_authorized", False))

    def set_location_authorized(self, authorized: bool) -> None:
        self._set("location_authorized", authorized)

    # Solar days

    def get_solar_days_backup(self) -> dict | None:
        """Raw backup payload; decoding and version checks belong to the caller."""
        return self._data.get("solar_days_backup")

    def set_solar_days_backup(self, payload: dict) -> None:
        self._set("solar_days_backup", payload)

    def get_missing_solar_days(self) -> int:
        try:
            return int(self._data.get("missing_solar_days", 0))
        except (TypeError, ValueError):
            return 0

    def set_missing_solar_days(self, count: int) -> None:
        self._set("missing_solar_days", count)

    # Network

    def get_internet_down_since(self) -> datetime | None:
        value = self._data.get("internet_down_since")
        if not value:
            return None
        try:
            return datetime.fromisoformat(value)
        except (TypeError, ValueError):
            return None

    def set_internet_down_since(self, since: datetime | None) -> None:
        self._set("internet_down_since", since.isoformat() if since else None)

    # First run

    def is_first_run(self) -> bool:
        return not self._data.get("launched", False)

    def mark_launched(self) -> None:
        self._set("launched", True)
