"""Solar times service interface."""

from datetime import date
from typing import Protocol

from tardis.core.solar import SolarDay


class SolarService(Protocol):
    """Interface for looking up sunrise and sunset for a place and day."""

    def fetch_solar_day(self, latitude: float, longitude: float, day: date) -> SolarDay:
        """Fetch one day. Raises NetworkUnavailableError or SolarFetchError on failure."""
        ...
