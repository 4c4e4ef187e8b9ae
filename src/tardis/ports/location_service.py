"""Location service interface."""

from typing import Protocol

from tardis.core.location import Location


class LocationService(Protocol):
    """Interface for finding where the device is."""

    def is_authorized(self) -> bool:
        """Whether the user allows location lookups."""
        ...

    def current_location(self) -> Location | None:
        """Best known location, or None if it cannot be determined."""
        ...
