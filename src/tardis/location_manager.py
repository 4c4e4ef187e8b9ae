"""Tracks the device location and forwards only significant moves."""

import asyncio
import logging
from typing import Awaitable, Callable

from .adapters.settings_store import SettingsStore
from .config import DEFAULT_LATITUDE, DEFAULT_LONGITUDE
from .core.location import Location, is_significant_change
from .ports.location_service import LocationService

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = Location(DEFAULT_LATITUDE, DEFAULT_LONGITUDE)


class LocationTracker:
    """
    Polls a LocationService and remembers the result.

    Listeners hear about moves of SIGNIFICANT_CHANGE_METERS or more, and
    about authorization being granted or withdrawn.
    """

    def __init__(self, service: LocationService, store: SettingsStore):
        self.service = service
        self.store = store
        self.location = store.get_last_location() or DEFAULT_LOCATION
        self.authorized = store.get_location_authorized()
        self._move_listeners: list[Callable[[Location], Awaitable[None]]] = []

    def add_move_listener(self, listener: Callable[[Location], Awaitable[None]]) -> None:
        self._move_listeners.append(listener)

    async def check(self) -> bool:
        """Look up the location. Returns True if listeners were told about a move."""
        authorized = self.service.is_authorized()
        if authorized != self.authorized:
            logger.info(f"Location authorization changed: {authorized}")
            self.authorized = authorized
            self.store.set_location_authorized(authorized)

        if authorized:
            found = await asyncio.to_thread(self.service.current_location)
            if found is None:
                return False
        else:
            found = DEFAULT_LOCATION

        if found == self.location or not is_significant_change(self.location, found):
            return False

        logger.info(f"Location moved to {found.latitude:.4f}, {found.longitude:.4f}")
        self.location = found
        self.store.set_last_location(found)
        for listener in self._move_listeners:
            await listener(found)
        return True
