"""Location adapters - fixed coordinates or IP geolocation."""

import logging

import requests

from tardis.core.location import Location

logger = logging.getLogger(__name__)

IP_LOOKUP_URL = "https://ipapi.co/json/"


class FixedLocationService:
    """
    Location from configuration.

    Implements LocationService protocol. Always authorized.
    """

    def __init__(self, latitude: float, longitude: float):
        self.location = Location(latitude, longitude)

    def is_authorized(self) -> bool:
        return True

    def current_location(self) -> Location | None:
        return self.location


class IpLocationService:
    """
    Coarse location from the public IP address.

    Implements LocationService protocol.
    """

    def __init__(
        self,
        url: str = IP_LOOKUP_URL,
        authorized: bool = True,
        timeout: float = 6,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.authorized = authorized
        self.timeout = timeout
        self._session = session or requests.Session()

    def is_authorized(self) -> bool:
        return self.authorized

    def current_location(self) -> Location | None:
        if not self.authorized:
            return None
        try:
            resp = self._session.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
            return Location(float(data["latitude"]), float(data["longitude"]))
        except requests.RequestException as e:
            logger.warning(f"IP location lookup failed: {e}")
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"IP location response would not parse: {e}")
        return None
