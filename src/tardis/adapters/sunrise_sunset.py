"""sunrise-sunset.org adapter - HTTP client for solar times."""

import logging
from datetime import date, datetime, tzinfo

import requests

from tardis.core.solar import SolarDay
from tardis.errors import NetworkUnavailableError, SolarFetchError

logger = logging.getLogger(__name__)

API_URL = "https://api.sunrise-sunset.org/json"


class SunriseSunsetClient:
    """
    Client for the sunrise-sunset.org API.

    Implements SolarService protocol. An unreachable host raises
    NetworkUnavailableError; bad HTTP status or payload raises SolarFetchError.
    """

    def __init__(
        self,
        api_url: str = API_URL,
        tz: tzinfo | None = None,
        timeout: float = 6,
        session: requests.Session | None = None,
    ):
        self.api_url = api_url
        self.tz = tz
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch_solar_day(self, latitude: float, longitude: float, day: date) -> SolarDay:
        """Fetch sunrise and sunset for one day at a location."""
        try:
            resp = self._session.get(
                self.api_url,
                params={"lat": latitude, "lng": longitude, "date": day.isoformat(), "formatted": 0},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except (requests.ConnectionError, requests.Timeout) as e:
            raise NetworkUnavailableError(f"Could not reach {self.api_url}: {e}") from e
        except requests.RequestException as e:
            raise SolarFetchError(f"Solar times request failed for {day}: {e}") from e
        except ValueError as e:
            raise SolarFetchError(f"Solar times response for {day} is not JSON: {e}") from e

        if not isinstance(payload, dict) or payload.get("status") != "OK":
            status = payload.get("status") if isinstance(payload, dict) else payload
            raise SolarFetchError(f"Solar times API returned {status!r} for {day}")

        results = payload.get("results") or {}
        try:
            sunrise = datetime.fromisoformat(results["sunrise"])
            sunset = datetime.fromisoformat(results["sunset"])
        except (KeyError, TypeError, ValueError) as e:
            raise SolarFetchError(f"Solar times for {day} would not parse: {e}") from e

        if self.tz:
            sunrise = sunrise.astimezone(self.tz)
            sunset = sunset.astimezone(self.tz)

        logger.debug(f"Fetched solar day {day}: sunrise {sunrise:%H:%M}, sunset {sunset:%H:%M}")
        return SolarDay(date=day, sunrise=sunrise, sunset=sunset)
