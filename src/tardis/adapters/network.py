"""Network monitor adapter - HTTP reachability probe."""

import logging
from datetime import datetime

import requests

logger = logging.getLogger(__name__)

PROBE_URL = "https://www.google.com/generate_204"


class NetworkMonitor:
    """Tracks whether the internet is reachable and since when it has not been."""

    def __init__(
        self,
        url: str = PROBE_URL,
        timeout: float = 5,
        session: requests.Session | None = None,
        down_since: datetime | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        self.down_since = down_since
        self.is_down = down_since is not None

    def probe(self) -> bool:
        """Return True if the probe URL answers."""
        try:
            resp = self._session.head(self.url, timeout=self.timeout, allow_redirects=True)
            return resp.status_code < 500
        except requests.RequestException as e:
            logger.debug(f"Network probe failed: {e}")
            return False

    def update(self, is_up: bool, now: datetime) -> bool:
        """Record a probe result. Returns True if the state changed."""
        was_down = self.is_down
        self.is_down = not is_up
        if self.is_down and not was_down:
            self.down_since = now
            logger.info("Internet connection lost")
            return True
        if was_down and not self.is_down:
            self.down_since = None
            logger.info("Internet connection restored")
            return True
        return False
