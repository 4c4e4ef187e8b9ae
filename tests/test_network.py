"""Tests for the network monitor."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import requests

from tardis.adapters.network import NetworkMonitor

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


class TestProbe:
    def test_reachable(self):
        session = MagicMock()
        session.head.return_value.status_code = 204
        assert NetworkMonitor(session=session).probe() is True

    def test_server_error_counts_as_down(self):
        session = MagicMock()
        session.head.return_value.status_code = 503
        assert NetworkMonitor(session=session).probe() is False

    def test_connection_error(self):
        session = MagicMock()
        session.head.side_effect = requests.ConnectionError("offline")
        assert NetworkMonitor(session=session).probe() is False


class TestUpdate:
    def test_going_down_records_time(self):
        monitor = NetworkMonitor(session=MagicMock())
        assert monitor.update(False, NOW) is True
        assert monitor.is_down is True
        assert monitor.down_since == NOW

    def test_staying_down_keeps_first_time(self):
        monitor = NetworkMonitor(session=MagicMock())
        monitor.update(False, NOW)
        assert monitor.update(False, NOW + timedelta(hours=1)) is False
        assert monitor.down_since == NOW

    def test_coming_back_clears_time(self):
        monitor = NetworkMonitor(session=MagicMock(), down_since=NOW)
        assert monitor.is_down is True
        assert monitor.update(True, NOW + timedelta(hours=3)) is True
        assert monitor.is_down is False
        assert monitor.down_since is None

    def test_staying_up(self):
        monitor = NetworkMonitor(session=MagicMock())
        assert monitor.update(True, NOW) is False
