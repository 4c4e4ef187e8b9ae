"""Adapters - I/O implementations of ports."""

from .icalpal import IcalPalAdapter
from .sunrise_sunset import SunriseSunsetClient
from .location import FixedLocationService, IpLocationService
from .network import NetworkMonitor
from .settings_store import SettingsStore

__all__ = [
    "IcalPalAdapter",
    "SunriseSunsetClient",
    "FixedLocationService",
    "IpLocationService",
    "NetworkMonitor",
    "SettingsStore",
]
