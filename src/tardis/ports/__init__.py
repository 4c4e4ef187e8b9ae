"""Ports - interfaces/protocols for external dependencies."""

from .calendar_repo import CalendarRepository
from .solar_service import SolarService
from .location_service import LocationService

__all__ = [
    "CalendarRepository",
    "SolarService",
    "LocationService",
]
