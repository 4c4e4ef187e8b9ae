"""Functional core - pure business logic with no I/O."""

from .timeline import Timeline
from .solar import SolarDay, covers, fill_gaps, is_contiguous, next_midnight
from .calendar import CalendarInfo, CalendarType, ProjectedEvent, RawEvent, project
from .flags import StateFlags, StateInputs, compute_flags, warning_message
from .location import Location, distance_meters, is_significant_change

__all__ = [
    # Timeline
    "Timeline",
    # Solar
    "SolarDay",
    "covers",
    "fill_gaps",
    "is_contiguous",
    "next_midnight",
    # Calendar
    "CalendarInfo",
    "CalendarType",
    "ProjectedEvent",
    "RawEvent",
    "project",
    # Flags
    "StateFlags",
    "StateInputs",
    "compute_flags",
    "warning_message",
    # Location
    "Location",
    "distance_meters",
    "is_significant_change",
]
