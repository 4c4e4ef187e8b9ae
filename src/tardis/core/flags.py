"""State flags - booleans that decide which banners and warnings show.

Computed from an explicit snapshot of inputs each time they are needed;
nothing here is cached.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

# The connection must stay down this long before the user is told about it,
# so trivial interruptions don't produce a warning.
NETWORK_DOWN_DEBOUNCE = timedelta(hours=2)
# Missing this many solar days makes the background look wrong.
MISSING_SOLAR_DAYS_THRESHOLD = 4


@dataclass(frozen=True)
class StateInputs:
    """Snapshot of everything the flags depend on."""

    now: datetime
    network_down: bool = False
    network_down_since: datetime | None = None
    calendar_permission_denied: bool = False
    calendars_available: bool = True
    calendars_selected: bool = True
    location_authorized: bool = True
    missing_solar_days: int = 0
    solar_days_available: bool = False
    first_run: bool = False


@dataclass(frozen=True)
class StateFlags:
    no_permission_for_calendar: bool
    no_calendars_available: bool
    no_calendars_selected: bool
    internet_is_down: bool
    authorized_for_location_access: bool
    show_missing_solar_days_warning: bool
    solar_days_available: bool
    show_settings: bool
    show_warning: bool


def internet_is_down(inputs: StateInputs) -> bool:
    """Down, and down for longer than the debounce period."""
    if not inputs.network_down:
        return False
    since = inputs.network_down_since or inputs.now
    return inputs.now - since >= NETWORK_DOWN_DEBOUNCE


def compute_flags(inputs: StateInputs) -> StateFlags:
    no_permission = inputs.calendar_permission_denied
    no_calendars = not inputs.calendars_available
    none_selected = not inputs.calendars_selected
    down = internet_is_down(inputs)
    missing_warning = inputs.missing_solar_days >= MISSING_SOLAR_DAYS_THRESHOLD

    return StateFlags(
        no_permission_for_calendar=no_permission,
        no_calendars_available=no_calendars,
        no_calendars_selected=none_selected,
        internet_is_down=down,
        authorized_for_location_access=inputs.location_authorized,
        show_missing_solar_days_warning=missing_warning,
        solar_days_available=inputs.solar_days_available,
        show_settings=inputs.first_run,
        show_warning=(
            no_permission
            or no_calendars
            or none_selected
            or down
            or not inputs.location_authorized
            or missing_warning
        ),
    )


def warning_message(flags: StateFlags) -> str | None:
    """Banner text for the most important active warning, if any."""
    if not flags.show_warning:
        return None
    if flags.no_permission_for_calendar:
        return "This calendar needs permission to read your calendars."
    if flags.no_calendars_available:
        return "There are no calendars to show. Add one in the Calendar app."
    if flags.no_calendars_selected:
        return "No calendars are selected. Ask a caregiver to choose some in settings."
    if flags.internet_is_down:
        return "The internet connection has been down for a while. Sunrise and sunset times may be off."
    if not flags.authorized_for_location_access:
        return "Location access is off. Sunrise and sunset times are for a default location."
    return "Some sunrise and sunset times are missing. The background colors may be wrong."
