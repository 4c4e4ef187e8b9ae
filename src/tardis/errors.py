"""Error types shared across the app.

None of these are fatal: the screen always renders from whatever data is
available. Permission and configuration errors become persistent banners,
everything else is recovered from cached data.
"""


class TardisError(Exception):
    """Base class for TARDIS errors."""

    pass


class CalendarPermissionError(TardisError):
    """Raised when the calendar store refuses access."""

    pass


class NoCalendarsConfiguredError(TardisError):
    """Raised when the calendar store has no calendars at all."""

    pass


class NoCalendarsSelectedError(TardisError):
    """Raised when none of the store's calendars are selected for display."""

    pass


class NetworkUnavailableError(TardisError):
    """Raised when a network request cannot reach its host."""

    pass


class SolarFetchError(TardisError):
    """Raised when sunrise/sunset times for a day cannot be fetched."""

    pass


class BackupDecodeError(TardisError):
    """Raised when the solar-day backup is missing or unreadable."""

    pass
