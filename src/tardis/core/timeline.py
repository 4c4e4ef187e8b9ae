"""Timeline domain logic - maps wall-clock time to screen position. No I/O."""

import logging
from datetime import date, datetime, timedelta

logger = logging.getLogger(__name__)

HOUR = 60 * 60
DAY = 24 * HOUR

# Horizontal position of "now", in unit space.
NOW_LOCATION = 0.2
# Drags closer to "now" than this make the zoom jump wildly.
DRAG_MARGIN = 0.1

RECENTER_RATE = 0.02
RECENTER_EPSILON = 1.0  # seconds

# Low-priority events start shrinking once more than 8 hours are on screen.
SHRINK_START_SPAN = 8 * HOUR
SHRINK_TARGET = 0.35


class Timeline:
    """
    The visible time window.

    Holds the leading (left edge) and trailing (right edge) instants and maps
    instants to a normalized [0, 1] horizontal position. Spans are in seconds.
    """

    def __init__(
        self,
        now: datetime,
        default_span: float = 6 * HOUR,
        min_span: float = 2 * HOUR,
        max_span: float = 7 * DAY,
    ):
        if not 0 < min_span <= default_span <= max_span:
            raise ValueError(
                f"Invalid spans: need 0 < min ({min_span}) <= default ({default_span}) <= max ({max_span})"
            )
        self.default_span = default_span
        self.min_span = min_span
        self.max_span = max_span
        self.now = now
        self.leading_time, self.trailing_time = self._anchored(default_span)

    @classmethod
    def from_config(cls, config, now: datetime) -> "Timeline":
        return cls(
            now,
            default_span=config.default_span_hours * HOUR,
            min_span=config.min_span_hours * HOUR,
            max_span=config.max_span_days * DAY,
        )

    @property
    def span(self) -> float:
        """Seconds currently on screen."""
        return (self.trailing_time - self.leading_time).total_seconds()

    @property
    def now_x(self) -> float:
        return self.unit_x(self.now)

    @property
    def min_day(self) -> date:
        """Earliest local day the window can reach at maximum zoom."""
        return (self.now - timedelta(seconds=NOW_LOCATION * self.max_span)).date()

    @property
    def max_day(self) -> date:
        """Latest local day the window can reach at maximum zoom."""
        return (self.now + timedelta(seconds=(1 - NOW_LOCATION) * self.max_span)).date()

    def _anchored(self, span: float) -> tuple[datetime, datetime]:
        leading = self.now - timedelta(seconds=NOW_LOCATION * span)
        return leading, leading + timedelta(seconds=span)

    def update_now(self, now: datetime) -> None:
        """Advance the clock, sliding the window so now stays put on screen."""
        self.now = now
        self.leading_time, self.trailing_time = self._anchored(self.span)

    def unit_x(self, t: datetime) -> float:
        """Horizontal position of an instant, clamped to [0, 1]."""
        x = (t - self.leading_time).total_seconds() / self.span
        return min(max(x, 0.0), 1.0)

    def time_at(self, x: float) -> datetime:
        """Instant shown at a horizontal position."""
        return self.leading_time + timedelta(seconds=x * self.span)

    def set_trailing(self, new_trailing: datetime) -> bool:
        """
        Move the right edge of the window.

        Returns False and leaves the window alone if the new span would fall
        outside [min_span, max_span].
        """
        new_span = (new_trailing - self.leading_time).total_seconds()
        if not self.min_span <= new_span <= self.max_span:
            logger.debug(f"Rejected span of {new_span:.0f}s")
            return False
        self.trailing_time = new_trailing
        return True

    def reset_zoom(self) -> None:
        self.leading_time, self.trailing_time = self._anchored(self.default_span)

    def drag(self, start_x: float, end_x: float) -> bool:
        """
        One-finger zoom: move the instant under start_x to end_x.

        Both points must be on the future side of now, clear of DRAG_MARGIN.
        """
        limit = NOW_LOCATION + DRAG_MARGIN
        if start_x <= limit or end_x <= limit:
            return False
        new_span = self.span * start_x / end_x
        return self.set_trailing(self.leading_time + timedelta(seconds=new_span))

    def recenter_tick(self) -> bool:
        """
        One frame of the zoom's return to the default span.

        Returns False once the span is within RECENTER_EPSILON of the default.
        """
        gap = self.default_span - self.span
        if abs(gap) <= RECENTER_EPSILON:
            return False
        new_span = self.span + RECENTER_RATE * gap
        return self.set_trailing(self.leading_time + timedelta(seconds=new_span))

    def shrink_factor(self) -> float:
        """Scale for low-priority events; they shrink as the calendar zooms out."""
        span = self.span
        if span < SHRINK_START_SPAN:
            return 1.0
        if span < self.max_span:
            return (SHRINK_TARGET - 1) * (span - SHRINK_START_SPAN) / (self.max_span - SHRINK_START_SPAN) + 1
        return SHRINK_TARGET
