"""Terminal rendering of the calendar screen."""

from datetime import datetime, timedelta

from .core.calendar import ProjectedEvent
from .core.flags import StateFlags, warning_message
from .core.solar import SolarDay
from .core.timeline import HOUR, Timeline

DAY_CHAR = "="
NIGHT_CHAR = "."
UNKNOWN_CHAR = " "
NOW_CHAR = "@"


def _column(x: float, width: int) -> int:
    return min(int(x * width), width - 1)


def background_strip(timeline: Timeline, solar_days: list[SolarDay], width: int) -> str:
    """One character per column: day, night, or unknown when solar data is missing."""
    by_date = {d.date: d for d in solar_days}
    chars = []
    for i in range(width):
        t = timeline.time_at((i + 0.5) / width)
        day = by_date.get(t.date())
        if day is None:
            chars.append(UNKNOWN_CHAR)
        else:
            chars.append(DAY_CHAR if day.is_daytime(t) else NIGHT_CHAR)
    return "".join(chars)


def event_marker(event: ProjectedEvent, shrink: float) -> str:
    # Low-priority events fade to a dot as the calendar zooms out.
    if event.priority >= 3 or shrink >= 0.75:
        return "O"
    return "o" if shrink >= 0.5 else "·"


def _tick_step(span: float) -> timedelta:
    """Widest hour step that still gives eight or fewer ticks; days beyond that."""
    for hours in (1, 2, 3, 6, 12):
        if span / (hours * HOUR) <= 8:
            return timedelta(hours=hours)
    return timedelta(days=1)


def tick_labels(timeline: Timeline, width: int) -> str:
    """Hour labels along the strip, or weekday names once whole days are on screen."""
    step = _tick_step(timeline.span)
    fmt = "%a" if step >= timedelta(days=1) else "%H"
    line = [" "] * width

    tick = timeline.leading_time.replace(hour=0, minute=0, second=0, microsecond=0)
    while tick < timeline.leading_time:
        tick += step

    free_from = 0
    while tick <= timeline.trailing_time:
        label = tick.strftime(fmt)
        col = _column(timeline.unit_x(tick), width)
        if col >= free_from and col + len(label) <= width:
            line[col:col + len(label)] = label
            free_from = col + len(label) + 1
        tick += step
    return "".join(line)


def timeline_strip(timeline: Timeline, events: list[ProjectedEvent], width: int) -> str:
    line = ["-"] * width
    shrink = timeline.shrink_factor()
    for event in events:
        if 0.0 < event.x < 1.0:
            line[_column(event.x, width)] = event_marker(event, shrink)
    line[_column(timeline.now_x, width)] = NOW_CHAR
    line[-1] = ">"
    return "".join(line)


def format_event(event: ProjectedEvent, expanded: bool) -> str:
    day = event.start.strftime("%a")
    text = f"  {day} {event.format_time():5}  {event.title}"
    if expanded:
        end = f" until {event.end.strftime('%H:%M')}" if event.end else ""
        text += f"\n             {event.calendar}{end}"
    return text


def render_screen(
    timeline: Timeline,
    events: list[ProjectedEvent],
    solar_days: list[SolarDay],
    flags: StateFlags,
    expanded: set[datetime] | None = None,
    width: int = 80,
) -> str:
    """The whole screen as text."""
    expanded = expanded or set()
    lines = []

    message = warning_message(flags)
    if message:
        lines.append(f"! {message}")

    lines.append(timeline.now.strftime("%A, %B %d  %H:%M"))
    lines.append(background_strip(timeline, solar_days, width))
    lines.append(timeline_strip(timeline, events, width))
    lines.append(tick_labels(timeline, width))

    visible = [e for e in events if timeline.now <= e.start <= timeline.trailing_time]
    if visible:
        lines.append("")
        lines.extend(format_event(e, e.start in expanded) for e in visible)
    else:
        lines.append("")
        lines.append("  Nothing coming up.")

    return "\n".join(lines)
