"""Solar day domain logic - sunrise/sunset markers. No I/O."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterator

from tardis.errors import BackupDecodeError

BACKUP_VERSION = 1


@dataclass(frozen=True)
class SolarDay:
    """Sunrise and sunset for one local day."""

    date: date
    sunrise: datetime
    sunset: datetime

    def shifted_to(self, target: date) -> "SolarDay":
        """Copy of this day's times moved onto another date."""
        offset = timedelta(days=(target - self.date).days)
        return SolarDay(date=target, sunrise=self.sunrise + offset, sunset=self.sunset + offset)

    def is_daytime(self, t: datetime) -> bool:
        return self.sunrise <= t < self.sunset

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "sunrise": self.sunrise.isoformat(),
            "sunset": self.sunset.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SolarDay":
        return cls(
            date=date.fromisoformat(data["date"]),
            sunrise=datetime.fromisoformat(data["sunrise"]),
            sunset=datetime.fromisoformat(data["sunset"]),
        )


def date_range(start: date, end: date) -> Iterator[date]:
    """Every day from start through end, inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def is_contiguous(days: list[SolarDay]) -> bool:
    """True when dates ascend one day at a time with no gaps or repeats."""
    return all((b.date - a.date).days == 1 for a, b in zip(days, days[1:]))


def covers(days: list[SolarDay], min_day: date, max_day: date) -> bool:
    """True when days is a gapless run spanning at least [min_day, max_day]."""
    if not days or not is_contiguous(days):
        return False
    return days[0].date <= min_day and days[-1].date >= max_day


def fill_gaps(known: list[SolarDay], min_day: date, max_day: date) -> tuple[list[SolarDay], list[date]]:
    """
    Build a contiguous run over [min_day, max_day] from whatever days are known.

    Later entries in known win over earlier ones for the same date. Missing
    days are padded with the nearest earlier known day (or the earliest known
    day, when nothing earlier exists) shifted onto the missing date. Returns
    the days and the dates that are padding.
    """
    by_date = {d.date: d for d in known}
    if not by_date:
        return [], []

    ordered = sorted(by_date.values(), key=lambda d: d.date)
    result = []
    padded = []
    last_known = None
    for day in date_range(min_day, max_day):
        if day in by_date:
            last_known = by_date[day]
            result.append(last_known)
            continue
        source = last_known
        if source is None:
            earlier = [d for d in ordered if d.date < day]
            source = earlier[-1] if earlier else ordered[0]
        result.append(source.shifted_to(day))
        padded.append(day)
    return result, padded


def next_midnight(now: datetime, tz: tzinfo | None = None) -> datetime | None:
    """Start of the next local day, or None if it cannot be computed."""
    tz = tz or now.tzinfo
    local = now.astimezone(tz) if tz else now
    try:
        tomorrow = local.date() + timedelta(days=1)
    except OverflowError:
        return None
    return datetime.combine(tomorrow, time.min, tzinfo=tz)


def encode_backup(days: list[SolarDay]) -> dict:
    """Versioned payload for persisting solar days."""
    return {"version": BACKUP_VERSION, "solar_days": [d.to_dict() for d in days]}


def decode_backup(payload: dict | None) -> list[SolarDay]:
    """Inverse of encode_backup. Raises BackupDecodeError on anything unexpected."""
    if payload is None:
        raise BackupDecodeError("No solar day backup exists")
    if not isinstance(payload, dict):
        raise BackupDecodeError(f"Backup is a {type(payload).__name__}, not an object")
    version = payload.get("version")
    if version != BACKUP_VERSION:
        raise BackupDecodeError(f"Unsupported backup version: {version!r}")
    try:
        days = [SolarDay.from_dict(item) for item in payload["solar_days"]]
    except (KeyError, TypeError, ValueError) as e:
        raise BackupDecodeError(f"Backup would not decode: {e}") from e
    if not days:
        raise BackupDecodeError("Backup is empty")
    return sorted(days, key=lambda d: d.date)
