"""Keeps an up-to-date, gapless run of solar days for the background.

Days are fetched one at a time, in order, from the day after the last good
cached entry through the last day the timeline can show. When a fetch fails
the cache is rebuilt from the persisted backup, padded where the backup runs
short, and the refresh is retried at the next local midnight.
"""

import asyncio
import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable

from apscheduler.triggers.date import DateTrigger

from .adapters.settings_store import SettingsStore
from .core.location import Location
from .core.solar import (
    SolarDay,
    covers,
    date_range,
    decode_backup,
    encode_backup,
    fill_gaps,
    next_midnight,
)
from .errors import BackupDecodeError, NetworkUnavailableError, SolarFetchError
from .ports.solar_service import SolarService

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "solar_refresh"


class SolarDayCache:
    """Date-indexed sunrise/sunset markers with a persisted fallback."""

    def __init__(
        self,
        service: SolarService,
        store: SettingsStore,
        location: Location,
        window: Callable[[], tuple[date, date]],
        scheduler=None,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.service = service
        self.store = store
        self.location = location
        self.window = window
        self.scheduler = scheduler
        self.tz = tz
        self._clock = clock or (lambda: datetime.now(tz))
        self.solar_days: list[SolarDay] = []
        # Dates whose entries are copies of a neighbour or belong to an old
        # location, not real data for here.
        self.padded_dates: set[date] = set()
        # Set once the location moves; cleared by the next full success.
        self._backup_stale = False
        self._lock = asyncio.Lock()
        self._listeners: list[Callable[[list[SolarDay]], None]] = []

    @property
    def available(self) -> bool:
        return bool(self.solar_days)

    def add_listener(self, listener: Callable[[list[SolarDay]], None]) -> None:
        self._listeners.append(listener)

    def day_for(self, target: date) -> SolarDay | None:
        for day in self.solar_days:
            if day.date == target:
                return day
        return None

    def is_complete(self, min_day: date, max_day: date) -> bool:
        """True when real data covers [min_day, max_day] without gaps."""
        if not covers(self.solar_days, min_day, max_day):
            return False
        return not any(min_day <= d <= max_day for d in self.padded_dates)

    def _reliable_days(self, min_day: date) -> list[SolarDay]:
        """Cached days from min_day on, cut short at the first gap or padded day."""
        days = []
        for day in self.solar_days:
            if day.date < min_day:
                continue
            if day.date in self.padded_dates:
                break
            if days and (day.date - days[-1].date).days != 1:
                break
            days.append(day)
        if days and days[0].date > min_day:
            return []
        return days

    async def refresh(self, refetch_all: bool = False) -> bool:
        """Bring the cache up to date for the timeline's current window."""
        min_day, max_day = self.window()
        return await self.ensure_coverage(min_day, max_day, refetch_all=refetch_all)

    async def ensure_coverage(self, min_day: date, max_day: date, refetch_all: bool = False) -> bool:
        """
        Guarantee a contiguous run of solar days over [min_day, max_day].

        Returns True if every missing day was fetched, False if the backup
        had to be used.
        """
        async with self._lock:
            days = [] if refetch_all else self._reliable_days(min_day)
            first = days[-1].date + timedelta(days=1) if days else min_day

            if first > max_day:
                # Nothing to fetch; just drop expired days.
                self.solar_days = [d for d in self.solar_days if d.date >= min_day]
                self.padded_dates = {d for d in self.padded_dates if d >= min_day}
                return True

            location = self.location
            logger.info(f"Updating solar days {first} to {max_day} for {location.latitude}, {location.longitude}")
            fetched = []
            for day in date_range(first, max_day):
                try:
                    solar_day = await asyncio.to_thread(
                        self.service.fetch_solar_day, location.latitude, location.longitude, day
                    )
                except (NetworkUnavailableError, SolarFetchError) as e:
                    logger.warning(f"Tried to fetch solar day {day} but ran into an error: {e}")
                    self._fall_back(days + fetched, min_day, max_day)
                    return False
                fetched.append(solar_day)

            self._apply(days + fetched)
            return True

    def _apply(self, days: list[SolarDay]) -> None:
        self.solar_days = days
        self.padded_dates = set()
        self._backup_stale = False
        self.store.set_solar_days_backup(encode_backup(days))
        self.store.set_missing_solar_days(0)
        logger.info(f"Solar days now cover {days[0].date} to {days[-1].date}")
        self._arm_refresh()
        self._notify()

    def _fall_back(self, fresh: list[SolarDay], min_day: date, max_day: date) -> None:
        """Rebuild the cache from the backup plus whatever was fetched this round."""
        try:
            backup = decode_backup(self.store.get_solar_days_backup())
        except BackupDecodeError as e:
            logger.warning(f"Trying to use solar days backup - {e}")
            real = {d.date for d in self.solar_days if d.date not in self.padded_dates}
            missing = sum(1 for day in date_range(min_day, max_day) if day not in real)
            self.store.set_missing_solar_days(missing)
            self._arm_refresh()
            return

        days, padded = fill_gaps(backup + fresh, min_day, max_day)
        if self._backup_stale:
            # The backup holds another location's times; only this run's fetches are real.
            real = {d.date for d in fresh}
            padded = [d.date for d in days if d.date not in real]
        self.solar_days = days
        self.padded_dates = set(padded)
        self.store.set_missing_solar_days(len(padded))
        logger.info(f"Using solar days backup data ({len(padded)} days padded)")
        self._arm_refresh()
        self._notify()

    def _arm_refresh(self) -> None:
        """Schedule the next refresh for local midnight."""
        if self.scheduler is None:
            return
        run_at = next_midnight(self._clock(), self.tz)
        if run_at is None:
            logger.warning("No next midnight to schedule a solar refresh at")
            return
        self.scheduler.add_job(
            self.refresh,
            DateTrigger(run_date=run_at),
            id=REFRESH_JOB_ID,
            replace_existing=True,
        )
        logger.debug(f"Next solar refresh at {run_at.isoformat()}")

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self.solar_days)

    async def on_location_changed(self, location: Location) -> None:
        """A new location invalidates every cached day."""
        self.location = location
        self.padded_dates = {d.date for d in self.solar_days}
        self._backup_stale = True
        await self.refresh(refetch_all=True)

    async def on_network_changed(self, is_up: bool) -> None:
        """After the network returns, refetch only if coverage is missing."""
        if not is_up:
            return
        min_day, max_day = self.window()
        if not self.is_complete(min_day, max_day):
            await self.ensure_coverage(min_day, max_day)
