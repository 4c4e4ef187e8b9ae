"""The running app: collaborators wired together and driven by timers.

Everything runs on one asyncio event loop. Blocking I/O goes through
asyncio.to_thread and is awaited before shared state changes. Every
scheduled job is a coroutine so APScheduler runs it on the loop itself.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from .adapters.icalpal import IcalPalAdapter
from .adapters.location import FixedLocationService, IpLocationService
from .adapters.network import NetworkMonitor
from .adapters.settings_store import SettingsStore
from .adapters.sunrise_sunset import SunriseSunsetClient
from .config import STATE_FILE, Config
from .core.flags import StateFlags, StateInputs, compute_flags
from .core.timeline import Timeline
from .event_manager import EventManager
from .location_manager import LocationTracker
from .render import render_screen
from .solar_manager import SolarDayCache

logger = logging.getLogger(__name__)

TICK_SECONDS = 1
RECENTER_SECONDS = 0.04  # 25 frames per second
INACTIVITY_SECONDS = 60
LOCATION_CHECK_MINUTES = 15

TICK_JOB_ID = "tick"
RECENTER_JOB_ID = "recenter"
INACTIVITY_JOB_ID = "inactivity"
NETWORK_JOB_ID = "network_probe"
CALENDAR_JOB_ID = "calendar_poll"
LOCATION_JOB_ID = "location_check"


class TardisApp:
    """
    Application state, explicitly constructed and passed around.

    Call start() from inside a running event loop and shutdown() when done.
    """

    def __init__(
        self,
        config: Config,
        store: SettingsStore,
        timeline: Timeline,
        events: EventManager,
        solar: SolarDayCache,
        location: LocationTracker,
        network: NetworkMonitor,
        scheduler,
        tz=None,
        clock: Callable[[], datetime] | None = None,
        on_render: Callable[[str], None] | None = None,
    ):
        self.config = config
        self.store = store
        self.timeline = timeline
        self.events = events
        self.solar = solar
        self.location = location
        self.network = network
        self.scheduler = scheduler
        self.tz = tz
        self._clock = clock or (lambda: datetime.now(tz))
        self.on_render = on_render
        self.first_run = store.is_first_run()
        self.recentering = False
        self._current_day = timeline.now.date()
        solar.add_listener(lambda _days: self.render())

    @classmethod
    def build(cls, config: Config, store: SettingsStore | None = None, on_render=None) -> "TardisApp":
        """Wire up the real adapters from configuration."""
        tz = ZoneInfo(config.timezone)
        store = store or SettingsStore(STATE_FILE)
        if not store.has_calendar_selection() and config.calendars:
            store.set_selected_calendars(config.calendars)

        scheduler = AsyncIOScheduler(timezone=config.timezone)
        timeline = Timeline.from_config(config, datetime.now(tz))

        if config.location_source == "ip":
            location_service = IpLocationService()
        else:
            location_service = FixedLocationService(config.latitude, config.longitude)
        location = LocationTracker(location_service, store)

        solar = SolarDayCache(
            SunriseSunsetClient(config.solar_api_url, tz=tz),
            store,
            location.location,
            window=lambda: (timeline.min_day, timeline.max_day),
            scheduler=scheduler,
            tz=tz,
        )
        location.add_move_listener(solar.on_location_changed)

        events = EventManager(IcalPalAdapter(tz=tz, timeout=config.icalpal_timeout), store, timeline, tz=tz)
        network = NetworkMonitor(config.network_probe_url, down_since=store.get_internet_down_since())

        return cls(config, store, timeline, events, solar, location, network, scheduler, tz=tz, on_render=on_render)

    # Lifecycle

    async def start(self) -> None:
        if self.first_run:
            logger.info("First launch - calendars need to be selected in settings")
            self.store.mark_launched()

        self.scheduler.add_job(self.tick, IntervalTrigger(seconds=TICK_SECONDS), id=TICK_JOB_ID)
        self.scheduler.add_job(
            self.probe_network,
            IntervalTrigger(seconds=self.config.network_probe_seconds),
            id=NETWORK_JOB_ID,
        )
        self.scheduler.add_job(
            self.events.refresh,
            IntervalTrigger(seconds=self.config.calendar_poll_seconds),
            id=CALENDAR_JOB_ID,
        )
        self.scheduler.add_job(
            self.location.check,
            IntervalTrigger(minutes=LOCATION_CHECK_MINUTES),
            id=LOCATION_JOB_ID,
        )
        self.scheduler.start()
        logger.info("Scheduler started")

        await self.update_everything()

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")

    async def update_everything(self) -> None:
        """Refresh location, solar days and events, in that order."""
        moved = await self.location.check()
        if not moved:
            await self.solar.refresh()
        await self.events.refresh()
        self.render()

    # Timers

    async def tick(self) -> None:
        """Advance the clock; once per new day, refresh everything."""
        now = self._clock()
        self.timeline.update_now(now)
        self.events.reposition()

        if now.date() != self._current_day:
            logger.info(f"New day: {now.date()}")
            self._current_day = now.date()
            await self.events.refresh()
            await self.solar.refresh()

        self.render()

    async def probe_network(self) -> None:
        is_up = await asyncio.to_thread(self.network.probe)
        if self.network.update(is_up, self._clock()):
            self.store.set_internet_down_since(self.network.down_since)
            await self.solar.on_network_changed(is_up)

    # Zoom

    def on_drag(self, start_x: float, end_x: float) -> bool:
        """One step of the one-finger zoom. User interaction stops any recentering."""
        self.stop_recenter()
        self._remove_job(INACTIVITY_JOB_ID)
        changed = self.timeline.drag(start_x, end_x)
        if changed:
            self.events.reposition()
        return changed

    def on_drag_end(self) -> None:
        """Start the inactivity countdown; when it runs out the zoom drifts back."""
        self.scheduler.add_job(
            self.start_recenter,
            DateTrigger(run_date=self._clock() + timedelta(seconds=INACTIVITY_SECONDS)),
            id=INACTIVITY_JOB_ID,
            replace_existing=True,
        )

    async def start_recenter(self) -> None:
        self.recentering = True
        self.scheduler.add_job(
            self.recenter_frame,
            IntervalTrigger(seconds=RECENTER_SECONDS),
            id=RECENTER_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    async def recenter_frame(self) -> None:
        self.recenter_step()

    def recenter_step(self) -> bool:
        """One frame of recentering. Returns False once the span has settled."""
        if not self.timeline.recenter_tick():
            self.stop_recenter()
            return False
        self.events.reposition()
        return True

    def stop_recenter(self) -> None:
        self.recentering = False
        self._remove_job(RECENTER_JOB_ID)

    def _remove_job(self, job_id: str) -> None:
        if self.scheduler.get_job(job_id) is not None:
            self.scheduler.remove_job(job_id)

    # Other interaction

    def on_background_tap(self) -> None:
        self.events.close_all()

    def on_event_tap(self, start: datetime) -> bool:
        return self.events.toggle(start)

    def on_sent_to_background(self) -> None:
        """Leaving the screen resets the zoom."""
        self.stop_recenter()
        self.timeline.reset_zoom()
        self.events.reposition()

    async def on_resume(self) -> None:
        """Coming back to the screen catches up on anything missed."""
        self.timeline.update_now(self._clock())
        await self.update_everything()

    # State

    def state_inputs(self) -> StateInputs:
        return StateInputs(
            now=self._clock(),
            network_down=self.network.is_down,
            network_down_since=self.network.down_since,
            calendar_permission_denied=self.events.permission_denied,
            calendars_available=not self.events.no_calendars_available,
            calendars_selected=not self.events.no_calendars_selected,
            location_authorized=self.location.authorized,
            missing_solar_days=self.store.get_missing_solar_days(),
            solar_days_available=self.solar.available,
            first_run=self.first_run,
        )

    def flags(self) -> StateFlags:
        return compute_flags(self.state_inputs())

    def screen(self) -> str:
        return render_screen(
            self.timeline,
            self.events.events,
            self.solar.solar_days,
            self.flags(),
            expanded=self.events.expanded,
            width=self.config.render_width,
        )

    def render(self) -> None:
        if self.on_render is not None:
            self.on_render(self.screen())
