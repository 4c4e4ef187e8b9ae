"""TARDIS CLI - visual calendar."""

import asyncio
import json
import logging
import sys
from dataclasses import asdict

import click

from .adapters.settings_store import SettingsStore
from .app import TardisApp
from .config import STATE_FILE, load_config
from .core.calendar import CalendarType

CALENDAR_TYPES = [t.value for t in CalendarType]


def _build_app(on_render=None) -> TardisApp:
    config = load_config()
    return TardisApp.build(config, SettingsStore(STATE_FILE), on_render=on_render)


@click.group()
@click.version_option(package_name="tardis-calendar")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """TARDIS - a timeline calendar for now and what comes next."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


@main.command()
def run():
    """Run the calendar screen in the terminal."""

    def draw(screen: str) -> None:
        click.clear()
        click.echo(screen)

    async def _run() -> None:
        app = _build_app(on_render=draw)
        await app.start()
        try:
            await asyncio.Event().wait()
        finally:
            app.shutdown()

    click.echo("Starting TARDIS calendar...")
    click.echo("Press Ctrl+C to stop")
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        click.echo("\nCalendar stopped.")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show(as_json: bool):
    """Fetch everything once and draw the screen."""
    app = _build_app()
    asyncio.run(app.update_everything())

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "title": e.title,
                        "start": e.start.isoformat(),
                        "end": e.end.isoformat() if e.end else None,
                        "calendar": e.calendar,
                        "priority": e.priority,
                        "color": e.color,
                        "x": round(e.x, 4),
                    }
                    for e in app.events.events
                ],
                indent=2,
            )
        )
    else:
        click.echo(app.screen())


@main.command()
def calendars():
    """List calendars in the calendar store and which are shown."""
    app = _build_app()
    asyncio.run(app.events.refresh())
    selected = app.store.get_selected_calendars()

    if app.events.permission_denied:
        click.echo("Error: no permission to read calendars.", err=True)
        sys.exit(1)

    if not app.events.calendars:
        click.echo("No calendars found.")
        return

    for cal in app.events.calendars:
        cal_type = selected.get(cal.title)
        marker = f"[{cal_type}]" if cal_type else "[ ]"
        click.echo(f"{marker:10} {cal.title}")


@main.command()
@click.argument("assignments", nargs=-1)
@click.option("--clear", is_flag=True, help="Deselect every calendar first")
def select(assignments: tuple[str, ...], clear: bool):
    """Choose calendars to show, as TITLE=TYPE (types: meals, daily, medical, special)."""
    store = SettingsStore(STATE_FILE)
    selected = {} if clear else store.get_selected_calendars()

    for item in assignments:
        title, sep, cal_type = item.partition("=")
        title, cal_type = title.strip(), cal_type.strip().lower()
        if not sep or not title:
            click.echo(f"Error: expected TITLE=TYPE, got {item!r}", err=True)
            sys.exit(1)
        if cal_type not in CALENDAR_TYPES:
            click.echo(f"Error: unknown type {cal_type!r} (choose from {', '.join(CALENDAR_TYPES)})", err=True)
            sys.exit(1)
        selected[title] = cal_type

    store.set_selected_calendars(selected)
    if not selected:
        click.echo("No calendars selected.")
        return
    for title, cal_type in selected.items():
        click.echo(f"  {title}: {cal_type}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def solar(as_json: bool):
    """Show sunrise and sunset for every day the calendar can display."""
    app = _build_app()
    asyncio.run(app.solar.refresh())
    days = app.solar.solar_days

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in days], indent=2))
        return

    if not days:
        click.echo("No solar days available.")
        return

    for day in days:
        padded = " (estimated)" if day.date in app.solar.padded_dates else ""
        click.echo(f"  {day.date.strftime('%a %b %d')}  sunrise {day.sunrise:%H:%M}  sunset {day.sunset:%H:%M}{padded}")


@main.command()
def flags():
    """Show the state flags behind the on-screen warnings."""
    app = _build_app()
    asyncio.run(app.update_everything())
    for name, value in asdict(app.flags()).items():
        click.echo(f"  {name:34} {'yes' if value else 'no'}")


if __name__ == "__main__":
    main()
