"""Configuration management for TARDIS Calendar."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

TARDIS_HOME = Path(os.environ.get("TARDIS_HOME", Path.home() / "tardis"))
CONFIG_FILE = TARDIS_HOME / "config" / "tardis.conf"
DATA_DIR = TARDIS_HOME / "data"
STATE_FILE = DATA_DIR / "state.json"

# Used whenever location access is not authorized.
DEFAULT_LATITUDE = 36.110170
DEFAULT_LONGITUDE = -97.058570


@dataclass
class Config:
    """TARDIS configuration."""

    timezone: str = "America/Chicago"
    latitude: float = DEFAULT_LATITUDE
    longitude: float = DEFAULT_LONGITUDE
    location_source: str = "fixed"
    # Calendar title -> calendar type ("daily", "medical", "meals", "special")
    calendars: dict[str, str] = field(default_factory=dict)
    default_span_hours: float = 6.0
    min_span_hours: float = 2.0
    max_span_days: float = 7.0
    solar_api_url: str = "https://api.sunrise-sunset.org/json"
    network_probe_url: str = "https://www.google.com/generate_204"
    calendar_poll_seconds: int = 60
    network_probe_seconds: int = 60
    icalpal_timeout: int = 30
    render_width: int = 80


def _parse_float(key: str, value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid number for {key.upper()}: {value!r}")
        return default


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}")
        return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from tardis.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"'):
            end_quote = value.find('"', 1)
            if end_quote != -1:
                value = value[1:end_quote]
            else:
                value = value[1:]
        elif value.startswith("'"):
            end_quote = value.find("'", 1)
            if end_quote != -1:
                value = value[1:end_quote]
            else:
                value = value[1:]
        else:
            # Unquoted: strip inline comments
            if "#" in value:
                value = value.split("#")[0].strip()

        match key:
            case "timezone":
                config.timezone = value
            case "latitude":
                config.latitude = _parse_float(key, value, config.latitude)
            case "longitude":
                config.longitude = _parse_float(key, value, config.longitude)
            case "location_source":
                config.location_source = value.lower()
            case "calendars":
                # JSON format: {"Daily": "daily", "Doctor": "medical"}
                # Simple format: "Daily:daily,Doctor:medical"
                calendars = {}
                if value.startswith("{"):
                    try:
                        calendars = {str(k): str(v) for k, v in json.loads(value).items()}
                    except (json.JSONDecodeError, AttributeError) as e:
                        logger.warning(f"Failed to parse CALENDARS JSON: {e}")
                else:
                    for entry in value.split(","):
                        entry = entry.strip()
                        if not entry:
                            continue
                        title, _, cal_type = entry.partition(":")
                        calendars[title.strip()] = cal_type.strip() or "none"
                config.calendars = calendars
            case "default_span_hours":
                config.default_span_hours = _parse_float(key, value, config.default_span_hours)
            case "min_span_hours":
                config.min_span_hours = _parse_float(key, value, config.min_span_hours)
            case "max_span_days":
                config.max_span_days = _parse_float(key, value, config.max_span_days)
            case "solar_api_url":
                config.solar_api_url = value
            case "network_probe_url":
                config.network_probe_url = value
            case "calendar_poll_seconds":
                config.calendar_poll_seconds = _parse_int(key, value, config.calendar_poll_seconds)
            case "network_probe_seconds":
                config.network_probe_seconds = _parse_int(key, value, config.network_probe_seconds)
            case "icalpal_timeout":
                config.icalpal_timeout = _parse_int(key, value, config.icalpal_timeout)
            case "render_width":
                config.render_width = _parse_int(key, value, config.render_width)

    return config
