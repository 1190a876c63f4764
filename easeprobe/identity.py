"""Process-wide identity of the prober: name, icon, version, host and time settings."""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .common import DEFAULT_ICON_URL, DEFAULT_PROG, DEFAULT_TIME_FORMAT, DEFAULT_TIME_ZONE, VER
from .timefmt import format_go_layout

log = logging.getLogger(__name__)


@dataclass
class EaseProbe:
    """Information about the running program."""

    name: str
    icon_url: str
    version: str
    host: str
    time_format: str = DEFAULT_TIME_FORMAT
    time_zone: str = DEFAULT_TIME_ZONE
    time_loc: tzinfo = field(default=timezone.utc)

    def format_time(self, moment: datetime) -> str:
        """Render moment in the configured zone and format."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return format_go_layout(moment.astimezone(self.time_loc), self.time_format)


_instance: EaseProbe | None = None


def _hostname() -> str:
    try:
        return socket.gethostname()
    except OSError as exc:
        log.error("Get Hostname Failed: %s", exc)
        return "unknown"


def init_easeprobe(name: str, icon: str) -> None:
    """Initialise with the default time format and zone."""
    init_easeprobe_with_time(name, icon, DEFAULT_TIME_FORMAT, DEFAULT_TIME_ZONE)


def init_easeprobe_with_time(name: str, icon: str, time_format: str, time_zone: str) -> None:
    """Initialise the program identity with a time format and zone."""
    global _instance
    _instance = EaseProbe(name=name, icon_url=icon, version=VER, host=_hostname())
    set_time_zone(time_zone)
    set_time_format(time_format)


def get_easeprobe() -> EaseProbe:
    """Return the identity, initialising it with defaults if needed."""
    if _instance is None:
        init_easeprobe(DEFAULT_PROG, DEFAULT_ICON_URL)
    assert _instance is not None
    return _instance


def reset_easeprobe() -> None:
    """Forget the current identity so the next access re-initialises it."""
    global _instance
    _instance = None


def get_time_format() -> str:
    return get_easeprobe().time_format


def set_time_format(time_format: str) -> None:
    """Set the time format; blank means the default."""
    if not time_format.strip():
        time_format = DEFAULT_TIME_FORMAT
    get_easeprobe().time_format = time_format


def get_time_location() -> tzinfo:
    return get_easeprobe().time_loc


def set_time_zone(time_zone: str) -> None:
    """Set the time zone; an unknown zone falls back to UTC."""
    loc: tzinfo
    if time_zone in ("", "UTC"):
        time_zone, loc = "UTC", timezone.utc
    else:
        try:
            loc = ZoneInfo(time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            log.error("Load TimeZone Failed: %s, use UTC time zone", exc)
            time_zone, loc = "UTC", timezone.utc
    e = get_easeprobe()
    e.time_zone = time_zone
    e.time_loc = loc


def footer_string() -> str:
    """Return e.g. "EaseProbe v1.0.0 @ localhost"."""
    e = get_easeprobe()
    return f"{e.name} {e.version} @ {e.host}"