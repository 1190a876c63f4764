"""Formatting of datetimes with reference-time layouts such as "2006-01-02 15:04:05"."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_MONTHS = ["January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December"]
_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_FRACTION = re.compile(r"[.,](0+|9+)(?![0-9])")


def _offset(moment: datetime) -> int:
    delta = moment.utcoffset() or timedelta(0)
    return int(delta.total_seconds())


def _zone(moment: datetime, zulu: bool, colon: bool, hours_only: bool) -> str:
    secs = _offset(moment)
    if zulu and secs == 0:
        return "Z"
    sign = "-" if secs < 0 else "+"
    secs = abs(secs)
    hh, mm = secs // 3600, (secs % 3600) // 60
    if hours_only:
        return f"{sign}{hh:02d}"
    return f"{sign}{hh:02d}{':' if colon else ''}{mm:02d}"


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


def _tzname(moment: datetime) -> str:
    name = moment.tzname()
    if name:
        return name
    return _zone(moment, False, False, False)


_TOKENS = {
    "January": lambda m: _MONTHS[m.month - 1],
    "Monday": lambda m: _DAYS[m.weekday()],
    "Z07:00": lambda m: _zone(m, True, True, False),
    "-07:00": lambda m: _zone(m, False, True, False),
    "Z0700": lambda m: _zone(m, True, False, False),
    "-0700": lambda m: _zone(m, False, False, False),
    "2006": lambda m: f"{m.year:04d}",
    "Z07": lambda m: _zone(m, True, False, True),
    "-07": lambda m: _zone(m, False, False, True),
    "Jan": lambda m: _MONTHS[m.month - 1][:3],
    "Mon": lambda m: _DAYS[m.weekday()][:3],
    "MST": _tzname,
    "06": lambda m: f"{m.year % 100:02d}",
    "01": lambda m: f"{m.month:02d}",
    "02": lambda m: f"{m.day:02d}",
    "_2": lambda m: f"{m.day:>2d}",
    "15": lambda m: f"{m.hour:02d}",
    "03": lambda m: f"{_hour12(m):02d}",
    "04": lambda m: f"{m.minute:02d}",
    "05": lambda m: f"{m.second:02d}",
    "PM": lambda m: "PM" if m.hour >= 12 else "AM",
    "pm": lambda m: "pm" if m.hour >= 12 else "am",
    "1": lambda m: str(m.month),
    "2": lambda m: str(m.day),
    "3": lambda m: str(_hour12(m)),
    "4": lambda m: str(m.minute),
    "5": lambda m: str(m.second),
}
_ORDERED = sorted(_TOKENS, key=len, reverse=True)


def _fraction(moment: datetime, sep: str, digits: str) -> str:
    text = f"{moment.microsecond:06d}000"[: len(digits)]
    if digits[0] == "9":
        text = text.rstrip("0")
        return sep + text if text else ""
    return sep + text


def format_go_layout(moment: datetime, layout: str) -> str:
    """Render moment using a layout written in terms of Mon Jan 2 15:04:05 -0700 2006.

    A naive datetime is treated as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    out: list[str] = []
    pos = 0
    while pos < len(layout):
        frac = _FRACTION.match(layout, pos)
        if frac:
            out.append(_fraction(moment, layout[pos], frac.group(1)))
            pos = frac.end()
            continue
        for token in _ORDERED:
            if layout.startswith(token, pos):
                out.append(_TOKENS[token](moment))
                pos += len(token)
                break
        else:
            out.append(layout[pos])
            pos += 1
    return "".join(out)