# domain/scheduling/timezones.py
"""
Time normalisation between wall clocks and UTC.

Anchoring uses the zone's offset for the given calendar date, so the same
wall-clock window maps to different UTC intervals on either side of a DST
transition. Wall-clock times that fall in a spring-forward gap resolve with
the standard-time offset; times repeated on fall-back resolve to the
standard-time occurrence.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, tzinfo
from typing import Tuple, Union

import pytz

from tutorhub.domain.scheduling.errors import InvalidTimeFormat, UnknownTimezone

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_DATE_RE = re.compile(r"^(\d{2})-(\d{2})-(\d{4})$")

TimeOfDay = Union[str, time]


def parse_time_of_day(value: str) -> time:
    match = _TIME_RE.match(value or "")
    if match is None:
        raise InvalidTimeFormat(f"Invalid time '{value}', expected HH:MM (00:00-23:59)")
    return time(int(match.group(1)), int(match.group(2)))


def format_time_of_day(value: Union[time, datetime]) -> str:
    return value.strftime("%H:%M")


def parse_date(value: str) -> date:
    match = _DATE_RE.match(value or "")
    if match is None:
        raise InvalidTimeFormat(f"Invalid date '{value}', expected DD-MM-YYYY")
    day, month, year = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise InvalidTimeFormat(f"Invalid date '{value}'") from None


def format_date(value: date) -> str:
    return value.strftime("%d-%m-%Y")


def get_zone(name: str) -> tzinfo:
    if not name or not isinstance(name, str):
        raise UnknownTimezone(str(name))
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise UnknownTimezone(name) from None


def exists(wall_clock: datetime, zone: tzinfo) -> bool:
    """False when the wall-clock time falls in a spring-forward gap."""
    try:
        zone.localize(wall_clock, is_dst=None)
    except pytz.NonExistentTimeError:
        return False
    except pytz.AmbiguousTimeError:
        return True
    return True


def localize(wall_clock: datetime, zone: tzinfo) -> datetime:
    """Attach `zone` to a naive wall-clock datetime and return the UTC instant."""
    return zone.localize(wall_clock, is_dst=False).astimezone(pytz.utc)


def anchor(day: date, time_of_day: TimeOfDay, zone: str) -> datetime:
    tz = get_zone(zone)
    if isinstance(time_of_day, str):
        time_of_day = parse_time_of_day(time_of_day)
    return localize(datetime.combine(day, time_of_day), tz)


def to_zone(instant: datetime, zone: str) -> Tuple[date, str]:
    tz = get_zone(zone)
    if instant.tzinfo is None:
        # Naive instants are stored UTC
        instant = pytz.utc.localize(instant)
    local = instant.astimezone(tz)
    return local.date(), format_time_of_day(local)


def today_in(zone: str) -> date:
    return datetime.now(get_zone(zone)).date()
