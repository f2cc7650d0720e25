# domain/scheduling/model.py
# Data contract of the scheduling engine: weekly availability, holidays,
# computed candidate slots and committed bookings.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tutorhub.domain.scheduling.errors import InvalidAvailability, InvalidHoliday, InvalidTimeFormat
from tutorhub.domain.scheduling.timezones import format_time_of_day, parse_time_of_day


# ---------- Enums ----------

class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return _WEEKDAYS[day.weekday()]


_WEEKDAYS: Tuple[Weekday, ...] = tuple(Weekday)


class HolidayReason(str, Enum):
    PERSONAL = "personal"
    PUBLIC = "public"


class SessionKind(str, Enum):
    """Common sessions are open to every student of the teacher, personal ones to a single student."""
    COMMON = "common"
    PERSONAL = "personal"


# ---------- Availability ----------

@dataclass(frozen=True)
class TimeWindow:
    """Wall-clock window within one day, in the teacher's timezone."""
    start_time: time
    end_time: time

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeWindow":
        window = cls(parse_time_of_day(start), parse_time_of_day(end))
        if window.start_time >= window.end_time:
            raise InvalidTimeFormat(f"endTime {end} must be after startTime {start}")
        return window

    def signature(self) -> str:
        return f"{self.start_time:%H%M}-{self.end_time:%H%M}"

    def to_dict(self) -> Dict[str, str]:
        return {
            "start_time": format_time_of_day(self.start_time),
            "end_time": format_time_of_day(self.end_time),
        }


@dataclass(frozen=True)
class WeeklyAvailability:
    """At most one window per weekday. Replaced wholesale, never merged."""
    days: Dict[Weekday, TimeWindow] = field(default_factory=dict)

    def window_for(self, day: date) -> Optional[TimeWindow]:
        return self.days.get(Weekday.of(day))

    def to_entries(self) -> List[Dict[str, str]]:
        return [{"day": wd.value, **self.days[wd].to_dict()} for wd in Weekday if wd in self.days]

    @classmethod
    def from_entries(cls, entries: Iterable[Dict[str, Any]]) -> "WeeklyAvailability":
        days: Dict[Weekday, TimeWindow] = {}
        for i, entry in enumerate(entries):
            raw_day = str(entry.get("day") or "").strip().lower()
            if not raw_day:
                raise InvalidAvailability(f"day is required at index {i}")
            try:
                weekday = Weekday(raw_day)
            except ValueError:
                allowed = ", ".join(wd.value for wd in Weekday)
                raise InvalidAvailability(f"Invalid day '{raw_day}'. Allowed: {allowed}") from None
            if weekday in days:
                raise InvalidAvailability(f"Duplicate day '{raw_day}' is not allowed")
            days[weekday] = TimeWindow.parse(str(entry.get("start_time", "")), str(entry.get("end_time", "")))

        if not days:
            raise InvalidAvailability("Weekly availability must contain at least one day")
        return cls(days=days)


# ---------- Holidays ----------

@dataclass(frozen=True, order=True)
class Holiday:
    """Inclusive range of calendar days off."""
    start_date: date
    end_date: date
    reason: HolidayReason = HolidayReason.PERSONAL
    note: str = ""

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise InvalidHoliday("endDate cannot be before startDate")

    @classmethod
    def build(cls, start_date: date, end_date: date, reason: str, note: Optional[str] = None) -> "Holiday":
        try:
            parsed_reason = HolidayReason(str(reason).strip().lower())
        except ValueError:
            raise InvalidHoliday("reason must be personal or public") from None
        return cls(start_date=start_date, end_date=end_date, reason=parsed_reason, note=note or "")

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, other: "Holiday") -> bool:
        return self.start_date <= other.end_date and self.end_date >= other.start_date


# ---------- Slots ----------

@dataclass(frozen=True, order=True)
class CandidateSlot:
    """Bookable interval computed from availability. UTC instants, half-open."""
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class BookedSlot:
    """Committed reservation. UTC instants, never mutated once appended."""
    start_time: datetime
    end_time: datetime
    booked_by: str
    booked_at: datetime


@dataclass(frozen=True)
class RenderedSlot:
    """Candidate slot projected onto a viewer's wall clock."""
    start_time: str  # "HH:MM"
    end_time: str

    def to_dict(self) -> Dict[str, str]:
        return {"start_time": self.start_time, "end_time": self.end_time}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RenderedSlot":
        return cls(start_time=str(d["start_time"]), end_time=str(d["end_time"]))
