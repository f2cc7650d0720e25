from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from threading import Lock
from typing import Protocol

from tutorhub.domain.scheduling.holidays import ensure_no_overlap
from tutorhub.domain.scheduling.model import Holiday, WeeklyAvailability


@dataclass
class AvailabilityRecord:
    teacher_id: str
    weekly: WeeklyAvailability = field(default_factory=WeeklyAvailability)
    holidays: list[Holiday] = field(default_factory=list)
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class AvailabilityRepository(Protocol):
    def get(self, teacher_id: str) -> AvailabilityRecord | None: ...

    def set_weekly(self, teacher_id: str, weekly: WeeklyAvailability) -> AvailabilityRecord: ...

    def add_holiday(self, teacher_id: str, holiday: Holiday) -> AvailabilityRecord:
        """Insert unless it overlaps an existing holiday (OverlappingHoliday)."""
        ...


class InMemoryAvailabilityRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._records: dict[str, AvailabilityRecord] = {}

    def get(self, teacher_id: str) -> AvailabilityRecord | None:
        record = self._records.get(teacher_id)
        if record is None:
            return None
        return replace(record, holidays=list(record.holidays))

    def set_weekly(self, teacher_id: str, weekly: WeeklyAvailability) -> AvailabilityRecord:
        with self._lock:
            record = self._records.setdefault(teacher_id, AvailabilityRecord(teacher_id=teacher_id))
            record.weekly = weekly
            record.updated_at = datetime.now(timezone.utc)
            return replace(record, holidays=list(record.holidays))

    def add_holiday(self, teacher_id: str, holiday: Holiday) -> AvailabilityRecord:
        with self._lock:
            record = self._records.setdefault(teacher_id, AvailabilityRecord(teacher_id=teacher_id))
            ensure_no_overlap(record.holidays, holiday)
            record.holidays = sorted([*record.holidays, holiday])
            record.updated_at = datetime.now(timezone.utc)
            return replace(record, holidays=list(record.holidays))
