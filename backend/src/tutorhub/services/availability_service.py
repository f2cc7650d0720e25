from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable

from tutorhub.domain.scheduling.holidays import find_holiday, upcoming
from tutorhub.domain.scheduling.model import Holiday, TimeWindow, WeeklyAvailability
from tutorhub.domain.scheduling.timezones import today_in
from tutorhub.infra.repositories.availability_repository import AvailabilityRecord, AvailabilityRepository
from tutorhub.services.errors import AvailabilityNotSet
from tutorhub.services.user_service import UserService

logger = logging.getLogger(__name__)


class AvailabilityService:
    def __init__(self, repository: AvailabilityRepository, users: UserService) -> None:
        self._repository = repository
        self._users = users

    def get_record(self, teacher_id: str) -> AvailabilityRecord:
        record = self._repository.get(teacher_id)
        if record is None:
            raise AvailabilityNotSet("Teacher availability not set")
        return record

    def get_weekly(self, teacher_id: str) -> WeeklyAvailability:
        record = self._repository.get(teacher_id)
        return record.weekly if record else WeeklyAvailability()

    def set_weekly(self, teacher_id: str, entries: Iterable[dict[str, Any]]) -> WeeklyAvailability:
        self._users.require_teacher(teacher_id)
        weekly = WeeklyAvailability.from_entries(entries)
        record = self._repository.set_weekly(teacher_id, weekly)
        logger.info("Weekly availability replaced for teacher %s (%s days)", teacher_id, len(weekly.days))
        return record.weekly

    def add_holiday(
        self,
        teacher_id: str,
        *,
        start_date: date,
        end_date: date,
        reason: str,
        note: str | None = None,
    ) -> list[Holiday]:
        self._users.require_teacher(teacher_id)
        holiday = Holiday.build(start_date, end_date, reason, note)
        record = self._repository.add_holiday(teacher_id, holiday)
        logger.info("Holiday %s..%s added for teacher %s", start_date, end_date, teacher_id)
        return record.holidays

    def list_holidays(self, teacher_id: str, today: date | None = None) -> list[Holiday]:
        record = self._repository.get(teacher_id)
        if record is None:
            return []
        if today is None:
            teacher = self._users.require_teacher(teacher_id)
            today = today_in(self._users.timezone_of(teacher))
        return upcoming(record.holidays, today)

    def get_for_student(self, student_id: str) -> AvailabilityRecord:
        student = self._users.require_student(student_id)
        return self.get_record(self._users.linked_teacher_id(student))

    def window_for(self, teacher_id: str, day: date) -> TimeWindow:
        window = self.get_record(teacher_id).weekly.window_for(day)
        if window is None:
            raise AvailabilityNotSet("Teacher is not available on this day")
        return window

    def holiday_on(self, teacher_id: str, day: date) -> Holiday | None:
        record = self._repository.get(teacher_id)
        if record is None:
            return None
        return find_holiday(record.holidays, day)
