from __future__ import annotations

import logging
from datetime import date

from tutorhub.domain.scheduling.build_slots import enumerate_slots
from tutorhub.domain.scheduling.errors import InvalidDuration
from tutorhub.domain.scheduling.model import SessionKind
from tutorhub.domain.scheduling.timezones import format_date, get_zone
from tutorhub.infra.repositories.session_repository import SessionRepository, SessionSlotRecord
from tutorhub.services.availability_service import AvailabilityService
from tutorhub.services.errors import HolidayConflict, NotAuthorized, SessionNotFound, UserNotFound
from tutorhub.services.slot_service import SessionSlots, SlotService
from tutorhub.services.user_service import UserService

logger = logging.getLogger(__name__)


class SessionService:
    def __init__(
        self,
        repository: SessionRepository,
        availability: AvailabilityService,
        slots: SlotService,
        users: UserService,
    ) -> None:
        self._repository = repository
        self._availability = availability
        self._slots = slots
        self._users = users

    def create_session(
        self,
        teacher_id: str,
        *,
        title: str,
        day: date,
        session_duration: int,
        break_duration: int,
        student_id: str | None = None,
        viewer_timezone: str | None = None,
    ) -> SessionSlots:
        teacher = self._users.require_teacher(teacher_id)
        teacher_zone = self._users.timezone_of(teacher)
        viewer_zone = viewer_timezone or teacher_zone
        get_zone(viewer_zone)

        self._availability.get_record(teacher_id)
        if self._availability.holiday_on(teacher_id, day) is not None:
            raise HolidayConflict(f"Session date {format_date(day)} is a holiday")
        window = self._availability.window_for(teacher_id, day)

        if session_duration <= 0:
            raise InvalidDuration(f"sessionDuration must be > 0 (got {session_duration})")
        # Bound and break checks happen here, before anything is persisted
        enumerate_slots(day, window, session_duration, break_duration, teacher_zone, max_slots=self._slots.max_slots)

        allowed_student_id = None
        if student_id:
            allowed_student_id = self._resolve_student(teacher_id, student_id)

        session = self._repository.create(
            teacher_id=teacher_id,
            title=title,
            day=day,
            session_duration=session_duration,
            break_duration=break_duration,
            allowed_student_id=allowed_student_id,
        )
        logger.info(
            "Session %s created for teacher %s on %s (%s)",
            session.id,
            teacher_id,
            format_date(day),
            session.kind.value,
        )
        slots = self._slots.list_slots(session, viewer_zone, counterpart_zone=teacher_zone)
        return SessionSlots(session=session, slots=slots)

    def list_teacher_sessions(
        self,
        teacher_id: str,
        *,
        kind: SessionKind | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[SessionSlotRecord], int]:
        self._users.require_teacher(teacher_id)
        total = self._repository.count_for_teacher(teacher_id, kind=kind)
        sessions = self._repository.list_for_teacher(teacher_id, kind=kind, offset=(page - 1) * limit, limit=limit)
        return sessions, total

    def delete_session(self, teacher_id: str, session_id: str) -> None:
        session = self._repository.get(session_id)
        if session.teacher_id != teacher_id:
            raise SessionNotFound(session_id)
        self._repository.delete(session_id)
        logger.info("Session %s deleted by teacher %s", session_id, teacher_id)

    def _resolve_student(self, teacher_id: str, student_id: str) -> str:
        try:
            student = self._users.get(student_id)
        except UserNotFound as exc:
            raise NotAuthorized("Invalid student for this teacher") from exc
        if student.teacher_id != teacher_id:
            raise NotAuthorized("Invalid student for this teacher")
        return student.id
