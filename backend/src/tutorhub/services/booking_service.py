from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from tutorhub.domain.scheduling.model import BookedSlot, CandidateSlot
from tutorhub.domain.scheduling.timezones import anchor, format_date, parse_time_of_day, to_zone
from tutorhub.infra.repositories.session_repository import SessionRepository, SessionSlotRecord
from tutorhub.services.availability_service import AvailabilityService
from tutorhub.services.errors import (
    AvailabilityNotSet,
    HolidayConflict,
    InvalidSlot,
    NotAuthorized,
    SlotAlreadyBooked,
)
from tutorhub.services.slot_service import SlotService
from tutorhub.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingConfirmation:
    """A booking as seen on the booker's wall clock."""
    session_id: str
    title: str
    date: str  # DD-MM-YYYY
    start_time: str  # HH:MM
    end_time: str


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookingService:
    """
    Validates and commits slot bookings.

    Checks run in a fixed order and each failure has its own error. The
    final overlap check and the append are a single repository operation,
    so two students racing for the same instant cannot both win.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        availability: AvailabilityService,
        slots: SlotService,
        users: UserService,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._sessions = sessions
        self._availability = availability
        self._slots = slots
        self._users = users
        self._clock = clock

    def confirm(self, session_id: str, requested_start: str, student_id: str) -> BookingConfirmation:
        session = self._sessions.get(session_id)

        student = self._users.require_student(student_id)
        if student.teacher_id != session.teacher_id:
            raise NotAuthorized("You are not allowed to book this session")
        if session.allowed_student_id and session.allowed_student_id != student.id:
            raise NotAuthorized("You are not allowed to book this session")

        if self._availability.holiday_on(session.teacher_id, session.date) is not None:
            raise HolidayConflict(f"Session date {format_date(session.date)} is a holiday")

        student_zone = self._users.timezone_of(student)
        candidate = self._match_candidate(session, parse_time_of_day(requested_start), student_zone)

        booking = BookedSlot(
            start_time=candidate.start_time,
            end_time=candidate.end_time,
            booked_by=student.id,
            booked_at=self._clock(),
        )
        self._sessions.append_booking(session.id, booking)
        logger.info(
            "Session %s booked by %s at %s",
            session.id,
            student.id,
            candidate.start_time.isoformat(),
        )

        local_date, start = to_zone(candidate.start_time, student_zone)
        _, end = to_zone(candidate.end_time, student_zone)
        return BookingConfirmation(
            session_id=session.id,
            title=session.title,
            date=format_date(local_date),
            start_time=start,
            end_time=end,
        )

    def list_confirmed(
        self, student_id: str, *, page: int = 1, limit: int = 10
    ) -> tuple[list[BookingConfirmation], int]:
        student = self._users.require_student(student_id)
        zone = self._users.timezone_of(student)

        bookings: list[BookingConfirmation] = []
        for session in self._sessions.list_booked_by(student.id):
            for slot in session.booked_slots:
                if slot.booked_by != student.id:
                    continue
                local_date, start = to_zone(slot.start_time, zone)
                _, end = to_zone(slot.end_time, zone)
                bookings.append(
                    BookingConfirmation(
                        session_id=session.id,
                        title=session.title,
                        date=format_date(local_date),
                        start_time=start,
                        end_time=end,
                    )
                )
        offset = (page - 1) * limit
        return bookings[offset:offset + limit], len(bookings)

    def _match_candidate(self, session: SessionSlotRecord, requested, student_zone: str) -> CandidateSlot:
        teacher_zone = self._users.timezone_of(self._users.get(session.teacher_id))
        try:
            window = self._availability.window_for(session.teacher_id, session.date)
        except AvailabilityNotSet as exc:
            raise InvalidSlot("Requested time is not an available slot") from exc

        theoretical = {c.start_time: c for c in self._slots.theoretical_candidates(session, window, teacher_zone)}
        live = {c.start_time for c in self._slots.live_candidates(session, window, teacher_zone)}

        # The teacher's day can straddle two student-local dates; a window is
        # shorter than a day so at most one of these anchors can match.
        for offset in (0, -1, 1):
            instant = anchor(session.date + timedelta(days=offset), requested, student_zone)
            if instant in live:
                return theoretical[instant]
            if instant in theoretical:
                raise SlotAlreadyBooked("This slot is already booked")
        raise InvalidSlot("Requested time is not an available slot")
