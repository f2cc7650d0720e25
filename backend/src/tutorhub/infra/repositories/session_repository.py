from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from threading import Lock
from typing import Protocol
from uuid import uuid4

from tutorhub.domain.scheduling.conflicts import find_overlap
from tutorhub.domain.scheduling.model import BookedSlot, SessionKind
from tutorhub.services.errors import (
    DuplicateSessionForDate,
    SessionHasBookings,
    SessionNotFound,
    SlotAlreadyBooked,
)


@dataclass
class SessionSlotRecord:
    id: str
    teacher_id: str
    title: str
    date: date
    session_duration: int
    break_duration: int
    allowed_student_id: str | None = None
    booked_slots: list[BookedSlot] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def kind(self) -> SessionKind:
        return SessionKind.COMMON if self.allowed_student_id is None else SessionKind.PERSONAL

    def is_visible_to(self, student_id: str) -> bool:
        return self.allowed_student_id is None or self.allowed_student_id == student_id


class SessionRepository(Protocol):
    def get(self, session_id: str) -> SessionSlotRecord: ...

    def create(
        self,
        *,
        teacher_id: str,
        title: str,
        day: date,
        session_duration: int,
        break_duration: int,
        allowed_student_id: str | None = None,
    ) -> SessionSlotRecord:
        """One session per (teacher, day); a second one raises DuplicateSessionForDate."""
        ...

    def list_for_teacher(
        self,
        teacher_id: str,
        *,
        kind: SessionKind | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[SessionSlotRecord]: ...

    def count_for_teacher(self, teacher_id: str, *, kind: SessionKind | None = None) -> int: ...

    def list_visible_to_student(
        self,
        teacher_id: str,
        student_id: str,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[SessionSlotRecord]: ...

    def list_booked_by(self, student_id: str) -> list[SessionSlotRecord]: ...

    def append_booking(self, session_id: str, booking: BookedSlot) -> SessionSlotRecord:
        """
        Atomically check that `booking` overlaps nothing already booked in the
        session and append it. Raises SlotAlreadyBooked otherwise.
        """
        ...

    def delete(self, session_id: str) -> None: ...


def _page(records: list[SessionSlotRecord], offset: int, limit: int | None) -> list[SessionSlotRecord]:
    end = None if limit is None else offset + limit
    return records[offset:end]


class InMemorySessionRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._sessions: dict[str, SessionSlotRecord] = {}
        self._by_teacher_day: dict[tuple[str, date], str] = {}
        self._booking_locks: dict[str, Lock] = {}

    def _snapshot(self, record: SessionSlotRecord) -> SessionSlotRecord:
        return replace(record, booked_slots=list(record.booked_slots))

    def _ordered(self) -> list[SessionSlotRecord]:
        return sorted(self._sessions.values(), key=lambda s: (s.date, s.created_at))

    def get(self, session_id: str) -> SessionSlotRecord:
        record = self._sessions.get(session_id)
        if record is None:
            raise SessionNotFound(session_id)
        return self._snapshot(record)

    def create(
        self,
        *,
        teacher_id: str,
        title: str,
        day: date,
        session_duration: int,
        break_duration: int,
        allowed_student_id: str | None = None,
    ) -> SessionSlotRecord:
        record = SessionSlotRecord(
            id=str(uuid4()),
            teacher_id=teacher_id,
            title=title.strip(),
            date=day,
            session_duration=session_duration,
            break_duration=break_duration,
            allowed_student_id=allowed_student_id,
        )
        with self._lock:
            if (teacher_id, day) in self._by_teacher_day:
                raise DuplicateSessionForDate("Session slots are already created for this date")
            self._sessions[record.id] = record
            self._by_teacher_day[(teacher_id, day)] = record.id
            self._booking_locks[record.id] = Lock()
        return self._snapshot(record)

    def list_for_teacher(
        self,
        teacher_id: str,
        *,
        kind: SessionKind | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[SessionSlotRecord]:
        records = [
            s for s in self._ordered() if s.teacher_id == teacher_id and (kind is None or s.kind == kind)
        ]
        return [self._snapshot(s) for s in _page(records, offset, limit)]

    def count_for_teacher(self, teacher_id: str, *, kind: SessionKind | None = None) -> int:
        return len(self.list_for_teacher(teacher_id, kind=kind))

    def list_visible_to_student(
        self,
        teacher_id: str,
        student_id: str,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[SessionSlotRecord]:
        records = [s for s in self._ordered() if s.teacher_id == teacher_id and s.is_visible_to(student_id)]
        return [self._snapshot(s) for s in _page(records, offset, limit)]

    def list_booked_by(self, student_id: str) -> list[SessionSlotRecord]:
        return [
            self._snapshot(s)
            for s in self._ordered()
            if any(b.booked_by == student_id for b in s.booked_slots)
        ]

    def append_booking(self, session_id: str, booking: BookedSlot) -> SessionSlotRecord:
        booking_lock = self._booking_locks.get(session_id)
        if booking_lock is None:
            raise SessionNotFound(session_id)
        with booking_lock:
            record = self._sessions.get(session_id)
            if record is None:
                raise SessionNotFound(session_id)
            if find_overlap(record.booked_slots, booking.start_time, booking.end_time) is not None:
                raise SlotAlreadyBooked("This slot is already booked")
            # Readers keep whatever list they already hold
            record.booked_slots = [*record.booked_slots, booking]
            return self._snapshot(record)

    def delete(self, session_id: str) -> None:
        booking_lock = self._booking_locks.get(session_id)
        if booking_lock is None:
            raise SessionNotFound(session_id)
        with booking_lock, self._lock:
            record = self._sessions.get(session_id)
            if record is None:
                raise SessionNotFound(session_id)
            if record.booked_slots:
                raise SessionHasBookings("Session has bookings and cannot be deleted")
            del self._sessions[session_id]
            del self._by_teacher_day[(record.teacher_id, record.date)]
            del self._booking_locks[session_id]
