from __future__ import annotations

from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tutorhub.domain.scheduling.conflicts import find_overlap
from tutorhub.domain.scheduling.model import BookedSlot, SessionKind
from tutorhub.infra.db.models import BookedSlotModel, SessionSlotModel
from tutorhub.infra.repositories.session_repository import SessionRepository, SessionSlotRecord
from tutorhub.services.errors import (
    DuplicateSessionForDate,
    SessionHasBookings,
    SessionNotFound,
    SlotAlreadyBooked,
)


def _utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _booked(row: BookedSlotModel) -> BookedSlot:
    return BookedSlot(
        start_time=_utc(row.start_time),
        end_time=_utc(row.end_time),
        booked_by=row.booked_by,
        booked_at=_utc(row.booked_at),
    )


class SqlSessionRepository(SessionRepository):
    def __init__(self, db: Session) -> None:
        self._db = db

    def _to_record(self, model: SessionSlotModel) -> SessionSlotRecord:
        return SessionSlotRecord(
            id=model.id,
            teacher_id=model.teacher_id,
            title=model.title,
            date=model.day,
            session_duration=model.session_duration,
            break_duration=model.break_duration,
            allowed_student_id=model.allowed_student_id,
            booked_slots=sorted((_booked(b) for b in model.booked_slots), key=lambda b: b.start_time),
            created_at=_utc(model.created_at),
        )

    def _teacher_query(self, teacher_id: str, kind: SessionKind | None):
        stmt = select(SessionSlotModel).where(SessionSlotModel.teacher_id == teacher_id)
        if kind == SessionKind.COMMON:
            stmt = stmt.where(SessionSlotModel.allowed_student_id.is_(None))
        elif kind == SessionKind.PERSONAL:
            stmt = stmt.where(SessionSlotModel.allowed_student_id.is_not(None))
        return stmt

    def get(self, session_id: str) -> SessionSlotRecord:
        model = self._db.get(SessionSlotModel, session_id)
        if model is None:
            raise SessionNotFound(session_id)
        return self._to_record(model)

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
        model = SessionSlotModel(
            id=str(uuid4()),
            teacher_id=teacher_id,
            title=title.strip(),
            day=day,
            session_duration=session_duration,
            break_duration=break_duration,
            allowed_student_id=allowed_student_id,
        )
        self._db.add(model)
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise DuplicateSessionForDate("Session slots are already created for this date") from exc
        self._db.refresh(model)
        return self._to_record(model)

    def list_for_teacher(
        self,
        teacher_id: str,
        *,
        kind: SessionKind | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[SessionSlotRecord]:
        stmt = (
            self._teacher_query(teacher_id, kind)
            .order_by(SessionSlotModel.day.asc(), SessionSlotModel.created_at.asc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_record(row) for row in self._db.execute(stmt).scalars()]

    def count_for_teacher(self, teacher_id: str, *, kind: SessionKind | None = None) -> int:
        stmt = select(func.count()).select_from(self._teacher_query(teacher_id, kind).subquery())
        return int(self._db.execute(stmt).scalar_one())

    def list_visible_to_student(
        self,
        teacher_id: str,
        student_id: str,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[SessionSlotRecord]:
        stmt = (
            select(SessionSlotModel)
            .where(SessionSlotModel.teacher_id == teacher_id)
            .where(
                SessionSlotModel.allowed_student_id.is_(None)
                | (SessionSlotModel.allowed_student_id == student_id)
            )
            .order_by(SessionSlotModel.day.asc(), SessionSlotModel.created_at.asc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_record(row) for row in self._db.execute(stmt).scalars()]

    def list_booked_by(self, student_id: str) -> list[SessionSlotRecord]:
        stmt = (
            select(SessionSlotModel)
            .join(BookedSlotModel)
            .where(BookedSlotModel.booked_by == student_id)
            .distinct()
            .order_by(SessionSlotModel.day.asc())
        )
        return [self._to_record(row) for row in self._db.execute(stmt).scalars()]

    def append_booking(self, session_id: str, booking: BookedSlot) -> SessionSlotRecord:
        # Row lock serialises concurrent bookers of this session; the unique
        # (session_id, start_time) constraint covers backends without FOR UPDATE.
        stmt = select(SessionSlotModel).where(SessionSlotModel.id == session_id).with_for_update()
        model = self._db.execute(stmt).scalar_one_or_none()
        if model is None:
            self._db.rollback()
            raise SessionNotFound(session_id)

        existing = [_booked(b) for b in model.booked_slots]
        if find_overlap(existing, booking.start_time, booking.end_time) is not None:
            self._db.rollback()
            raise SlotAlreadyBooked("This slot is already booked")

        model.booked_slots.append(
            BookedSlotModel(
                start_time=booking.start_time,
                end_time=booking.end_time,
                booked_by=booking.booked_by,
                booked_at=booking.booked_at,
            )
        )
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise SlotAlreadyBooked("This slot is already booked") from exc
        self._db.refresh(model)
        return self._to_record(model)

    def delete(self, session_id: str) -> None:
        stmt = select(SessionSlotModel).where(SessionSlotModel.id == session_id).with_for_update()
        model = self._db.execute(stmt).scalar_one_or_none()
        if model is None:
            self._db.rollback()
            raise SessionNotFound(session_id)
        if model.booked_slots:
            self._db.rollback()
            raise SessionHasBookings("Session has bookings and cannot be deleted")
        self._db.delete(model)
        self._db.commit()
