from __future__ import annotations

from datetime import timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from tutorhub.domain.scheduling.errors import OverlappingHoliday
from tutorhub.domain.scheduling.holidays import ensure_no_overlap
from tutorhub.domain.scheduling.model import Holiday, HolidayReason, WeeklyAvailability
from tutorhub.infra.db.models import AvailabilityModel, HolidayModel
from tutorhub.infra.repositories.availability_repository import AvailabilityRecord, AvailabilityRepository


def _holiday(row: HolidayModel) -> Holiday:
    return Holiday(
        start_date=row.start_date,
        end_date=row.end_date,
        reason=HolidayReason(row.reason),
        note=row.note,
    )


class SqlAvailabilityRepository(AvailabilityRepository):
    def __init__(self, db: Session) -> None:
        self._db = db

    def _to_record(self, model: AvailabilityModel) -> AvailabilityRecord:
        updated_at = model.updated_at
        if updated_at.tzinfo is None:
            updated_at = updated_at.replace(tzinfo=timezone.utc)
        return AvailabilityRecord(
            teacher_id=model.teacher_id,
            weekly=WeeklyAvailability.from_entries(model.weekly) if model.weekly else WeeklyAvailability(),
            holidays=sorted(_holiday(h) for h in model.holidays),
            updated_at=updated_at.astimezone(timezone.utc),
        )

    def _locked(self, teacher_id: str) -> AvailabilityModel:
        stmt = select(AvailabilityModel).where(AvailabilityModel.teacher_id == teacher_id).with_for_update()
        model = self._db.execute(stmt).scalar_one_or_none()
        if model is None:
            model = AvailabilityModel(teacher_id=teacher_id, weekly=[])
            self._db.add(model)
            self._db.flush()
        return model

    def get(self, teacher_id: str) -> AvailabilityRecord | None:
        model = self._db.get(AvailabilityModel, teacher_id)
        if model is None:
            return None
        return self._to_record(model)

    def set_weekly(self, teacher_id: str, weekly: WeeklyAvailability) -> AvailabilityRecord:
        model = self._locked(teacher_id)
        model.weekly = weekly.to_entries()
        self._db.commit()
        self._db.refresh(model)
        return self._to_record(model)

    def add_holiday(self, teacher_id: str, holiday: Holiday) -> AvailabilityRecord:
        model = self._locked(teacher_id)
        try:
            ensure_no_overlap((_holiday(h) for h in model.holidays), holiday)
        except OverlappingHoliday:
            self._db.rollback()
            raise
        model.holidays.append(
            HolidayModel(
                start_date=holiday.start_date,
                end_date=holiday.end_date,
                reason=holiday.reason.value,
                note=holiday.note,
            )
        )
        self._db.commit()
        self._db.refresh(model)
        return self._to_record(model)
