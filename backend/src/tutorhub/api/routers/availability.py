from __future__ import annotations

from fastapi import APIRouter, Depends, status

from tutorhub.api.deps import get_availability_service
from tutorhub.api.schemas import (
    AvailabilityEntry,
    HolidayListResponse,
    HolidayRequest,
    HolidayResponse,
    TeacherAvailabilityResponse,
    WeeklyAvailabilityRequest,
    WeeklyAvailabilityResponse,
)
from tutorhub.domain.scheduling.model import Holiday, WeeklyAvailability
from tutorhub.domain.scheduling.timezones import format_date, parse_date
from tutorhub.services.availability_service import AvailabilityService

router = APIRouter(tags=["availability"])


def _to_entries(weekly: WeeklyAvailability) -> list[AvailabilityEntry]:
    return [AvailabilityEntry(**entry) for entry in weekly.to_entries()]


def _to_holiday(holiday: Holiday) -> HolidayResponse:
    return HolidayResponse(
        start_date=format_date(holiday.start_date),
        end_date=format_date(holiday.end_date),
        reason=holiday.reason.value,
        note=holiday.note,
    )


@router.get("/teachers/{teacher_id}/availability", response_model=WeeklyAvailabilityResponse)
def get_weekly_availability(
    teacher_id: str,
    service: AvailabilityService = Depends(get_availability_service),
) -> WeeklyAvailabilityResponse:
    return WeeklyAvailabilityResponse(weekly_availability=_to_entries(service.get_weekly(teacher_id)))


@router.put("/teachers/{teacher_id}/availability", response_model=WeeklyAvailabilityResponse)
def set_weekly_availability(
    teacher_id: str,
    body: WeeklyAvailabilityRequest,
    service: AvailabilityService = Depends(get_availability_service),
) -> WeeklyAvailabilityResponse:
    weekly = service.set_weekly(teacher_id, [entry.model_dump() for entry in body.weekly_availability])
    return WeeklyAvailabilityResponse(weekly_availability=_to_entries(weekly))


@router.get("/teachers/{teacher_id}/holidays", response_model=HolidayListResponse)
def list_holidays(
    teacher_id: str,
    service: AvailabilityService = Depends(get_availability_service),
) -> HolidayListResponse:
    return HolidayListResponse(holidays=[_to_holiday(h) for h in service.list_holidays(teacher_id)])


@router.post("/teachers/{teacher_id}/holidays", response_model=HolidayListResponse, status_code=status.HTTP_201_CREATED)
def add_holiday(
    teacher_id: str,
    body: HolidayRequest,
    service: AvailabilityService = Depends(get_availability_service),
) -> HolidayListResponse:
    holidays = service.add_holiday(
        teacher_id,
        start_date=parse_date(body.start_date),
        end_date=parse_date(body.end_date),
        reason=body.reason,
        note=body.note,
    )
    return HolidayListResponse(holidays=[_to_holiday(h) for h in holidays])


@router.get("/students/{student_id}/teacher-availability", response_model=TeacherAvailabilityResponse)
def get_teacher_availability_for_student(
    student_id: str,
    service: AvailabilityService = Depends(get_availability_service),
) -> TeacherAvailabilityResponse:
    record = service.get_for_student(student_id)
    return TeacherAvailabilityResponse(
        teacher_id=record.teacher_id,
        weekly_availability=_to_entries(record.weekly),
        holidays=[_to_holiday(h) for h in record.holidays],
    )
