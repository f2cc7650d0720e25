from __future__ import annotations

import math

from fastapi import APIRouter, Depends, Query, Response, status

from tutorhub.api.deps import get_session_service, get_slot_service
from tutorhub.api.schemas import (
    PaginationResponse,
    SessionCreatedResponse,
    SessionCreateRequest,
    SessionSummaryResponse,
    SlotResponse,
    StudentSessionResponse,
    StudentSessionsResponse,
    TeacherSessionsResponse,
)
from tutorhub.domain.scheduling.model import RenderedSlot, SessionKind, Weekday
from tutorhub.domain.scheduling.timezones import format_date, parse_date
from tutorhub.infra.repositories.session_repository import SessionSlotRecord
from tutorhub.services.session_service import SessionService
from tutorhub.services.slot_service import SlotService

router = APIRouter(tags=["sessions"])


def _to_slots(slots: list[RenderedSlot]) -> list[SlotResponse]:
    return [SlotResponse(start_time=slot.start_time, end_time=slot.end_time) for slot in slots]


def _to_summary(session: SessionSlotRecord) -> SessionSummaryResponse:
    return SessionSummaryResponse(
        id=session.id,
        title=session.title,
        date=format_date(session.date),
        kind=session.kind.value,
        session_duration=session.session_duration,
        break_duration=session.break_duration,
        allowed_student_id=session.allowed_student_id,
        booked_count=len(session.booked_slots),
        created_at=session.created_at,
    )


@router.post(
    "/teachers/{teacher_id}/sessions",
    response_model=SessionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_session(
    teacher_id: str,
    body: SessionCreateRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionCreatedResponse:
    created = service.create_session(
        teacher_id,
        title=body.title,
        day=parse_date(body.date),
        session_duration=body.session_duration,
        break_duration=body.break_duration,
        student_id=body.student_id,
        viewer_timezone=body.viewer_timezone,
    )
    return SessionCreatedResponse(
        session_id=created.session.id,
        title=created.session.title,
        date=format_date(created.session.date),
        kind=created.session.kind.value,
        slots=_to_slots(created.slots),
    )


@router.get("/teachers/{teacher_id}/sessions", response_model=TeacherSessionsResponse)
def list_teacher_sessions(
    teacher_id: str,
    kind: SessionKind | None = Query(default=None, alias="type"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    service: SessionService = Depends(get_session_service),
) -> TeacherSessionsResponse:
    sessions, total = service.list_teacher_sessions(teacher_id, kind=kind, page=page, limit=limit)
    return TeacherSessionsResponse(
        pagination=PaginationResponse(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit)),
        sessions=[_to_summary(s) for s in sessions],
    )


@router.delete("/teachers/{teacher_id}/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    teacher_id: str,
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> Response:
    service.delete_session(teacher_id, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/students/{student_id}/sessions", response_model=StudentSessionsResponse)
def list_student_sessions(
    student_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    service: SlotService = Depends(get_slot_service),
) -> StudentSessionsResponse:
    views, total = service.list_student_sessions(student_id, page=page, limit=limit)
    return StudentSessionsResponse(
        page=page,
        limit=limit,
        count=len(views),
        total=total,
        sessions=[
            StudentSessionResponse(
                session_id=view.session.id,
                title=view.session.title,
                date=format_date(view.session.date),
                weekday=Weekday.of(view.session.date).value,
                kind=view.session.kind.value,
                slots=_to_slots(view.slots),
            )
            for view in views
        ],
    )
