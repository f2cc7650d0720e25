from __future__ import annotations

import math

from fastapi import APIRouter, Depends, Query

from tutorhub.api.deps import get_booking_service
from tutorhub.api.schemas import BookingListResponse, BookingRequest, BookingResponse, PaginationResponse
from tutorhub.services.booking_service import BookingConfirmation, BookingService

router = APIRouter(prefix="/students/{student_id}/bookings", tags=["bookings"])


def _to_response(booking: BookingConfirmation) -> BookingResponse:
    return BookingResponse(
        session_id=booking.session_id,
        title=booking.title,
        date=booking.date,
        start_time=booking.start_time,
        end_time=booking.end_time,
    )


@router.post("", response_model=BookingResponse)
def confirm_booking(
    student_id: str,
    body: BookingRequest,
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return _to_response(service.confirm(body.session_id, body.start_time, student_id))


@router.get("", response_model=BookingListResponse)
def list_bookings(
    student_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    bookings, total = service.list_confirmed(student_id, page=page, limit=limit)
    return BookingListResponse(
        pagination=PaginationResponse(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit)),
        bookings=[_to_response(b) for b in bookings],
    )
