from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from tutorhub.infra.repositories.user_repository import Role


class ErrorResponse(BaseModel):
    kind: str
    detail: str


class PaginationResponse(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


# ---------- Users ----------

class UserUpsertRequest(BaseModel):
    role: Role
    timezone: str | None = None
    teacher_id: str | None = None
    name: str = Field(default="", max_length=120)


class UserResponse(BaseModel):
    id: str
    role: Role
    timezone: str
    teacher_id: str | None = None
    name: str = ""


# ---------- Availability ----------

class AvailabilityEntry(BaseModel):
    day: str
    start_time: str
    end_time: str


class WeeklyAvailabilityRequest(BaseModel):
    weekly_availability: list[AvailabilityEntry] = Field(min_length=1)


class WeeklyAvailabilityResponse(BaseModel):
    weekly_availability: list[AvailabilityEntry]


class HolidayRequest(BaseModel):
    start_date: str
    end_date: str
    reason: str
    note: str | None = None


class HolidayResponse(BaseModel):
    start_date: str
    end_date: str
    reason: str
    note: str = ""


class HolidayListResponse(BaseModel):
    holidays: list[HolidayResponse]


class TeacherAvailabilityResponse(BaseModel):
    teacher_id: str
    weekly_availability: list[AvailabilityEntry]
    holidays: list[HolidayResponse]


# ---------- Sessions ----------

class SlotResponse(BaseModel):
    start_time: str
    end_time: str


class SessionCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    date: str
    session_duration: int
    break_duration: int = 0
    student_id: str | None = None
    viewer_timezone: str | None = None


class SessionCreatedResponse(BaseModel):
    session_id: str
    title: str
    date: str
    kind: str
    slots: list[SlotResponse]


class SessionSummaryResponse(BaseModel):
    id: str
    title: str
    date: str
    kind: str
    session_duration: int
    break_duration: int
    allowed_student_id: str | None = None
    booked_count: int
    created_at: datetime


class TeacherSessionsResponse(BaseModel):
    pagination: PaginationResponse
    sessions: list[SessionSummaryResponse]


class StudentSessionResponse(BaseModel):
    session_id: str
    title: str
    date: str
    weekday: str
    kind: str
    slots: list[SlotResponse]


class StudentSessionsResponse(BaseModel):
    page: int
    limit: int
    count: int
    total: int
    sessions: list[StudentSessionResponse]


# ---------- Bookings ----------

class BookingRequest(BaseModel):
    session_id: str
    start_time: str


class BookingResponse(BaseModel):
    session_id: str
    title: str
    date: str
    start_time: str
    end_time: str


class BookingListResponse(BaseModel):
    pagination: PaginationResponse
    bookings: list[BookingResponse]
