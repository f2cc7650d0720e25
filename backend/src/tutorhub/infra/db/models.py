from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False)
    teacher_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, default="")


class AvailabilityModel(Base):
    __tablename__ = "teacher_availability"

    teacher_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    weekly: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    holidays: Mapped[list["HolidayModel"]] = relationship(
        back_populates="availability",
        cascade="all, delete-orphan",
        order_by="HolidayModel.start_date",
    )


class HolidayModel(Base):
    __tablename__ = "teacher_holidays"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[str] = mapped_column(ForeignKey("teacher_availability.teacher_id"), nullable=False, index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(String(16), nullable=False)
    note: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    availability: Mapped[AvailabilityModel] = relationship(back_populates="holidays")


class SessionSlotModel(Base):
    __tablename__ = "session_slots"
    __table_args__ = (UniqueConstraint("teacher_id", "date", name="uq_session_slots_teacher_date"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    teacher_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    day: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    session_duration: Mapped[int] = mapped_column(Integer, nullable=False)
    break_duration: Mapped[int] = mapped_column(Integer, nullable=False)
    allowed_student_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    booked_slots: Mapped[list["BookedSlotModel"]] = relationship(
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="BookedSlotModel.start_time",
    )


class BookedSlotModel(Base):
    __tablename__ = "booked_slots"
    # Same-instant double booking is rejected by the database itself
    __table_args__ = (UniqueConstraint("session_id", "start_time", name="uq_booked_slots_session_start"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(ForeignKey("session_slots.id"), nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    booked_by: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    booked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    session: Mapped[SessionSlotModel] = relationship(back_populates="booked_slots")
