from datetime import date

import pytest

from tutorhub.domain.scheduling.errors import (
    InvalidAvailability,
    InvalidHoliday,
    InvalidTimeFormat,
    OverlappingHoliday,
)
from tutorhub.domain.scheduling.model import HolidayReason, Weekday
from tutorhub.services.errors import AvailabilityNotSet, NotAuthorized


def test_weekly_availability_is_replaced_not_merged(env) -> None:
    service = env.services.availability
    service.set_weekly("t1", [{"day": "Friday", "start_time": "10:00", "end_time": "12:00"}])

    weekly = service.get_weekly("t1")
    assert list(weekly.days) == [Weekday.FRIDAY]
    assert weekly.to_entries() == [{"day": "friday", "start_time": "10:00", "end_time": "12:00"}]


def test_weekly_availability_validation(env) -> None:
    service = env.services.availability
    with pytest.raises(InvalidAvailability):
        service.set_weekly("t1", [])
    with pytest.raises(InvalidAvailability):
        service.set_weekly("t1", [{"day": "funday", "start_time": "10:00", "end_time": "12:00"}])
    with pytest.raises(InvalidAvailability):
        service.set_weekly(
            "t1",
            [
                {"day": "monday", "start_time": "10:00", "end_time": "12:00"},
                {"day": "MONDAY", "start_time": "13:00", "end_time": "14:00"},
            ],
        )
    with pytest.raises(InvalidTimeFormat):
        service.set_weekly("t1", [{"day": "monday", "start_time": "12:00", "end_time": "10:00"}])
    with pytest.raises(InvalidTimeFormat):
        service.set_weekly("t1", [{"day": "monday", "start_time": "7:00", "end_time": "10:00"}])


def test_only_teachers_set_availability(env) -> None:
    with pytest.raises(NotAuthorized):
        env.services.availability.set_weekly("s1", [{"day": "monday", "start_time": "10:00", "end_time": "12:00"}])


def test_window_for_unknown_weekday(env) -> None:
    service = env.services.availability
    assert service.window_for("t1", date(2025, 1, 5)).signature() == "0900-1100"
    with pytest.raises(AvailabilityNotSet):
        service.window_for("t1", date(2025, 1, 7))
    with pytest.raises(AvailabilityNotSet):
        service.window_for("t2", date(2025, 1, 5))


def test_holidays_cannot_overlap(env) -> None:
    service = env.services.availability
    service.add_holiday("t1", start_date=date(2025, 5, 1), end_date=date(2025, 5, 3), reason="Public")

    with pytest.raises(OverlappingHoliday):
        service.add_holiday("t1", start_date=date(2025, 5, 3), end_date=date(2025, 5, 4), reason="personal")
    with pytest.raises(OverlappingHoliday):
        service.add_holiday("t1", start_date=date(2025, 4, 1), end_date=date(2025, 6, 1), reason="personal")

    holidays = service.add_holiday(
        "t1", start_date=date(2025, 5, 4), end_date=date(2025, 5, 4), reason="personal", note="dentist"
    )
    assert [(h.start_date, h.reason) for h in holidays] == [
        (date(2025, 5, 1), HolidayReason.PUBLIC),
        (date(2025, 5, 4), HolidayReason.PERSONAL),
    ]
    assert holidays[1].note == "dentist"


def test_holiday_validation(env) -> None:
    service = env.services.availability
    with pytest.raises(InvalidHoliday):
        service.add_holiday("t1", start_date=date(2025, 5, 3), end_date=date(2025, 5, 1), reason="personal")
    with pytest.raises(InvalidHoliday):
        service.add_holiday("t1", start_date=date(2025, 5, 1), end_date=date(2025, 5, 1), reason="vacation")


def test_list_holidays_only_returns_upcoming(env) -> None:
    service = env.services.availability
    service.add_holiday("t1", start_date=date(2025, 3, 1), end_date=date(2025, 3, 2), reason="public")
    service.add_holiday("t1", start_date=date(2025, 1, 1), end_date=date(2025, 1, 10), reason="personal")
    service.add_holiday("t1", start_date=date(2024, 12, 1), end_date=date(2024, 12, 2), reason="personal")

    upcoming = service.list_holidays("t1", today=date(2025, 1, 5))
    assert [h.start_date for h in upcoming] == [date(2025, 1, 1), date(2025, 3, 1)]
    assert service.list_holidays("t2") == []


def test_student_sees_their_teachers_availability(env) -> None:
    record = env.services.availability.get_for_student("s1")
    assert record.teacher_id == "t1"
    assert Weekday.SUNDAY in record.weekly.days

    with pytest.raises(AvailabilityNotSet):
        env.services.availability.get_for_student("s3")
    with pytest.raises(NotAuthorized):
        env.services.availability.get_for_student("t1")
