from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from tutorhub.main import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def ids(client: TestClient) -> dict[str, str]:
    """Fresh teacher/student pair; the in-memory backend is shared across requests."""
    suffix = uuid4().hex[:8]
    teacher, student, other = f"t-{suffix}", f"s-{suffix}", f"o-{suffix}"

    assert client.put(f"/users/{teacher}", json={"role": "teacher", "timezone": "Asia/Kolkata"}).status_code == 200
    assert (
        client.put(
            f"/users/{student}",
            json={"role": "student", "timezone": "Europe/London", "teacher_id": teacher},
        ).status_code
        == 200
    )
    assert (
        client.put(f"/users/{other}", json={"role": "student", "teacher_id": teacher}).status_code == 200
    )
    response = client.put(
        f"/teachers/{teacher}/availability",
        json={"weekly_availability": [{"day": "Sunday", "start_time": "09:00", "end_time": "11:00"}]},
    )
    assert response.status_code == 200
    return {"teacher": teacher, "student": student, "other": other}


def _create_session(client: TestClient, teacher: str, **overrides):
    body = {"title": "Algebra", "date": "05-01-2025", "session_duration": 30, "break_duration": 10}
    body.update(overrides)
    return client.post(f"/teachers/{teacher}/sessions", json=body)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_user_defaults_to_platform_timezone(client: TestClient, ids: dict[str, str]) -> None:
    response = client.put(f"/users/{ids['other']}", json={"role": "student", "teacher_id": ids["teacher"]})
    assert response.json()["timezone"] == "Asia/Kolkata"


def test_weekly_availability_endpoints(client: TestClient, ids: dict[str, str]) -> None:
    teacher = ids["teacher"]
    response = client.get(f"/teachers/{teacher}/availability")
    assert response.json() == {
        "weekly_availability": [{"day": "sunday", "start_time": "09:00", "end_time": "11:00"}]
    }

    bad_day = client.put(
        f"/teachers/{teacher}/availability",
        json={"weekly_availability": [{"day": "someday", "start_time": "09:00", "end_time": "11:00"}]},
    )
    assert bad_day.status_code == 422
    assert bad_day.json()["kind"] == "InvalidAvailability"

    bad_time = client.put(
        f"/teachers/{teacher}/availability",
        json={"weekly_availability": [{"day": "monday", "start_time": "9:00", "end_time": "11:00"}]},
    )
    assert bad_time.status_code == 422
    assert bad_time.json()["kind"] == "InvalidTimeFormat"

    assert client.put(f"/teachers/{teacher}/availability", json={"weekly_availability": []}).status_code == 422

    as_student = client.put(
        f"/teachers/{ids['student']}/availability",
        json={"weekly_availability": [{"day": "monday", "start_time": "09:00", "end_time": "11:00"}]},
    )
    assert as_student.status_code == 403


def test_holiday_endpoints(client: TestClient, ids: dict[str, str]) -> None:
    teacher = ids["teacher"]
    created = client.post(
        f"/teachers/{teacher}/holidays",
        json={"start_date": "01-06-2099", "end_date": "03-06-2099", "reason": "public"},
    )
    assert created.status_code == 201
    assert created.json()["holidays"] == [
        {"start_date": "01-06-2099", "end_date": "03-06-2099", "reason": "public", "note": ""}
    ]

    overlap = client.post(
        f"/teachers/{teacher}/holidays",
        json={"start_date": "03-06-2099", "end_date": "05-06-2099", "reason": "personal"},
    )
    assert overlap.status_code == 409
    assert overlap.json()["kind"] == "OverlappingHoliday"

    bad_date = client.post(
        f"/teachers/{teacher}/holidays",
        json={"start_date": "2099-06-10", "end_date": "11-06-2099", "reason": "personal"},
    )
    assert bad_date.status_code == 422

    listed = client.get(f"/teachers/{teacher}/holidays")
    assert [h["start_date"] for h in listed.json()["holidays"]] == ["01-06-2099"]

    seen_by_student = client.get(f"/students/{ids['student']}/teacher-availability")
    assert seen_by_student.status_code == 200
    assert seen_by_student.json()["teacher_id"] == teacher
    assert len(seen_by_student.json()["holidays"]) == 1


def test_session_and_booking_flow(client: TestClient, ids: dict[str, str]) -> None:
    teacher, student, other = ids["teacher"], ids["student"], ids["other"]

    created = _create_session(client, teacher, viewer_timezone="Europe/London")
    assert created.status_code == 201
    payload = created.json()
    assert payload["kind"] == "common"
    assert payload["slots"][0] == {"start_time": "03:30", "end_time": "04:00"}
    session_id = payload["session_id"]

    duplicate = _create_session(client, teacher)
    assert duplicate.status_code == 409
    assert duplicate.json()["kind"] == "DuplicateSessionForDate"

    listing = client.get(f"/students/{student}/sessions")
    assert listing.status_code == 200
    sessions = listing.json()["sessions"]
    assert (listing.json()["count"], listing.json()["total"]) == (1, 1)
    assert [s["weekday"] for s in sessions] == ["sunday"]
    assert len(sessions[0]["slots"]) == 3

    booked = client.post(f"/students/{student}/bookings", json={"session_id": session_id, "start_time": "04:10"})
    assert booked.status_code == 200
    assert booked.json() == {
        "session_id": session_id,
        "title": "Algebra",
        "date": "05-01-2025",
        "start_time": "04:10",
        "end_time": "04:40",
    }

    again = client.post(f"/students/{other}/bookings", json={"session_id": session_id, "start_time": "09:40"})
    assert again.status_code == 409
    assert again.json()["kind"] == "SlotAlreadyBooked"

    invalid = client.post(f"/students/{other}/bookings", json={"session_id": session_id, "start_time": "09:10"})
    assert invalid.status_code == 422
    assert invalid.json()["kind"] == "InvalidSlot"

    missing = client.post(f"/students/{other}/bookings", json={"session_id": "nope", "start_time": "09:00"})
    assert missing.status_code == 404

    mine = client.get(f"/students/{student}/bookings")
    assert mine.json()["pagination"] == {"total": 1, "page": 1, "limit": 10, "total_pages": 1}

    after = client.get(f"/students/{other}/sessions").json()["sessions"][0]["slots"]
    assert [s["start_time"] for s in after] == ["09:00", "10:20"]

    blocked = client.delete(f"/teachers/{teacher}/sessions/{session_id}")
    assert blocked.status_code == 409
    assert blocked.json()["kind"] == "SessionHasBookings"


def test_teacher_session_listing(client: TestClient, ids: dict[str, str]) -> None:
    teacher = ids["teacher"]
    assert _create_session(client, teacher).status_code == 201
    personal = _create_session(client, teacher, date="12-01-2025", student_id=ids["student"])
    assert personal.json()["kind"] == "personal"

    everything = client.get(f"/teachers/{teacher}/sessions").json()
    assert everything["pagination"]["total"] == 2

    only_personal = client.get(f"/teachers/{teacher}/sessions", params={"type": "personal"}).json()
    assert [s["date"] for s in only_personal["sessions"]] == ["12-01-2025"]

    other_listing = client.get(f"/students/{ids['other']}/sessions").json()
    assert [s["date"] for s in other_listing["sessions"]] == ["05-01-2025"]

    session_id = everything["sessions"][0]["id"]
    assert client.delete(f"/teachers/{teacher}/sessions/{session_id}").status_code == 204
    assert client.get(f"/teachers/{teacher}/sessions").json()["pagination"]["total"] == 1


def test_session_errors(client: TestClient, ids: dict[str, str]) -> None:
    teacher = ids["teacher"]

    not_available = _create_session(client, teacher, date="06-01-2025")
    assert not_available.status_code == 400
    assert not_available.json()["kind"] == "AvailabilityNotSet"

    bad_duration = _create_session(client, teacher, session_duration=0)
    assert bad_duration.status_code == 422
    assert bad_duration.json()["kind"] == "InvalidDuration"

    bad_date = _create_session(client, teacher, date="31-02-2025")
    assert bad_date.status_code == 422
    assert bad_date.json()["kind"] == "InvalidTimeFormat"

    client.post(
        f"/teachers/{teacher}/holidays",
        json={"start_date": "19-01-2025", "end_date": "19-01-2025", "reason": "personal"},
    )
    on_holiday = _create_session(client, teacher, date="19-01-2025")
    assert on_holiday.status_code == 409
    assert on_holiday.json()["kind"] == "HolidayConflict"

    stranger = _create_session(client, teacher, student_id="ghost")
    assert stranger.status_code == 403
