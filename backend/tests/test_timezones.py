from datetime import date, datetime, time, timezone

import pytest

from tutorhub.domain.scheduling.errors import InvalidTimeFormat, UnknownTimezone
from tutorhub.domain.scheduling.timezones import anchor, format_date, parse_date, parse_time_of_day, to_zone


def test_parse_time_of_day_accepts_24h_clock() -> None:
    assert parse_time_of_day("00:00") == time(0, 0)
    assert parse_time_of_day("09:05") == time(9, 5)
    assert parse_time_of_day("23:59") == time(23, 59)


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "", "ab:cd", "09:00:00", "09-00"])
def test_parse_time_of_day_rejects_malformed_values(value: str) -> None:
    with pytest.raises(InvalidTimeFormat):
        parse_time_of_day(value)


def test_anchor_uses_zone_offset() -> None:
    assert anchor(date(2025, 1, 5), "09:00", "Asia/Kolkata") == datetime(2025, 1, 5, 3, 30, tzinfo=timezone.utc)
    assert anchor(date(2025, 1, 5), "09:00", "UTC") == datetime(2025, 1, 5, 9, 0, tzinfo=timezone.utc)


def test_anchor_follows_dst_for_the_given_date() -> None:
    # America/New_York switches to EDT on 2025-03-09
    before = anchor(date(2025, 3, 8), "09:00", "America/New_York")
    after = anchor(date(2025, 3, 10), "09:00", "America/New_York")

    assert before == datetime(2025, 3, 8, 14, 0, tzinfo=timezone.utc)
    assert after == datetime(2025, 3, 10, 13, 0, tzinfo=timezone.utc)


def test_anchor_rejects_unknown_zone() -> None:
    with pytest.raises(UnknownTimezone):
        anchor(date(2025, 1, 5), "09:00", "Mars/Olympus_Mons")


def test_anchor_rejects_bad_time() -> None:
    with pytest.raises(InvalidTimeFormat):
        anchor(date(2025, 1, 5), "25:00", "UTC")


def test_to_zone_can_cross_calendar_day() -> None:
    instant = datetime(2025, 1, 5, 20, 0, tzinfo=timezone.utc)
    assert to_zone(instant, "Asia/Kolkata") == (date(2025, 1, 6), "01:30")
    assert to_zone(instant, "America/Los_Angeles") == (date(2025, 1, 5), "12:00")


def test_to_zone_treats_naive_instants_as_utc() -> None:
    assert to_zone(datetime(2025, 1, 5, 3, 30), "Asia/Kolkata") == (date(2025, 1, 5), "09:00")


def test_anchor_and_to_zone_agree() -> None:
    instant = anchor(date(2025, 7, 1), "18:45", "Europe/London")
    assert to_zone(instant, "Europe/London") == (date(2025, 7, 1), "18:45")


def test_dates_use_day_month_year() -> None:
    assert parse_date("05-01-2025") == date(2025, 1, 5)
    assert format_date(date(2025, 1, 5)) == "05-01-2025"


@pytest.mark.parametrize("value", ["2025-01-05", "31-02-2025", "5-1-2025", ""])
def test_parse_date_rejects_malformed_values(value: str) -> None:
    with pytest.raises(InvalidTimeFormat):
        parse_date(value)
