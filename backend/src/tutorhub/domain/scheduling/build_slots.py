# domain/scheduling/build_slots.py
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterator, List

from tutorhub.domain.scheduling.errors import InvalidDuration
from tutorhub.domain.scheduling.model import CandidateSlot, RenderedSlot, TimeWindow
from tutorhub.domain.scheduling.timezones import exists, format_time_of_day, get_zone, localize

logger = logging.getLogger(__name__)

# 24h at 5 minute granularity
DEFAULT_MAX_SLOTS = 288


def count_slots(window: TimeWindow, session_duration: int, break_duration: int) -> int:
    """Number of whole sessions that fit in the window, measured in wall-clock minutes."""
    if session_duration <= 0:
        return 0
    minutes = (window.end_time.hour * 60 + window.end_time.minute) - (
        window.start_time.hour * 60 + window.start_time.minute
    )
    if minutes < session_duration:
        return 0
    return 1 + (minutes - session_duration) // (session_duration + break_duration)


def enumerate_slots(
    day: date,
    window: TimeWindow,
    session_duration: int,
    break_duration: int,
    anchor_zone: str,
    *,
    max_slots: int = DEFAULT_MAX_SLOTS,
) -> Iterator[CandidateSlot]:
    """
    Walk the day's window and yield candidate slots as UTC instants.

    Slots are laid out on the anchor zone's wall clock: each lasts
    `session_duration` minutes and the next one starts `break_duration`
    minutes after the previous one ends. A slot that would end after the
    window's end is never produced.

    Arguments are checked eagerly; the returned iterator is single use.
    """
    if break_duration < 0:
        raise InvalidDuration(f"breakDuration must be >= 0 (got {break_duration})")
    zone = get_zone(anchor_zone)
    if session_duration <= 0:
        return iter(())

    expected = count_slots(window, session_duration, break_duration)
    if expected > max_slots:
        logger.warning(
            "Rejected enumeration of %s slots (limit %s) for window %s, session=%s break=%s",
            expected,
            max_slots,
            window.signature(),
            session_duration,
            break_duration,
        )
        raise InvalidDuration(
            f"sessionDuration={session_duration} and breakDuration={break_duration} "
            f"produce {expected} slots, more than the allowed {max_slots} per day"
        )

    return _walk(
        datetime.combine(day, window.start_time),
        datetime.combine(day, window.end_time),
        timedelta(minutes=session_duration),
        timedelta(minutes=session_duration + break_duration),
        zone,
    )


def _walk(
    current: datetime,
    window_end: datetime,
    length: timedelta,
    step: timedelta,
    zone: tzinfo,
) -> Iterator[CandidateSlot]:
    while current + length <= window_end:
        end = current + length
        # Slots touching a DST gap have no well defined UTC interval
        if not (exists(current, zone) and exists(end, zone)):
            current += step
            continue
        yield CandidateSlot(start_time=localize(current, zone), end_time=localize(end, zone))
        current += step


def render_slots(candidates: List[CandidateSlot], viewer_zone: str) -> List[RenderedSlot]:
    tz = get_zone(viewer_zone)
    return [
        RenderedSlot(
            start_time=format_time_of_day(slot.start_time.astimezone(tz)),
            end_time=format_time_of_day(slot.end_time.astimezone(tz)),
        )
        for slot in candidates
    ]
