# domain/scheduling/conflicts.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Sequence

from tutorhub.domain.scheduling.model import BookedSlot, CandidateSlot


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open interval intersection; touching endpoints do not overlap."""
    return start_a < end_b and end_a > start_b


def filter_conflicts(candidates: Iterable[CandidateSlot], booked: Sequence[BookedSlot]) -> List[CandidateSlot]:
    """
    Drop every candidate that intersects a booked interval.

    Linear scan over the booked list for each candidate. Both sides are
    bounded by the number of slots in one day, so O(n*m) stays small.
    Input order is preserved.
    """
    return [
        slot
        for slot in candidates
        if not any(overlaps(slot.start_time, slot.end_time, b.start_time, b.end_time) for b in booked)
    ]


def find_overlap(booked: Sequence[BookedSlot], start: datetime, end: datetime) -> BookedSlot | None:
    for b in booked:
        if overlaps(start, end, b.start_time, b.end_time):
            return b
    return None
