# domain/scheduling/holidays.py
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from tutorhub.domain.scheduling.errors import OverlappingHoliday
from tutorhub.domain.scheduling.model import Holiday


def find_holiday(holidays: Iterable[Holiday], day: date) -> Optional[Holiday]:
    return next((h for h in holidays if h.covers(day)), None)


def ensure_no_overlap(holidays: Iterable[Holiday], candidate: Holiday) -> None:
    for existing in holidays:
        if existing.overlaps(candidate):
            raise OverlappingHoliday("Holiday dates overlap with an existing holiday")


def upcoming(holidays: Iterable[Holiday], today: date) -> List[Holiday]:
    """Holidays that have not ended yet, by start date."""
    return sorted(h for h in holidays if h.end_date >= today)
