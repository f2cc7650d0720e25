from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tutorhub.domain.scheduling.build_slots import DEFAULT_MAX_SLOTS, enumerate_slots, render_slots
from tutorhub.domain.scheduling.conflicts import filter_conflicts
from tutorhub.domain.scheduling.model import CandidateSlot, RenderedSlot, TimeWindow
from tutorhub.infra.cache.slot_cache import SLOT_CACHE_TTL_SECONDS, CachedSlots, SlotCache, slot_cache_key
from tutorhub.infra.repositories.session_repository import SessionRepository, SessionSlotRecord
from tutorhub.services.availability_service import AvailabilityService
from tutorhub.services.errors import CacheUnavailable
from tutorhub.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSlots:
    session: SessionSlotRecord
    slots: list[RenderedSlot] = field(default_factory=list)


class SlotService:
    """
    Turns a session's day into bookable slots.

    Listings go through the injected cache (read-through, fail open). The
    booking path uses `live_candidates`, which never touches the cache.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        availability: AvailabilityService,
        users: UserService,
        cache: SlotCache,
        *,
        cache_ttl: int = SLOT_CACHE_TTL_SECONDS,
        max_slots: int = DEFAULT_MAX_SLOTS,
    ) -> None:
        self._sessions = sessions
        self._availability = availability
        self._users = users
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._max_slots = max_slots

    @property
    def max_slots(self) -> int:
        return self._max_slots

    def theoretical_candidates(
        self, session: SessionSlotRecord, window: TimeWindow, teacher_zone: str
    ) -> list[CandidateSlot]:
        return list(
            enumerate_slots(
                session.date,
                window,
                session.session_duration,
                session.break_duration,
                teacher_zone,
                max_slots=self._max_slots,
            )
        )

    def live_candidates(self, session: SessionSlotRecord, window: TimeWindow, teacher_zone: str) -> list[CandidateSlot]:
        return filter_conflicts(self.theoretical_candidates(session, window, teacher_zone), session.booked_slots)

    def list_slots(
        self,
        session: SessionSlotRecord,
        viewer_zone: str,
        *,
        counterpart_zone: str | None = None,
    ) -> list[RenderedSlot]:
        teacher_zone = self._users.timezone_of(self._users.get(session.teacher_id))
        window = self._availability.window_for(session.teacher_id, session.date)

        key = self._key(session, window, teacher_zone, viewer_zone)
        cached = self._cache_get(key)
        if cached is not None:
            logger.debug("Slot cache hit %s", key)
            return [RenderedSlot.from_dict(item) for item in cached]

        logger.debug("Slot cache miss %s", key)
        candidates = self.live_candidates(session, window, teacher_zone)
        rendered = render_slots(candidates, viewer_zone)
        self._cache_put(key, [slot.to_dict() for slot in rendered])

        other_zone = counterpart_zone or teacher_zone
        if other_zone != viewer_zone:
            other_key = self._key(session, window, teacher_zone, other_zone)
            self._cache_put(other_key, [slot.to_dict() for slot in render_slots(candidates, other_zone)])
        return rendered

    def list_student_sessions(
        self, student_id: str, *, page: int = 1, limit: int = 10
    ) -> tuple[list[SessionSlots], int]:
        """
        Sessions the student may see, paged after dropping days the teacher no
        longer has a window for. Sessions on a holiday are listed with no slots.
        """
        student = self._users.require_student(student_id)
        teacher_id = self._users.linked_teacher_id(student)
        student_zone = self._users.timezone_of(student)
        teacher_zone = self._users.timezone_of(self._users.get(teacher_id))

        record = self._availability.get_record(teacher_id)
        sessions = [
            s
            for s in self._sessions.list_visible_to_student(teacher_id, student.id)
            if record.weekly.window_for(s.date) is not None
        ]
        offset = (page - 1) * limit

        out: list[SessionSlots] = []
        for session in sessions[offset:offset + limit]:
            if self._availability.holiday_on(teacher_id, session.date) is not None:
                out.append(SessionSlots(session=session))
                continue
            slots = self.list_slots(session, student_zone, counterpart_zone=teacher_zone)
            out.append(SessionSlots(session=session, slots=slots))
        return out, len(sessions)

    def _key(self, session: SessionSlotRecord, window: TimeWindow, teacher_zone: str, viewer_zone: str) -> str:
        return slot_cache_key(
            teacher_id=session.teacher_id,
            session_id=session.id,
            day=session.date,
            window_signature=f"{window.signature()}:{session.session_duration}+{session.break_duration}",
            bookings_version=len(session.booked_slots),
            anchor_zone=teacher_zone,
            viewer_zone=viewer_zone,
        )

    def _cache_get(self, key: str) -> CachedSlots | None:
        try:
            return self._cache.get(key)
        except CacheUnavailable as exc:
            logger.warning("Slot cache unavailable on read, computing uncached: %s", exc)
            return None

    def _cache_put(self, key: str, slots: CachedSlots) -> None:
        try:
            self._cache.put(key, slots, self._cache_ttl)
        except CacheUnavailable as exc:
            logger.warning("Slot cache unavailable on write, skipping: %s", exc)
