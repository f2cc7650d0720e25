from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest

from tutorhub.api.deps import Services, build_services
from tutorhub.infra.cache.slot_cache import InMemorySlotCache
from tutorhub.infra.repositories.availability_repository import InMemoryAvailabilityRepository
from tutorhub.infra.repositories.session_repository import InMemorySessionRepository
from tutorhub.infra.repositories.user_repository import InMemoryUserRepository, Role
from tutorhub.settings import load_settings

# Sunday
SESSION_DAY = date(2025, 1, 5)


@dataclass
class Env:
    services: Services
    sessions: InMemorySessionRepository
    cache: InMemorySlotCache


@pytest.fixture
def env() -> Env:
    sessions = InMemorySessionRepository()
    cache = InMemorySlotCache()
    services = build_services(
        InMemoryUserRepository(),
        InMemoryAvailabilityRepository(),
        sessions,
        cache,
        load_settings(),
    )
    users = services.users
    users.register("t1", role=Role.TEACHER, timezone="Asia/Kolkata")
    users.register("t2", role=Role.TEACHER, timezone="Asia/Kolkata")
    users.register("s1", role=Role.STUDENT, timezone="Asia/Kolkata", teacher_id="t1")
    users.register("s2", role=Role.STUDENT, timezone="Europe/London", teacher_id="t1")
    users.register("s3", role=Role.STUDENT, timezone="Asia/Kolkata", teacher_id="t2")
    services.availability.set_weekly(
        "t1",
        [
            {"day": "sunday", "start_time": "09:00", "end_time": "11:00"},
            {"day": "monday", "start_time": "14:00", "end_time": "16:00"},
        ],
    )
    return Env(services=services, sessions=sessions, cache=cache)
