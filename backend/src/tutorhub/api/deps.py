from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass

from fastapi import Depends

from tutorhub.infra.cache.slot_cache import InMemorySlotCache, NullSlotCache, RedisSlotCache, SlotCache
from tutorhub.infra.repositories.availability_repository import (
    AvailabilityRepository,
    InMemoryAvailabilityRepository,
)
from tutorhub.infra.repositories.session_repository import InMemorySessionRepository, SessionRepository
from tutorhub.infra.repositories.user_repository import InMemoryUserRepository, UserRepository
from tutorhub.services.availability_service import AvailabilityService
from tutorhub.services.booking_service import BookingService
from tutorhub.services.session_service import SessionService
from tutorhub.services.slot_service import SlotService
from tutorhub.services.user_service import UserService
from tutorhub.settings import Settings, load_settings

settings = load_settings()


@dataclass(frozen=True)
class Services:
    users: UserService
    availability: AvailabilityService
    slots: SlotService
    sessions: SessionService
    bookings: BookingService


def build_cache(active: Settings) -> SlotCache:
    if active.cache_backend == "redis":
        return RedisSlotCache.from_url(active.redis_url)
    if active.cache_backend == "none":
        return NullSlotCache()
    return InMemorySlotCache()


def build_services(
    users_repository: UserRepository,
    availability_repository: AvailabilityRepository,
    session_repository: SessionRepository,
    cache: SlotCache,
    active: Settings,
) -> Services:
    users = UserService(users_repository, default_timezone=active.default_timezone)
    availability = AvailabilityService(availability_repository, users)
    slots = SlotService(
        session_repository,
        availability,
        users,
        cache,
        cache_ttl=active.slot_cache_ttl_seconds,
        max_slots=active.max_slots_per_day,
    )
    return Services(
        users=users,
        availability=availability,
        slots=slots,
        sessions=SessionService(session_repository, availability, slots, users),
        bookings=BookingService(session_repository, availability, slots, users),
    )


_slot_cache = build_cache(settings)
_memory_users = InMemoryUserRepository()
_memory_availability = InMemoryAvailabilityRepository()
_memory_sessions = InMemorySessionRepository()


def _get_memory_services() -> Services:
    return build_services(_memory_users, _memory_availability, _memory_sessions, _slot_cache, settings)


def _get_postgres_services() -> Generator[Services, None, None]:
    from tutorhub.infra.db.session import get_db
    from tutorhub.infra.repositories.sql_availability_repository import SqlAvailabilityRepository
    from tutorhub.infra.repositories.sql_session_repository import SqlSessionRepository
    from tutorhub.infra.repositories.sql_user_repository import SqlUserRepository

    for db in get_db():
        yield build_services(
            SqlUserRepository(db),
            SqlAvailabilityRepository(db),
            SqlSessionRepository(db),
            _slot_cache,
            settings,
        )


if settings.db_backend == "postgres":
    get_services = _get_postgres_services
else:
    get_services = _get_memory_services


def get_user_service(services: Services = Depends(get_services)) -> UserService:
    return services.users


def get_availability_service(services: Services = Depends(get_services)) -> AvailabilityService:
    return services.availability


def get_slot_service(services: Services = Depends(get_services)) -> SlotService:
    return services.slots


def get_session_service(services: Services = Depends(get_services)) -> SessionService:
    return services.sessions


def get_booking_service(services: Services = Depends(get_services)) -> BookingService:
    return services.bookings
