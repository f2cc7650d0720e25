from tutorhub.infra.repositories.availability_repository import (
    AvailabilityRecord,
    AvailabilityRepository,
    InMemoryAvailabilityRepository,
)
from tutorhub.infra.repositories.session_repository import (
    InMemorySessionRepository,
    SessionRepository,
    SessionSlotRecord,
)
from tutorhub.infra.repositories.user_repository import InMemoryUserRepository, Role, UserRecord, UserRepository

__all__ = [
    "AvailabilityRecord",
    "AvailabilityRepository",
    "InMemoryAvailabilityRepository",
    "InMemorySessionRepository",
    "InMemoryUserRepository",
    "Role",
    "SessionRepository",
    "SessionSlotRecord",
    "UserRecord",
    "UserRepository",
]
