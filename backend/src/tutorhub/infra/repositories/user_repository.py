from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from threading import Lock
from typing import Protocol

from tutorhub.services.errors import UserNotFound


class Role(str, Enum):
    TEACHER = "teacher"
    STUDENT = "student"


@dataclass
class UserRecord:
    """Identity resolved by the auth layer before it reaches the scheduler."""
    id: str
    role: Role
    timezone: str
    teacher_id: str | None = None
    name: str = ""


class UserRepository(Protocol):
    def get(self, user_id: str) -> UserRecord: ...

    def upsert(self, user: UserRecord) -> UserRecord: ...


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: dict[str, UserRecord] = {}

    def get(self, user_id: str) -> UserRecord:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return replace(user)

    def upsert(self, user: UserRecord) -> UserRecord:
        with self._lock:
            self._users[user.id] = replace(user)
        return user
