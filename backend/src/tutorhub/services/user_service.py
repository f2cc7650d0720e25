from __future__ import annotations

from tutorhub.domain.scheduling.timezones import get_zone
from tutorhub.infra.repositories.user_repository import Role, UserRecord, UserRepository
from tutorhub.services.errors import NotAuthorized, UserNotFound


class UserService:
    """Read side of the identities the auth layer hands over, plus a registration seam."""

    def __init__(self, repository: UserRepository, *, default_timezone: str = "Asia/Kolkata") -> None:
        self._repository = repository
        self._default_timezone = default_timezone

    def register(
        self,
        user_id: str,
        *,
        role: Role,
        timezone: str | None = None,
        teacher_id: str | None = None,
        name: str = "",
    ) -> UserRecord:
        zone = timezone or self._default_timezone
        get_zone(zone)
        if role == Role.STUDENT:
            if not teacher_id:
                raise NotAuthorized("A student must be linked to a teacher")
            self.require_teacher(teacher_id)
        else:
            teacher_id = None
        user = UserRecord(id=user_id, role=role, timezone=zone, teacher_id=teacher_id, name=name.strip())
        return self._repository.upsert(user)

    def get(self, user_id: str) -> UserRecord:
        return self._repository.get(user_id)

    def require_teacher(self, user_id: str) -> UserRecord:
        user = self._repository.get(user_id)
        if user.role != Role.TEACHER:
            raise NotAuthorized("Only teachers can do this")
        return user

    def require_student(self, user_id: str) -> UserRecord:
        try:
            user = self._repository.get(user_id)
        except UserNotFound as exc:
            raise NotAuthorized("Not allowed") from exc
        if user.role != Role.STUDENT or not user.teacher_id:
            raise NotAuthorized("Not allowed")
        return user

    def linked_teacher_id(self, student: UserRecord) -> str:
        if not student.teacher_id:
            raise NotAuthorized("Not allowed")
        return student.teacher_id

    def timezone_of(self, user: UserRecord) -> str:
        return user.timezone or self._default_timezone
