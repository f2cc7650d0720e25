from __future__ import annotations

from sqlalchemy.orm import Session

from tutorhub.infra.db.models import UserModel
from tutorhub.infra.repositories.user_repository import Role, UserRecord, UserRepository
from tutorhub.services.errors import UserNotFound


class SqlUserRepository(UserRepository):
    def __init__(self, db: Session) -> None:
        self._db = db

    def get(self, user_id: str) -> UserRecord:
        row = self._db.get(UserModel, user_id)
        if row is None:
            raise UserNotFound(user_id)
        return UserRecord(
            id=row.id,
            role=Role(row.role),
            timezone=row.timezone,
            teacher_id=row.teacher_id,
            name=row.name,
        )

    def upsert(self, user: UserRecord) -> UserRecord:
        model = self._db.get(UserModel, user.id) or UserModel(id=user.id)
        model.role = user.role.value
        model.timezone = user.timezone
        model.teacher_id = user.teacher_id
        model.name = user.name
        self._db.add(model)
        self._db.commit()
        return user
