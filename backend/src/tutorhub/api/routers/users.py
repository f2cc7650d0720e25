from __future__ import annotations

from fastapi import APIRouter, Depends

from tutorhub.api.deps import get_user_service
from tutorhub.api.schemas import UserResponse, UserUpsertRequest
from tutorhub.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.put("/{user_id}", response_model=UserResponse)
def upsert_user(
    user_id: str,
    body: UserUpsertRequest,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = service.register(
        user_id,
        role=body.role,
        timezone=body.timezone,
        teacher_id=body.teacher_id,
        name=body.name,
    )
    return UserResponse(id=user.id, role=user.role, timezone=user.timezone, teacher_id=user.teacher_id, name=user.name)
