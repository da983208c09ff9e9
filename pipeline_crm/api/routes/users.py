"""Admin-only user management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pipeline_crm.api.dependencies import get_db, get_settings, require_admin_identity
from pipeline_crm.auth.guard import Identity
from pipeline_crm.core.config import Config
from pipeline_crm.schemas.common import SuccessResponse
from pipeline_crm.schemas.users import (
    ActiveSessionResponse,
    AdminUserResponse,
    PasswordSetRequest,
    PasswordSetResponse,
    UserCreateRequest,
    UserResponse,
)
from pipeline_crm.services.session_service import SessionService
from pipeline_crm.services.user_service import UserService

router = APIRouter(tags=["users"])


@router.get("/users", response_model=list[AdminUserResponse])
def list_users(
    _: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
) -> list[AdminUserResponse]:
    return [AdminUserResponse.model_validate(user) for user in UserService(db).list_users()]


@router.post("/users", response_model=UserResponse)
def create_user(
    payload: UserCreateRequest,
    _: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
    settings: Config = Depends(get_settings),
) -> UserResponse:
    user = UserService(db, admin_email=settings.ADMIN_EMAIL).create_user(
        email=payload.email, password=payload.password, name=payload.name
    )
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: int,
    identity: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    UserService(db).delete_user(actor_id=identity.user_id, user_id=user_id)
    return SuccessResponse()


@router.put("/users/{user_id}/password", response_model=PasswordSetResponse)
def set_user_password(
    user_id: int,
    payload: PasswordSetRequest,
    _: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
) -> PasswordSetResponse:
    password = UserService(db).set_password(user_id, payload.password)
    return PasswordSetResponse(temp_password=password)


@router.post("/users/{user_id}/temp-password", response_model=PasswordSetResponse)
def generate_temp_password(
    user_id: int,
    _: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
) -> PasswordSetResponse:
    return PasswordSetResponse(temp_password=UserService(db).issue_temp_password(user_id))


@router.get("/admin/active-users", response_model=list[ActiveSessionResponse])
def list_active_users(
    _: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
) -> list[ActiveSessionResponse]:
    return [ActiveSessionResponse.model_validate(row) for row in SessionService(db).list_active_sessions()]
