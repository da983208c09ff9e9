"""Auth endpoints: registration, login, logout and self-service profile."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from pipeline_crm.api.dependencies import client_address, get_current_identity, get_db, get_settings
from pipeline_crm.auth.guard import Identity
from pipeline_crm.auth.jwt import create_access_token
from pipeline_crm.core.config import Config
from pipeline_crm.database.models import User
from pipeline_crm.schemas.auth import (
    AuthUser,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
)
from pipeline_crm.schemas.common import SuccessResponse
from pipeline_crm.services.session_service import SessionService
from pipeline_crm.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_user(user: User) -> AuthUser:
    return AuthUser(id=user.id, email=user.email, name=user.name, role=user.role)


def _issue_token(db: Session, user: User, settings: Config, request: Request) -> TokenResponse:
    session_row = SessionService(db).start_session(user, ip_address=client_address(request))
    token = create_access_token(
        user_id=user.id,
        name=user.name,
        secret=settings.JWT_SECRET,
        ttl_days=settings.JWT_TTL_DAYS,
        session_id=session_row.id,
    )
    return TokenResponse(token=token, user=_auth_user(user))


@router.post("/register", response_model=TokenResponse)
def register(
    payload: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    settings: Config = Depends(get_settings),
) -> TokenResponse:
    user = UserService(db, admin_email=settings.ADMIN_EMAIL).register(
        email=payload.email, password=payload.password, name=payload.name
    )
    return _issue_token(db, user, settings, request)


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    settings: Config = Depends(get_settings),
) -> TokenResponse:
    user = UserService(db, admin_email=settings.ADMIN_EMAIL).verify_credentials(payload.email, payload.password)
    response = _issue_token(db, user, settings, request)
    logger.info("auth.login.succeeded", extra={"event": "auth.login.succeeded", "user_id": user.id})
    return response


@router.post("/logout", response_model=SuccessResponse)
def logout(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    SessionService(db).end_session(identity.user_id, identity.session_id)
    return SuccessResponse()


@router.get("/me", response_model=AuthUser)
def me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> AuthUser:
    return _auth_user(UserService(db).get_user(identity.user_id))


@router.put("/password", response_model=SuccessResponse)
def change_password(
    payload: PasswordChangeRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    UserService(db).change_own_password(identity.user_id, payload.current_password, payload.new_password)
    return SuccessResponse()
