"""Dependency providers for API handlers."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from pipeline_crm.auth.guard import Identity, authenticate, extract_bearer_token, require_admin
from pipeline_crm.core.config import Config
from pipeline_crm.database.db import Database
from pipeline_crm.storage.object_store import ObjectStore


def get_settings(request: Request) -> Config:
    return request.app.state.config


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_object_store(request: Request) -> ObjectStore:
    return request.app.state.object_store


def get_db(database: Database = Depends(get_database)) -> Generator[Session, None, None]:
    """Yield one SQLAlchemy session per request."""
    with database.session() as db:
        yield db


def get_current_identity(
    authorization: str | None = Header(default=None, alias="Authorization"),
    settings: Config = Depends(get_settings),
) -> Identity:
    token = extract_bearer_token(authorization)
    return authenticate(token, secret=settings.JWT_SECRET)


def require_admin_identity(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> Identity:
    require_admin(db, identity)
    return identity


def client_address(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",", 1)[0].strip()
    return request.client.host if request.client else None
