"""Access guard: bearer-token identity extraction and the admin check."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from pipeline_crm.auth.jwt import read_token
from pipeline_crm.core.enums import UserRole
from pipeline_crm.core.exceptions import AuthenticationError, AuthorizationError
from pipeline_crm.database.models import User


@dataclass(frozen=True)
class Identity:
    user_id: int
    name: str
    session_id: int | None = None


def extract_bearer_token(authorization: str | None) -> str:
    if authorization is None or not authorization.strip():
        raise AuthenticationError("Not authenticated.")
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise AuthenticationError("Authorization header must use Bearer token.")
    return parts[1].strip()


def _identity_from_claims(claims: dict[str, Any]) -> Identity:
    try:
        session_id = claims.get("sid")
        return Identity(
            user_id=int(claims["sub"]),
            name=str(claims.get("name") or ""),
            session_id=int(session_id) if session_id is not None else None,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token.") from exc


def authenticate(token: str | None, secret: str) -> Identity:
    """Resolve the caller identity from a bearer token or fail immediately."""
    if not token:
        raise AuthenticationError("Not authenticated.")
    try:
        claims = read_token(token, secret=secret)
    except AuthenticationError as exc:
        raise AuthenticationError("Invalid token.") from exc
    return _identity_from_claims(claims)


def require_admin(session: Session, identity: Identity) -> User:
    """Accept only identities whose stored role is admin."""
    user = session.get(User, identity.user_id)
    if user is None or user.role != UserRole.ADMIN.value:
        raise AuthorizationError("Access denied.")
    return user
