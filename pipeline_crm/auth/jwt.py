"""Signed bearer tokens (HS256 JWT) carrying the caller's id, name and session."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from datetime import datetime, timedelta, timezone
from typing import Any

from pipeline_crm.core.exceptions import AuthenticationError

# Header segment is identical for every token this service issues.
_HEADER_SEGMENT = base64.urlsafe_b64encode(b'{"alg":"HS256","typ":"JWT"}').decode("ascii").rstrip("=")


def _segment(payload: dict[str, Any]) -> str:
    raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _signature(signing_input: str, secret: str) -> str:
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    digest = hmac.new(secret.encode("utf-8"), signing_input.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def issue_token(claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
    now = datetime.now(timezone.utc)
    body = {**claims, "iat": int(now.timestamp()), "exp": int((now + ttl).timestamp())}
    signing_input = f"{_HEADER_SEGMENT}.{_segment(body)}"
    return f"{signing_input}.{_signature(signing_input, secret)}"


def read_token(token: str, secret: str) -> dict[str, Any]:
    """Return the claims of a well-signed, unexpired token."""
    parts = token.split(".")
    if len(parts) != 3:
        raise AuthenticationError("Invalid token format.")
    signing_input = f"{parts[0]}.{parts[1]}"
    if not hmac.compare_digest(_signature(signing_input, secret).encode("utf-8"), parts[2].encode("utf-8")):
        raise AuthenticationError("Invalid token signature.")

    try:
        padded = parts[1] + "=" * (-len(parts[1]) % 4)
        claims = json.loads(base64.urlsafe_b64decode(padded.encode("utf-8")))
        expires_at = int(claims["exp"])
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token payload.") from exc
    if expires_at < int(datetime.now(timezone.utc).timestamp()):
        raise AuthenticationError("Token has expired.")
    return claims


def create_access_token(
    user_id: int,
    name: str,
    secret: str,
    ttl_days: int = 30,
    session_id: int | None = None,
) -> str:
    """Bearer token for a logged-in user; ``sid`` links it to the login session."""
    claims: dict[str, Any] = {"sub": str(user_id), "name": name}
    if session_id is not None:
        claims["sid"] = session_id
    return issue_token(claims, secret=secret, ttl=timedelta(days=ttl_days))
