"""Identifier generation helpers."""

from __future__ import annotations

import time
import uuid


def new_attachment_key(prospect_id: int, now: float | None = None) -> str:
    """Object-store key for a prospect PDF, unique per prospect and upload time."""
    millis = int((now if now is not None else time.time()) * 1000)
    return f"prospects/{prospect_id}/{millis}-{uuid.uuid4().hex[:12]}.pdf"
