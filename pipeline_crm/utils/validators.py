"""Deterministic sanitizers shared by services."""

from __future__ import annotations


def sanitize_text(value: str | None, max_len: int = 20000) -> str | None:
    """Strip NUL bytes and whitespace; empty strings become None."""
    if value is None:
        return None
    cleaned = str(value).replace("\x00", "").strip()
    cleaned = cleaned[:max_len]
    return cleaned or None


def normalize_email(value: str) -> str:
    return value.strip().lower()
