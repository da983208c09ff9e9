"""Interlocutor schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class InterlocutorWriteRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    role: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=64)
    is_principal: bool = False
    is_decision_maker: bool = False


class InterlocutorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    prospect_id: int
    name: str
    role: str | None = None
    email: str | None = None
    phone: str | None = None
    is_principal: bool = False
    is_decision_maker: bool = False
    created_at: datetime | None = None
