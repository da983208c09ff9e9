"""User administration schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserCreateRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=256)
    name: str = Field(min_length=1, max_length=255)


class PasswordSetRequest(BaseModel):
    password: str = Field(min_length=1, max_length=256)


class PasswordSetResponse(BaseModel):
    success: bool = True
    temp_password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: str
    created_at: datetime | None = None


class AdminUserResponse(UserResponse):
    temp_password: str | None = None


class ActiveSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    email: str | None = None
    name: str | None = None
    login_at: datetime
    ip_address: str | None = None
    is_active: bool
