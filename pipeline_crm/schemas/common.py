"""Common schema module."""

from __future__ import annotations

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class CreatedResponse(BaseModel):
    id: int
    message: str


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorEnvelope(BaseModel):
    error: str
