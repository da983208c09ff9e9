"""Prospect request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ProspectWriteRequest(BaseModel):
    """Body of both create and full-replace update."""

    name: str = Field(min_length=1, max_length=255)
    contact_name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=64)
    status: str | None = Field(default=None, max_length=80)
    setup_amount: float | None = Field(default=None, ge=0)
    monthly_amount: float | None = Field(default=None, ge=0)
    annual_amount: float | None = Field(default=None, ge=0)
    training_amount: float | None = Field(default=None, ge=0)
    material_amount: float | None = Field(default=None, ge=0)
    chance_percent: int | None = Field(default=None, ge=0, le=100)
    assigned_to: str | None = Field(default=None, max_length=255)
    next_action: str | None = Field(default=None, max_length=10000)
    deadline: date | None = None
    quote_date: date | None = None
    decision_maker: str | None = Field(default=None, max_length=255)
    notes: str | None = Field(default=None, max_length=20000)


class ProspectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    status: str | None = None
    status_date: date | None = None
    setup_amount: float = 0
    monthly_amount: float = 0
    annual_amount: float = 0
    training_amount: float = 0
    material_amount: float = 0
    chance_percent: int = 20
    assigned_to: str | None = None
    next_action: str | None = None
    deadline: date | None = None
    quote_date: date | None = None
    decision_maker: str | None = None
    notes: str | None = None
    pdf_key: str | None = None
    user_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatusHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    prospect_id: int
    old_status: str | None = None
    new_status: str | None = None
    status_date: date | None = None
    notes: str | None = None
    user_id: int | None = None
    created_at: datetime | None = None


class AttachmentUploadResponse(BaseModel):
    success: bool = True
    pdf_url: str
