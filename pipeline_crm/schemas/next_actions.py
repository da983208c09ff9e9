"""Next action and activity schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class NextActionCreateRequest(BaseModel):
    action_type: str | None = Field(default=None, max_length=120)
    planned_date: date | None = None
    actor: str | None = Field(default=None, max_length=255)


class NextActionUpdateRequest(BaseModel):
    action_type: str | None = Field(default=None, max_length=120)
    planned_date: date | None = None
    actor: str | None = Field(default=None, max_length=255)
    completed: bool = False
    completed_note: str | None = Field(
        default=None,
        max_length=10000,
        validation_alias=AliasChoices("completed_note", "completed_notes"),
    )


class NextActionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    prospect_id: int
    action_type: str | None = None
    planned_date: date | None = None
    actor: str | None = None
    completed: bool = False
    completed_date: date | None = None
    completed_note: str | None = None
    user_id: int | None = None
    created_at: datetime | None = None


class ActivityCreateRequest(BaseModel):
    activity_type: str | None = Field(default=None, max_length=120)
    description: str | None = Field(default=None, max_length=20000)


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    prospect_id: int
    activity_type: str | None = None
    description: str | None = None
    activity_date: datetime | None = None
    created_by: str | None = None
    user_id: int | None = None
