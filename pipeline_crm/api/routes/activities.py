"""Activity log endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pipeline_crm.api.dependencies import get_current_identity, get_db
from pipeline_crm.auth.guard import Identity
from pipeline_crm.schemas.common import CreatedResponse
from pipeline_crm.schemas.next_actions import ActivityCreateRequest, ActivityResponse
from pipeline_crm.services.activity_service import ActivityService

router = APIRouter(prefix="/prospects/{prospect_id}/activities", tags=["activities"])


@router.get("", response_model=list[ActivityResponse])
def list_activities(
    prospect_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> list[ActivityResponse]:
    rows = ActivityService(db).list_activities(prospect_id, identity.user_id)
    return [ActivityResponse.model_validate(row) for row in rows]


@router.post("", response_model=CreatedResponse)
def create_activity(
    prospect_id: int,
    payload: ActivityCreateRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> CreatedResponse:
    activity = ActivityService(db).create_activity(
        prospect_id, identity.user_id, created_by=identity.name, data=payload.model_dump()
    )
    return CreatedResponse(id=activity.id, message="Activity created.")
