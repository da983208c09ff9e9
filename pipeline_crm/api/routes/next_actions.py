"""Next-action endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pipeline_crm.api.dependencies import get_current_identity, get_db
from pipeline_crm.auth.guard import Identity
from pipeline_crm.schemas.common import CreatedResponse, MessageResponse
from pipeline_crm.schemas.next_actions import (
    NextActionCreateRequest,
    NextActionResponse,
    NextActionUpdateRequest,
)
from pipeline_crm.services.next_action_service import NextActionService

router = APIRouter(tags=["next_actions"])


@router.get("/prospects/{prospect_id}/next_actions", response_model=list[NextActionResponse])
def list_next_actions(
    prospect_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> list[NextActionResponse]:
    actions = NextActionService(db).list_next_actions(prospect_id, identity.user_id)
    return [NextActionResponse.model_validate(action) for action in actions]


@router.post("/prospects/{prospect_id}/next_actions", response_model=CreatedResponse)
def create_next_action(
    prospect_id: int,
    payload: NextActionCreateRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> CreatedResponse:
    action = NextActionService(db).create_next_action(prospect_id, identity.user_id, payload.model_dump())
    return CreatedResponse(id=action.id, message="Action created.")


@router.put("/next_actions/{action_id}", response_model=MessageResponse)
def update_next_action(
    action_id: int,
    payload: NextActionUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> MessageResponse:
    NextActionService(db).update_next_action(action_id, identity.user_id, payload.model_dump())
    return MessageResponse(message="Action updated.")


@router.delete("/next_actions/{action_id}", response_model=MessageResponse)
def delete_next_action(
    action_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> MessageResponse:
    NextActionService(db).delete_next_action(action_id, identity.user_id)
    return MessageResponse(message="Action deleted.")
