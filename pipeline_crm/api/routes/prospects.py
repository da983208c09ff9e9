"""Prospect endpoints: owner-scoped CRUD and read-only status history."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pipeline_crm.api.dependencies import get_current_identity, get_db
from pipeline_crm.auth.guard import Identity
from pipeline_crm.schemas.common import CreatedResponse, MessageResponse
from pipeline_crm.schemas.prospects import ProspectResponse, ProspectWriteRequest, StatusHistoryResponse
from pipeline_crm.services.prospect_service import ProspectService

router = APIRouter(prefix="/prospects", tags=["prospects"])


@router.get("", response_model=list[ProspectResponse])
def list_prospects(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> list[ProspectResponse]:
    prospects = ProspectService(db).list_prospects(identity.user_id)
    return [ProspectResponse.model_validate(prospect) for prospect in prospects]


@router.post("", response_model=CreatedResponse)
def create_prospect(
    payload: ProspectWriteRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> CreatedResponse:
    prospect = ProspectService(db).create_prospect(identity.user_id, payload.model_dump())
    return CreatedResponse(id=prospect.id, message="Prospect created.")


@router.get("/{prospect_id}", response_model=ProspectResponse)
def get_prospect(
    prospect_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> ProspectResponse:
    return ProspectResponse.model_validate(ProspectService(db).get_prospect(prospect_id, identity.user_id))


@router.put("/{prospect_id}", response_model=MessageResponse)
def update_prospect(
    prospect_id: int,
    payload: ProspectWriteRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> MessageResponse:
    ProspectService(db).update_prospect(prospect_id, identity.user_id, payload.model_dump())
    return MessageResponse(message="Prospect updated.")


@router.delete("/{prospect_id}", response_model=MessageResponse)
def delete_prospect(
    prospect_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> MessageResponse:
    ProspectService(db).delete_prospect(prospect_id, identity.user_id)
    return MessageResponse(message="Prospect and all related data deleted.")


@router.get("/{prospect_id}/status_history", response_model=list[StatusHistoryResponse])
def list_status_history(
    prospect_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> list[StatusHistoryResponse]:
    entries = ProspectService(db).list_status_history(prospect_id, identity.user_id)
    return [StatusHistoryResponse.model_validate(entry) for entry in entries]
