"""Interlocutor endpoints nested under a prospect."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pipeline_crm.api.dependencies import get_current_identity, get_db
from pipeline_crm.auth.guard import Identity
from pipeline_crm.schemas.common import MessageResponse
from pipeline_crm.schemas.interlocutors import InterlocutorResponse, InterlocutorWriteRequest
from pipeline_crm.services.interlocutor_service import InterlocutorService

router = APIRouter(prefix="/prospects/{prospect_id}/interlocuteurs", tags=["interlocutors"])


@router.get("", response_model=list[InterlocutorResponse])
def list_interlocutors(
    prospect_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> list[InterlocutorResponse]:
    rows = InterlocutorService(db).list_interlocutors(prospect_id, identity.user_id)
    return [InterlocutorResponse.model_validate(row) for row in rows]


@router.post("", response_model=InterlocutorResponse)
def create_interlocutor(
    prospect_id: int,
    payload: InterlocutorWriteRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> InterlocutorResponse:
    row = InterlocutorService(db).create_interlocutor(prospect_id, identity.user_id, payload.model_dump())
    return InterlocutorResponse.model_validate(row)


@router.put("/{interlocutor_id}", response_model=InterlocutorResponse)
def update_interlocutor(
    prospect_id: int,
    interlocutor_id: int,
    payload: InterlocutorWriteRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> InterlocutorResponse:
    row = InterlocutorService(db).update_interlocutor(
        prospect_id, interlocutor_id, identity.user_id, payload.model_dump()
    )
    return InterlocutorResponse.model_validate(row)


@router.delete("/{interlocutor_id}", response_model=MessageResponse)
def delete_interlocutor(
    prospect_id: int,
    interlocutor_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> MessageResponse:
    InterlocutorService(db).delete_interlocutor(prospect_id, interlocutor_id, identity.user_id)
    return MessageResponse(message="Interlocutor deleted.")
