"""Prospect PDF attachment endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from pipeline_crm.api.dependencies import get_current_identity, get_db, get_object_store, get_settings
from pipeline_crm.auth.guard import Identity
from pipeline_crm.core.config import Config
from pipeline_crm.core.enums import PDF_MIME_TYPE
from pipeline_crm.schemas.common import SuccessResponse
from pipeline_crm.schemas.prospects import AttachmentUploadResponse
from pipeline_crm.services.attachment_service import AttachmentManager
from pipeline_crm.services.prospect_service import ProspectService
from pipeline_crm.storage.object_store import ObjectStore

router = APIRouter(prefix="/prospects/{prospect_id}", tags=["attachments"])


def get_attachment_manager(
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
    settings: Config = Depends(get_settings),
) -> AttachmentManager:
    return AttachmentManager(ProspectService(db), store, max_bytes=settings.MAX_UPLOAD_BYTES)


@router.post("/upload-pdf", response_model=AttachmentUploadResponse)
def upload_pdf(
    prospect_id: int,
    request: Request,
    pdf: UploadFile = File(...),
    identity: Identity = Depends(get_current_identity),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> AttachmentUploadResponse:
    blob = pdf.file.read()
    attachments.attach(prospect_id, identity.user_id, blob, pdf.content_type)
    download_path = request.url_for("download_pdf", prospect_id=prospect_id).path
    return AttachmentUploadResponse(success=True, pdf_url=download_path)


@router.delete("/pdf", response_model=SuccessResponse)
def delete_pdf(
    prospect_id: int,
    identity: Identity = Depends(get_current_identity),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> SuccessResponse:
    attachments.detach(prospect_id, identity.user_id)
    return SuccessResponse()


@router.get("/download-pdf", name="download_pdf")
def download_pdf(
    prospect_id: int,
    identity: Identity = Depends(get_current_identity),
    attachments: AttachmentManager = Depends(get_attachment_manager),
) -> Response:
    stored = attachments.fetch(prospect_id, identity.user_id)
    return Response(
        content=stored.data,
        media_type=PDF_MIME_TYPE,
        headers={"Content-Disposition": f'inline; filename="prospect-{prospect_id}.pdf"'},
    )
