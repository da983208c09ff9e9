"""Attachment manager: one optional PDF per prospect in the object store."""

from __future__ import annotations

import logging

from pipeline_crm.core.enums import PDF_MIME_TYPE
from pipeline_crm.core.exceptions import NotFoundError, PipelineCRMException, StorageError, ValidationError
from pipeline_crm.services.prospect_service import ProspectService
from pipeline_crm.storage.object_store import ObjectStore, StoredObject
from pipeline_crm.utils.ids import new_attachment_key

logger = logging.getLogger(__name__)


class AttachmentManager:
    def __init__(self, prospects: ProspectService, store: ObjectStore, max_bytes: int | None = None) -> None:
        self.prospects = prospects
        self.store = store
        self.max_bytes = max_bytes

    def _discard_remote(self, key: str, prospect_id: int) -> None:
        # A missing remote object must not block clearing the local reference.
        try:
            self.store.delete(key)
        except NotFoundError:
            logger.warning(
                "attachment.remote_missing",
                extra={"event": "attachment.remote_missing", "prospect_id": prospect_id, "key": key},
            )

    def attach(self, prospect_id: int, owner_id: int, blob: bytes, mime_type: str | None) -> str:
        """Store ``blob`` and point the prospect at it; returns the new key."""
        if (mime_type or "").split(";", 1)[0].strip().lower() != PDF_MIME_TYPE:
            raise ValidationError("Only PDF files are accepted.")
        if not blob:
            raise ValidationError("Uploaded file is empty.")
        if self.max_bytes is not None and len(blob) > self.max_bytes:
            raise ValidationError("Uploaded file is too large.")

        self.prospects.get_prospect(prospect_id, owner_id)
        key = new_attachment_key(prospect_id)
        self.store.put(key, blob, PDF_MIME_TYPE)
        try:
            previous = self.prospects.set_attachment_key(prospect_id, owner_id, key)
        except PipelineCRMException:
            # The new blob must not outlive a failed reference update.
            try:
                self._discard_remote(key, prospect_id)
            except StorageError:
                logger.error(
                    "attachment.orphan_cleanup_failed",
                    extra={"event": "attachment.orphan_cleanup_failed", "prospect_id": prospect_id, "key": key},
                )
            raise
        logger.info(
            "attachment.stored",
            extra={"event": "attachment.stored", "prospect_id": prospect_id, "key": key},
        )
        if previous and previous != key:
            self._discard_remote(previous, prospect_id)
        return key

    def detach(self, prospect_id: int, owner_id: int) -> bool:
        """Remove the prospect's PDF; returns False when there was none."""
        prospect = self.prospects.get_prospect(prospect_id, owner_id)
        key = prospect.pdf_key
        if not key:
            return False
        remote_error: StorageError | None = None
        try:
            self._discard_remote(key, prospect_id)
        except StorageError as exc:
            remote_error = exc
            logger.error(
                "attachment.remote_delete_failed",
                extra={"event": "attachment.remote_delete_failed", "prospect_id": prospect_id, "key": key},
            )
        self.prospects.set_attachment_key(prospect_id, owner_id, None)
        if remote_error is not None:
            raise remote_error
        return True

    def fetch(self, prospect_id: int, owner_id: int) -> StoredObject:
        prospect = self.prospects.get_prospect(prospect_id, owner_id)
        if not prospect.pdf_key:
            raise NotFoundError("No PDF attached to this prospect.")
        if not self.store.exists(prospect.pdf_key):
            raise NotFoundError("PDF not found in storage.")
        return self.store.get(prospect.pdf_key)
