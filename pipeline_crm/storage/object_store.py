"""Object stores for prospect attachments.

Only the object key is ever persisted in the database; the store maps keys
to blobs. ``GCSObjectStore`` backs production deployments, ``LocalObjectStore``
keeps blobs on disk for local runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from google.api_core import exceptions as gcs_exceptions
from google.cloud import storage

from pipeline_crm.core.config import Config
from pipeline_crm.core.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredObject:
    key: str
    data: bytes
    content_type: str


class ObjectStore(Protocol):
    def put(self, key: str, data: bytes, content_type: str) -> None: ...

    def get(self, key: str) -> StoredObject: ...

    def exists(self, key: str) -> bool: ...

    def delete(self, key: str) -> None: ...


class GCSObjectStore:
    """Google Cloud Storage bucket adapter."""

    def __init__(self, bucket_name: str, client: storage.Client | None = None) -> None:
        self.bucket_name = bucket_name
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)

    def put(self, key: str, data: bytes, content_type: str) -> None:
        blob = self.bucket.blob(key)
        try:
            blob.upload_from_string(data, content_type=content_type)
        except gcs_exceptions.GoogleAPIError as exc:
            raise StorageError(f"Upload failed for {key}.") from exc

    def get(self, key: str) -> StoredObject:
        blob = self.bucket.blob(key)
        try:
            data = blob.download_as_bytes()
        except gcs_exceptions.NotFound as exc:
            raise NotFoundError(f"Object {key} not found.") from exc
        except gcs_exceptions.GoogleAPIError as exc:
            raise StorageError(f"Download failed for {key}.") from exc
        return StoredObject(key=key, data=data, content_type=blob.content_type or "application/octet-stream")

    def exists(self, key: str) -> bool:
        try:
            return self.bucket.blob(key).exists()
        except gcs_exceptions.GoogleAPIError as exc:
            raise StorageError(f"Existence check failed for {key}.") from exc

    def delete(self, key: str) -> None:
        try:
            self.bucket.blob(key).delete()
        except gcs_exceptions.NotFound as exc:
            raise NotFoundError(f"Object {key} not found.") from exc
        except gcs_exceptions.GoogleAPIError as exc:
            raise StorageError(f"Delete failed for {key}.") from exc


class LocalObjectStore:
    """Filesystem-backed store; the content type lives in a sidecar file."""

    CONTENT_TYPE_SUFFIX = ".content-type"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise StorageError(f"Invalid object key {key!r}.")
        return path

    def _content_type_path(self, key: str) -> Path:
        path = self._path(key)
        return path.with_name(path.name + self.CONTENT_TYPE_SUFFIX)

    def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            self._content_type_path(key).write_text(content_type, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Upload failed for {key}.") from exc

    def get(self, key: str) -> StoredObject:
        path = self._path(key)
        if not path.is_file():
            raise NotFoundError(f"Object {key} not found.")
        content_type_path = self._content_type_path(key)
        content_type = (
            content_type_path.read_text(encoding="utf-8").strip()
            if content_type_path.is_file()
            else "application/octet-stream"
        )
        return StoredObject(key=key, data=path.read_bytes(), content_type=content_type)

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def delete(self, key: str) -> None:
        path = self._path(key)
        if not path.is_file():
            raise NotFoundError(f"Object {key} not found.")
        path.unlink()
        self._content_type_path(key).unlink(missing_ok=True)


def build_object_store(config: Config) -> ObjectStore:
    if config.OBJECT_STORE_BACKEND == "gcs":
        logger.info("storage.backend.gcs", extra={"event": "storage.backend.gcs"})
        return GCSObjectStore(config.GCS_BUCKET_NAME)
    logger.info("storage.backend.local", extra={"event": "storage.backend.local", "path": config.LOCAL_STORAGE_PATH})
    return LocalObjectStore(config.LOCAL_STORAGE_PATH)
