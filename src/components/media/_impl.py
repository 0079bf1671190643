"""
MediaService - uploaded files as ``media`` content entities.

Bytes go to the file store; the entity's content body carries the public
url, size, mime_type and name, mirrored into meta keys ``mime_type``,
``size`` and ``original_name``. Replacing keeps the old file on disk since
earlier revisions still point at it.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any
from uuid import UUID, uuid4

from src.components.content import ContentService
from src.components.meta import MetaStore
from src.domain.entities import ContentEntity
from src.domain.errors import NotFoundError, RevisionWriteError, ValidationFailedError
from src.domain.sanitize import safe_filename, slugify

from .models import UploadConfig
from .ports import FileStorePort

logger = logging.getLogger(__name__)

MEDIA_TYPE = "media"


class MediaService:
    def __init__(
        self,
        content: ContentService,
        meta: MetaStore,
        files: FileStorePort,
        config: UploadConfig | None = None,
    ) -> None:
        self.content = content
        self.meta = meta
        self.files = files
        self.config = config or UploadConfig()

    def _validate(self, filename: str, data: bytes, mime_type: str) -> None:
        if not filename or not data:
            raise ValidationFailedError("No file uploaded", field="file")
        if len(data) > self.config.max_upload_bytes:
            raise ValidationFailedError(
                f"File exceeds {self.config.max_upload_bytes} bytes", field="file"
            )
        if mime_type not in self.config.allowlist_mime_types:
            raise ValidationFailedError(f"MIME type '{mime_type}' is not allowed", field="file")

    def _store(self, filename: str, data: bytes) -> tuple[str, str]:
        stored = self.files.save(f"{uuid4().hex}-{safe_filename(filename)}", data)
        return stored, f"{self.config.public_url_prefix}/{stored}"

    def _descriptor(self, url: str, filename: str, data: bytes, mime_type: str) -> dict[str, Any]:
        return {"url": url, "size": len(data), "mime_type": mime_type, "name": filename}

    def _write_meta(self, entity: ContentEntity, filename: str, data: bytes, mime_type: str) -> None:
        self.meta.set(entity.id, "mime_type", mime_type)
        self.meta.set(entity.id, "size", len(data))
        self.meta.set(entity.id, "original_name", filename)

    def upload(
        self, filename: str, data: bytes, mime_type: str, author_id: UUID | None = None
    ) -> tuple[ContentEntity, str]:
        self._validate(filename, data, mime_type)
        stored, url = self._store(filename, data)
        stem = PurePosixPath(filename).stem or "file"
        fields = {
            "title": filename,
            "slug": f"{slugify(stem) or 'file'}-{uuid4().hex[:8]}",
            "status": "published",
            "visibility": "public",
            "excerpt": "",
            "content": {"blocks": [], **self._descriptor(url, filename, data, mime_type)},
        }
        try:
            entity = self.content.create(MEDIA_TYPE, fields, author_id)
        except RevisionWriteError as e:
            self._write_meta(e.entity, filename, data, mime_type)
            raise
        except Exception:
            self.files.delete(stored)
            raise
        self._write_meta(entity, filename, data, mime_type)
        logger.info("Uploaded %s as %s (%d bytes)", filename, entity.id, len(data))
        return entity, url

    def replace(
        self,
        entity_id: UUID,
        filename: str,
        data: bytes,
        mime_type: str,
        author_id: UUID | None = None,
    ) -> tuple[ContentEntity, str]:
        existing = self.content.get(entity_id)
        if existing.type != MEDIA_TYPE:
            raise NotFoundError(f"Media {entity_id} not found", field="id")
        self._validate(filename, data, mime_type)
        stored, url = self._store(filename, data)

        body = existing.content.model_dump()
        body.update(self._descriptor(url, filename, data, mime_type))
        try:
            entity = self.content.update(entity_id, {"content": body}, author_id)
        except RevisionWriteError as e:
            self._write_meta(e.entity, filename, data, mime_type)
            raise
        except Exception:
            self.files.delete(stored)
            raise
        self._write_meta(entity, filename, data, mime_type)
        logger.info("Replaced file of media %s with %s", entity_id, filename)
        return entity, url
