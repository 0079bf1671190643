"""
Media component - file uploads stored as media content entities.

Invariants:
- I1: Uploads are size- and MIME-checked before anything is stored
- I2: A failed entity write removes the file it just stored
- I3: Only non-deleted entities of type "media" can be replaced
"""

from __future__ import annotations

from src.components.content import ContentService
from src.components.meta import MetaStore
from src.domain.errors import CmsError, RevisionWriteError

from ._impl import MediaService
from .models import (
    MediaOutput,
    MediaValidationError,
    ReplaceMediaInput,
    UploadConfig,
    UploadMediaInput,
)
from .ports import FileStorePort


def _error(e: CmsError) -> MediaValidationError:
    return MediaValidationError(code=e.code, message=e.message, field=e.field)


def run_upload(
    inp: UploadMediaInput,
    *,
    content: ContentService,
    meta: MetaStore,
    files: FileStorePort,
    config: UploadConfig | None = None,
) -> MediaOutput:
    service = MediaService(content, meta, files, config)
    try:
        entity, url = service.upload(inp.filename, inp.data, inp.mime_type, inp.author_id)
    except RevisionWriteError as e:
        return MediaOutput(
            entity=e.entity,
            url=e.entity.content.model_dump().get("url"),
            warnings=[_error(e)],
        )
    except CmsError as e:
        return MediaOutput(entity=None, errors=[_error(e)], success=False)
    return MediaOutput(entity=entity, url=url)


def run_replace(
    inp: ReplaceMediaInput,
    *,
    content: ContentService,
    meta: MetaStore,
    files: FileStorePort,
    config: UploadConfig | None = None,
) -> MediaOutput:
    service = MediaService(content, meta, files, config)
    try:
        entity, url = service.replace(
            inp.entity_id, inp.filename, inp.data, inp.mime_type, inp.author_id
        )
    except RevisionWriteError as e:
        return MediaOutput(
            entity=e.entity,
            url=e.entity.content.model_dump().get("url"),
            mode="replace",
            warnings=[_error(e)],
        )
    except CmsError as e:
        return MediaOutput(entity=None, mode="replace", errors=[_error(e)], success=False)
    return MediaOutput(entity=entity, url=url, mode="replace")
