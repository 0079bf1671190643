"""
Media upload routes.

An upload creates a published ``media`` entity; a replace swaps the file
behind an existing one and records a new revision.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status

from src.adapters.fs.filestore import FileSystemStore
from src.api.deps import (
    get_content_service,
    get_current_user,
    get_file_store,
    get_meta_store,
    get_policy,
    get_upload_config,
)
from src.api.errors import raise_for_errors
from src.api.schemas import ContentResponse, MediaResponse
from src.components.content import ContentService
from src.components.media import (
    MediaOutput,
    ReplaceMediaInput,
    UploadConfig,
    UploadMediaInput,
    run_replace,
    run_upload,
)
from src.components.meta import MetaStore
from src.domain.entities import User
from src.domain.policy import PolicyEngine

router = APIRouter()


def _response(result: MediaOutput) -> MediaResponse:
    if not result.success or result.entity is None:
        raise_for_errors(result.errors)
    return MediaResponse(
        mode=result.mode,
        url=result.url,
        media=ContentResponse.from_entity(result.entity, result.warnings),
    )


@router.post("", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
def upload_media(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    content: ContentService = Depends(get_content_service),
    meta: MetaStore = Depends(get_meta_store),
    files: FileSystemStore = Depends(get_file_store),
    config: UploadConfig = Depends(get_upload_config),
    policy: PolicyEngine = Depends(get_policy),
) -> MediaResponse:
    """Store an uploaded file and create its media entity."""
    policy.require(current_user, "media:upload")

    inp = UploadMediaInput(
        filename=file.filename or "",
        data=file.file.read(),
        mime_type=file.content_type or "application/octet-stream",
        author_id=current_user.id,
    )
    return _response(run_upload(inp, content=content, meta=meta, files=files, config=config))


@router.put("/{entity_id}", response_model=MediaResponse)
def replace_media(
    entity_id: UUID,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    content: ContentService = Depends(get_content_service),
    meta: MetaStore = Depends(get_meta_store),
    files: FileSystemStore = Depends(get_file_store),
    config: UploadConfig = Depends(get_upload_config),
    policy: PolicyEngine = Depends(get_policy),
) -> MediaResponse:
    policy.require(current_user, "media:replace", content.get(entity_id))

    inp = ReplaceMediaInput(
        entity_id=entity_id,
        filename=file.filename or "",
        data=file.file.read(),
        mime_type=file.content_type or "application/octet-stream",
        author_id=current_user.id,
    )
    return _response(run_replace(inp, content=content, meta=meta, files=files, config=config))
