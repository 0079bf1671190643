import secrets

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.sqlite.repos import SQLiteContentRepo
from src.api.deps import get_content_config, get_content_repo
from src.api.schemas import ContentResponse
from src.components.content import ContentConfig, GetContentInput, run_get
from src.domain.entities import ContentEntity

router = APIRouter()


def _is_visible(entity: ContentEntity, password: str | None) -> bool:
    if entity.status != "published" or entity.is_deleted:
        return False
    if entity.visibility == "public":
        return True
    if entity.visibility == "password" and entity.password and password:
        return secrets.compare_digest(entity.password, password)
    return False


@router.get("/{type}/{slug}", response_model=ContentResponse)
def get_public_content(
    type: str,
    slug: str,
    locale: str | None = None,
    password: str | None = Query(None),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    config: ContentConfig = Depends(get_content_config),
) -> ContentResponse:
    """Published content by slug; password-protected items need the password."""
    res = run_get(GetContentInput(type=type, slug=slug, locale=locale), repo=repo, config=config)

    # Unpublished, private and wrong-password content all look missing
    if not res.success or res.entity is None or not _is_visible(res.entity, password):
        raise HTTPException(status_code=404, detail="Content not found")

    return ContentResponse.from_entity(res.entity)
