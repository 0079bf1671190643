"""
Per-entity metadata routes.

Reads need ``meta:read``; writes need ``meta:write`` on the owning entity
(authors and contributors get it on their own content).
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.adapters.sqlite.repos import SQLiteContentRepo, SQLiteMetaRepo
from src.api.deps import (
    get_content_meta_repo,
    get_content_repo,
    get_current_user,
    get_policy,
    get_rules,
)
from src.api.errors import raise_for_errors
from src.api.schemas import MetaEntryResponse, MetaValueRequest
from src.components.content import get_content
from src.components.meta import (
    GetMetaInput,
    ListMetaInput,
    RemoveMetaInput,
    SetMetaInput,
    run_get,
    run_list,
    run_remove,
    run_set,
)
from src.domain.entities import User
from src.domain.errors import NotFoundError
from src.domain.policy import PolicyEngine
from src.rules.models import Rules

router = APIRouter()


@router.get("/{entity_id}/meta", response_model=list[MetaEntryResponse])
def list_meta(
    entity_id: UUID,
    prefix: str | None = Query(None),
    current_user: User = Depends(get_current_user),
    repo: SQLiteMetaRepo = Depends(get_content_meta_repo),
    content_repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[MetaEntryResponse]:
    """Entries ordered by key, optionally limited to a key prefix."""
    policy.require(current_user, "meta:read", get_content(content_repo, entity_id))
    result = run_list(ListMetaInput(entity_id=entity_id, key_prefix=prefix), repo=repo)
    return [MetaEntryResponse.from_entry(e) for e in result.entries]


@router.get("/{entity_id}/meta/{key}", response_model=MetaEntryResponse)
def get_meta(
    entity_id: UUID,
    key: str,
    current_user: User = Depends(get_current_user),
    repo: SQLiteMetaRepo = Depends(get_content_meta_repo),
    content_repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> MetaEntryResponse:
    policy.require(current_user, "meta:read", get_content(content_repo, entity_id))
    result = run_get(GetMetaInput(entity_id=entity_id, key=key), repo=repo)
    if result.entry is None:
        raise NotFoundError(f"No meta '{key}' on {entity_id}", field="key")
    return MetaEntryResponse.from_entry(result.entry)


@router.put("/{entity_id}/meta/{key}", response_model=MetaEntryResponse)
def set_meta(
    entity_id: UUID,
    key: str,
    req: MetaValueRequest,
    current_user: User = Depends(get_current_user),
    repo: SQLiteMetaRepo = Depends(get_content_meta_repo),
    content_repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> MetaEntryResponse:
    """Create or overwrite a value."""
    policy.require(current_user, "meta:write", get_content(content_repo, entity_id))
    result = run_set(
        SetMetaInput(entity_id=entity_id, key=key, value=req.value),
        repo=repo,
        owners=content_repo,
        max_key_length=rules.content.meta_key_max,
    )
    if not result.success or result.entry is None:
        raise_for_errors(result.errors)
    return MetaEntryResponse.from_entry(result.entry)


@router.delete("/{entity_id}/meta/{key}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meta(
    entity_id: UUID,
    key: str,
    current_user: User = Depends(get_current_user),
    repo: SQLiteMetaRepo = Depends(get_content_meta_repo),
    content_repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> None:
    # Removing a missing key is not an error
    policy.require(current_user, "meta:write", get_content(content_repo, entity_id))
    run_remove(RemoveMetaInput(entity_id=entity_id, key=key), repo=repo)
