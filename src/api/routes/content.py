from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status

from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLiteContentRepo, SQLiteRevisionRepo
from src.api.deps import (
    get_clock,
    get_content_config,
    get_content_repo,
    get_current_user,
    get_hooks,
    get_listing_config,
    get_policy,
    get_revision_log,
    get_revision_repo,
)
from src.api.errors import raise_for_errors
from src.api.schemas import (
    BreadcrumbResponse,
    ContentCreateRequest,
    ContentListResponse,
    ContentResponse,
    MoveRequest,
    PaginationResponse,
    RevisionGapResponse,
    RevisionResponse,
)
from src.components.content import (
    ContentConfig,
    ContentOperationOutput,
    CreateContentInput,
    DeleteContentInput,
    MoveContentInput,
    UpdateContentInput,
    get_content,
    run_create,
    run_delete,
    run_move,
    run_update,
)
from src.components.hooks import HookRegistry
from src.components.listing import ListingConfig, ListingInput, run_list
from src.components.revisions import GetRevisionInput, HistoryInput, RevisionLog
from src.components.revisions import run_find_gaps, run_get as run_get_revision, run_history
from src.components.tree import (
    BreadcrumbsInput,
    ChildrenInput,
    run_breadcrumbs,
    run_children,
    run_descendants,
)
from src.domain.entities import ContentEntity, User
from src.domain.policy import PolicyEngine

router = APIRouter()


def _load(repo: SQLiteContentRepo, entity_id: UUID) -> ContentEntity:
    # NotFoundError is mapped to 404 by the app-level handler
    return get_content(repo, entity_id)


def _write_response(result: ContentOperationOutput) -> ContentResponse:
    if not result.success or result.entity is None:
        raise_for_errors(result.errors)
    return ContentResponse.from_entity(result.entity, result.warnings)


@router.get("", response_model=ContentListResponse)
def list_content(
    type: str = Query("post"),
    status_filter: str | None = Query(None, alias="status"),
    q: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
    config: ListingConfig = Depends(get_listing_config),
) -> ContentListResponse:
    """List content of one type with filters, search and pagination."""
    policy.require(current_user, "content:list")

    result = run_list(
        ListingInput(type=type, status=status_filter, q=q, page=page, limit=limit),
        repo=repo,
        config=config,
    )
    if not result.success or result.pagination is None:
        raise_for_errors(result.errors)

    return ContentListResponse(
        items=[ContentResponse.from_entity(e) for e in result.items],
        pagination=PaginationResponse(**result.pagination.__dict__),
        mode=result.mode,
    )


@router.post("", response_model=ContentResponse, status_code=status.HTTP_201_CREATED)
def create_content(
    req: ContentCreateRequest,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    revisions: RevisionLog = Depends(get_revision_log),
    hooks: HookRegistry = Depends(get_hooks),
    clock: SystemClock = Depends(get_clock),
    config: ContentConfig = Depends(get_content_config),
    policy: PolicyEngine = Depends(get_policy),
) -> ContentResponse:
    """Create a content entity (revision 1)."""
    policy.require(current_user, "content:create")

    inp = CreateContentInput(
        type=req.type,
        fields=req.model_dump(exclude={"type"}, exclude_unset=True),
        author_id=current_user.id,
    )
    result = run_create(
        inp, repo=repo, revisions=revisions, hooks=hooks, clock=clock, config=config
    )
    return _write_response(result)


# Declared before /{entity_id} so "children" is not parsed as an id
@router.get("/children", response_model=list[ContentResponse])
def list_top_level(
    type: str | None = None,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[ContentResponse]:
    """Top-level entities ordered by (menu_order, title)."""
    policy.require(current_user, "content:read")
    result = run_children(ChildrenInput(parent_id=None, type=type), repo=repo)
    return [ContentResponse.from_entity(e) for e in result.items]


@router.get("/{entity_id}", response_model=ContentResponse)
def read_content(
    entity_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> ContentResponse:
    entity = _load(repo, entity_id)
    policy.require(current_user, "content:read", entity)
    return ContentResponse.from_entity(entity)


@router.patch("/{entity_id}", response_model=ContentResponse)
def update_content(
    entity_id: UUID,
    patch: dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    revisions: RevisionLog = Depends(get_revision_log),
    hooks: HookRegistry = Depends(get_hooks),
    clock: SystemClock = Depends(get_clock),
    config: ContentConfig = Depends(get_content_config),
    policy: PolicyEngine = Depends(get_policy),
) -> ContentResponse:
    """Patch allow-listed fields; records a new revision."""
    policy.require(current_user, "content:edit", _load(repo, entity_id))

    inp = UpdateContentInput(entity_id=entity_id, patch=patch, author_id=current_user.id)
    result = run_update(
        inp, repo=repo, revisions=revisions, hooks=hooks, clock=clock, config=config
    )
    return _write_response(result)


@router.delete("/{entity_id}", response_model=ContentResponse)
def delete_content(
    entity_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    revisions: RevisionLog = Depends(get_revision_log),
    hooks: HookRegistry = Depends(get_hooks),
    clock: SystemClock = Depends(get_clock),
    policy: PolicyEngine = Depends(get_policy),
) -> ContentResponse:
    """Soft delete: the entity is archived and hidden, its history kept."""
    policy.require(current_user, "content:delete", _load(repo, entity_id))

    inp = DeleteContentInput(entity_id=entity_id, author_id=current_user.id)
    result = run_delete(inp, repo=repo, revisions=revisions, hooks=hooks, clock=clock)
    return _write_response(result)


@router.post("/{entity_id}/move", response_model=ContentResponse)
def move_content(
    entity_id: UUID,
    req: MoveRequest,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    revisions: RevisionLog = Depends(get_revision_log),
    hooks: HookRegistry = Depends(get_hooks),
    clock: SystemClock = Depends(get_clock),
    policy: PolicyEngine = Depends(get_policy),
) -> ContentResponse:
    """Reparent an entity; its subtree follows."""
    policy.require(current_user, "content:edit", _load(repo, entity_id))

    inp = MoveContentInput(entity_id=entity_id, parent_id=req.parent_id, author_id=current_user.id)
    result = run_move(inp, repo=repo, revisions=revisions, hooks=hooks, clock=clock)
    return _write_response(result)


@router.get("/{entity_id}/children", response_model=list[ContentResponse])
def list_children(
    entity_id: UUID,
    type: str | None = None,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[ContentResponse]:
    policy.require(current_user, "content:read", _load(repo, entity_id))
    result = run_children(ChildrenInput(parent_id=entity_id, type=type), repo=repo)
    return [ContentResponse.from_entity(e) for e in result.items]


@router.get("/{entity_id}/descendants", response_model=list[ContentResponse])
def list_descendants(
    entity_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[ContentResponse]:
    policy.require(current_user, "content:read")
    result = run_descendants(BreadcrumbsInput(entity_id=entity_id), repo=repo)
    if not result.success:
        raise_for_errors(result.errors)
    return [ContentResponse.from_entity(e) for e in result.items]


@router.get("/{entity_id}/breadcrumbs", response_model=list[BreadcrumbResponse])
def get_breadcrumbs(
    entity_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[BreadcrumbResponse]:
    """Root-first trail ending with the entity itself."""
    policy.require(current_user, "content:read")
    result = run_breadcrumbs(BreadcrumbsInput(entity_id=entity_id), repo=repo)
    if not result.success:
        raise_for_errors(result.errors)
    return [BreadcrumbResponse.from_crumb(c) for c in result.crumbs]


@router.get("/{entity_id}/revisions", response_model=list[RevisionResponse])
def list_revisions(
    entity_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLiteContentRepo = Depends(get_content_repo),
    revisions: SQLiteRevisionRepo = Depends(get_revision_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[RevisionResponse]:
    entity = repo.get_by_id(entity_id, include_deleted=True)
    policy.require(current_user, "content:read", entity)
    result = run_history(HistoryInput(entity_id=entity_id), repo=revisions)
    return [RevisionResponse.from_revision(r) for r in result.revisions]


@router.get("/{entity_id}/revisions/gaps", response_model=RevisionGapResponse)
def find_revision_gaps(
    entity_id: UUID,
    current_user: User = Depends(get_current_user),
    revisions: SQLiteRevisionRepo = Depends(get_revision_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> RevisionGapResponse:
    """Revision numbers missing between 1 and the latest one."""
    policy.require(current_user, "content:edit")
    report = run_find_gaps(HistoryInput(entity_id=entity_id), repo=revisions)
    return RevisionGapResponse(entity_id=entity_id, latest=report.latest, missing=report.missing)


@router.get("/{entity_id}/revisions/{rev}", response_model=RevisionResponse)
def get_revision(
    entity_id: UUID,
    rev: int,
    current_user: User = Depends(get_current_user),
    revisions: SQLiteRevisionRepo = Depends(get_revision_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> RevisionResponse:
    policy.require(current_user, "content:read")
    result = run_get_revision(GetRevisionInput(entity_id=entity_id, rev=rev), repo=revisions)
    if not result.success or result.revision is None:
        raise_for_errors(result.errors)
    return RevisionResponse.from_revision(result.revision)
