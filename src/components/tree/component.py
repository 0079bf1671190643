"""
Tree component - hierarchy of content entities.

Invariants:
- I1: ancestors is exactly the parent chain of parent_id, [] for roots
- I2: No entity is its own ancestor (self_parent, cyclic)
- I3: A move rebases every descendant in the same write
- I4: Children are ordered by (menu_order, title)
"""

from __future__ import annotations

from src.components.revisions import RevisionLog
from src.domain.errors import CmsError, RevisionWriteError

from ._impl import TreeService
from .models import (
    BreadcrumbsInput,
    BreadcrumbsOutput,
    ChildrenInput,
    ChildrenOutput,
    MoveInput,
    TreeOperationOutput,
    TreeValidationError,
)
from .ports import TimePort, TreeRepoPort


def _error(e: CmsError) -> TreeValidationError:
    return TreeValidationError(code=e.code, message=e.message, field=e.field)


def run_move(
    inp: MoveInput,
    *,
    repo: TreeRepoPort,
    revisions: RevisionLog | None = None,
    clock: TimePort | None = None,
) -> TreeOperationOutput:
    service = TreeService(repo, revisions, clock)
    try:
        moved = service.reparent(inp.entity_id, inp.parent_id, inp.author_id)
    except RevisionWriteError as e:
        return TreeOperationOutput(entity=e.entity, warnings=[_error(e)])
    except CmsError as e:
        return TreeOperationOutput(entity=None, errors=[_error(e)], success=False)
    return TreeOperationOutput(entity=moved)


def run_children(inp: ChildrenInput, *, repo: TreeRepoPort) -> ChildrenOutput:
    return ChildrenOutput(items=TreeService(repo).children_of(inp.parent_id, inp.type))


def run_breadcrumbs(inp: BreadcrumbsInput, *, repo: TreeRepoPort) -> BreadcrumbsOutput:
    try:
        crumbs = TreeService(repo).breadcrumbs_of(inp.entity_id)
    except CmsError as e:
        return BreadcrumbsOutput(crumbs=[], errors=[_error(e)], success=False)
    return BreadcrumbsOutput(crumbs=crumbs)


def run_descendants(inp: BreadcrumbsInput, *, repo: TreeRepoPort) -> ChildrenOutput:
    try:
        items = TreeService(repo).descendants_of(inp.entity_id)
    except CmsError as e:
        return ChildrenOutput(items=[], errors=[_error(e)], success=False)
    return ChildrenOutput(items=items)
