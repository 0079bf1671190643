"""
Content component - content entity lifecycle.

Invariants:
- I1: (type, locale, slug) is unique, case-insensitively
- I2: ancestors always mirrors parent_id (delegated to the tree component)
- I3: Every committed write is followed by exactly one revision
- I4: Soft-deleted content is invisible to get/get_by_slug
- I5: Only the ContentFields allow-list can be written by callers
"""

from __future__ import annotations

from src.components.hooks import HookRegistry
from src.components.revisions import RevisionLog
from src.domain.errors import CmsError, RevisionWriteError, ValidationFailedError

from ._impl import ContentService, get_content, get_content_by_slug
from .models import (
    ContentConfig,
    ContentOperationOutput,
    ContentOutput,
    ContentValidationError,
    CreateContentInput,
    DeleteContentInput,
    GetContentInput,
    MoveContentInput,
    UpdateContentInput,
)
from .ports import ContentRepoPort, TimePort


def _errors(e: CmsError) -> list[ContentValidationError]:
    if isinstance(e, ValidationFailedError):
        return [
            ContentValidationError(code=e.code, message=message, field=field)
            for field, message in e.issues
        ]
    return [ContentValidationError(code=e.code, message=e.message, field=e.field)]


def _service(
    repo: ContentRepoPort,
    revisions: RevisionLog,
    hooks: HookRegistry | None,
    clock: TimePort | None,
    config: ContentConfig | None,
) -> ContentService:
    return ContentService(repo, revisions, hooks=hooks, clock=clock, config=config)


def run_create(
    inp: CreateContentInput,
    *,
    repo: ContentRepoPort,
    revisions: RevisionLog,
    hooks: HookRegistry | None = None,
    clock: TimePort | None = None,
    config: ContentConfig | None = None,
) -> ContentOperationOutput:
    service = _service(repo, revisions, hooks, clock, config)
    try:
        entity = service.create(inp.type, inp.fields, inp.author_id)
    except RevisionWriteError as e:
        return ContentOperationOutput(entity=e.entity, warnings=_errors(e))
    except CmsError as e:
        return ContentOperationOutput(entity=None, errors=_errors(e), success=False)
    return ContentOperationOutput(entity=entity)


def run_update(
    inp: UpdateContentInput,
    *,
    repo: ContentRepoPort,
    revisions: RevisionLog,
    hooks: HookRegistry | None = None,
    clock: TimePort | None = None,
    config: ContentConfig | None = None,
) -> ContentOperationOutput:
    service = _service(repo, revisions, hooks, clock, config)
    try:
        entity = service.update(inp.entity_id, inp.patch, inp.author_id)
    except RevisionWriteError as e:
        return ContentOperationOutput(entity=e.entity, warnings=_errors(e))
    except CmsError as e:
        return ContentOperationOutput(entity=None, errors=_errors(e), success=False)
    return ContentOperationOutput(entity=entity)


def run_delete(
    inp: DeleteContentInput,
    *,
    repo: ContentRepoPort,
    revisions: RevisionLog,
    hooks: HookRegistry | None = None,
    clock: TimePort | None = None,
) -> ContentOperationOutput:
    service = _service(repo, revisions, hooks, clock, None)
    try:
        entity = service.soft_delete(inp.entity_id, inp.author_id)
    except RevisionWriteError as e:
        return ContentOperationOutput(entity=e.entity, warnings=_errors(e))
    except CmsError as e:
        return ContentOperationOutput(entity=None, errors=_errors(e), success=False)
    return ContentOperationOutput(entity=entity)


def run_get(
    inp: GetContentInput,
    *,
    repo: ContentRepoPort,
    config: ContentConfig | None = None,
) -> ContentOutput:
    locale = inp.locale or (config or ContentConfig()).default_locale
    try:
        if inp.entity_id is not None:
            entity = get_content(repo, inp.entity_id)
        elif inp.type and inp.slug:
            entity = get_content_by_slug(repo, inp.type, inp.slug, locale)
        else:
            raise ValidationFailedError("Provide an id, or a type and slug")
    except CmsError as e:
        return ContentOutput(entity=None, errors=_errors(e), success=False)
    return ContentOutput(entity=entity)


def run_move(
    inp: MoveContentInput,
    *,
    repo: ContentRepoPort,
    revisions: RevisionLog,
    hooks: HookRegistry | None = None,
    clock: TimePort | None = None,
) -> ContentOperationOutput:
    """Reparent through the tree component and fire ``content.updated``."""
    service = _service(repo, revisions, hooks, clock, None)
    try:
        entity = service.move(inp.entity_id, inp.parent_id, inp.author_id)
    except RevisionWriteError as e:
        return ContentOperationOutput(entity=e.entity, warnings=_errors(e))
    except CmsError as e:
        return ContentOperationOutput(entity=None, errors=_errors(e), success=False)
    return ContentOperationOutput(entity=entity)
