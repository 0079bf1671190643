"""
Revisions component - append-only revision history of content entities.

Invariants:
- I1: Creation produces exactly rev 1; each later write produces max(rev) + 1
- I2: (entity_id, rev) is unique; a duplicate is a conflict, never an overwrite
- I3: Snapshots are immutable full copies of the entity after the write
"""

from __future__ import annotations

from src.domain.errors import CmsError

from ._impl import RevisionLog
from .models import (
    GapReportOutput,
    GetRevisionInput,
    HistoryInput,
    RevisionListOutput,
    RevisionOutput,
    RevisionValidationError,
)
from .ports import RevisionRepoPort


def _error(e: CmsError) -> RevisionValidationError:
    return RevisionValidationError(code=e.code, message=e.message, field=e.field)


def run_get(inp: GetRevisionInput, *, repo: RevisionRepoPort) -> RevisionOutput:
    try:
        revision = RevisionLog(repo).get(inp.entity_id, inp.rev)
    except CmsError as e:
        return RevisionOutput(revision=None, errors=[_error(e)], success=False)
    return RevisionOutput(revision=revision)


def run_history(inp: HistoryInput, *, repo: RevisionRepoPort) -> RevisionListOutput:
    return RevisionListOutput(revisions=RevisionLog(repo).history(inp.entity_id))


def run_find_gaps(inp: HistoryInput, *, repo: RevisionRepoPort) -> GapReportOutput:
    log = RevisionLog(repo)
    missing = log.find_gaps(inp.entity_id)
    return GapReportOutput(
        entity_id=inp.entity_id,
        missing=missing,
        latest=repo.max_rev(inp.entity_id),
        success=not missing,
    )
