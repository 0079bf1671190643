"""
Revisions component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from src.domain.entities import Revision


@dataclass(frozen=True)
class RevisionValidationError:
    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class GetRevisionInput:
    entity_id: UUID
    rev: int


@dataclass(frozen=True)
class HistoryInput:
    entity_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class RevisionOutput:
    revision: Revision | None
    errors: list[RevisionValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class RevisionListOutput:
    revisions: list[Revision]
    errors: list[RevisionValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class GapReportOutput:
    """Revision numbers missing from 1..max for one entity."""

    entity_id: UUID
    missing: list[int]
    latest: int
    success: bool = True
