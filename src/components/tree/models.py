"""
Tree component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from src.domain.entities import Breadcrumb, ContentEntity


@dataclass(frozen=True)
class TreeValidationError:
    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class MoveInput:
    entity_id: UUID
    parent_id: UUID | None
    author_id: UUID | None = None


@dataclass(frozen=True)
class ChildrenInput:
    parent_id: UUID | None = None
    type: str | None = None


@dataclass(frozen=True)
class BreadcrumbsInput:
    entity_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class TreeOperationOutput:
    entity: ContentEntity | None
    errors: list[TreeValidationError] = field(default_factory=list)
    warnings: list[TreeValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ChildrenOutput:
    items: list[ContentEntity]
    errors: list[TreeValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class BreadcrumbsOutput:
    crumbs: list[Breadcrumb]
    errors: list[TreeValidationError] = field(default_factory=list)
    success: bool = True
