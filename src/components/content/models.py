"""
Content component input/output models.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.domain.entities import (
    CONTENT_STATUSES,
    CONTENT_VISIBILITIES,
    ContentBody,
    ContentEntity,
    ContentStatus,
    ContentVisibility,
    Taxonomies,
)
from src.rules.models import ContentRules

# --- Validation Error ---


@dataclass(frozen=True)
class ContentValidationError:
    """Content validation error."""

    code: str
    message: str
    field: str | None = None


# --- Configuration ---


@dataclass(frozen=True)
class ContentConfig:
    slug_pattern: re.Pattern[str] = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    slug_max: int = 200
    title_min: int = 1
    title_max: int = 300
    excerpt_max: int = 500
    password_min_length: int = 4
    default_locale: str = "en"
    statuses: tuple[str, ...] = CONTENT_STATUSES
    visibilities: tuple[str, ...] = CONTENT_VISIBILITIES

    @classmethod
    def from_rules(cls, rules: ContentRules | None) -> ContentConfig:
        if rules is None:
            return cls()
        return cls(
            slug_pattern=re.compile(rules.slug.pattern),
            slug_max=rules.slug.max,
            title_min=rules.title.min,
            title_max=rules.title.max,
            excerpt_max=rules.excerpt_max,
            password_min_length=rules.password_min_length,
            default_locale=rules.default_locale,
            statuses=tuple(rules.status_values),
            visibilities=tuple(rules.visibility_values),
        )


# --- Writable fields ---


class ContentFields(BaseModel):
    """
    The writable surface of a content entity.

    Anything outside these fields (ids, ancestors, timestamps, deletion
    flag, type) is rejected. Which fields were actually sent is read from
    ``model_fields_set`` so an explicit ``parent_id: null`` means "move to
    top level".
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    slug: str | None = None
    excerpt: str | None = None
    content: ContentBody | None = None
    status: ContentStatus | None = None
    visibility: ContentVisibility | None = None
    password: str | None = None
    locale: str | None = None
    parent_id: UUID | None = None
    menu_order: int | None = None
    published_at: datetime | None = None
    featured_media_id: UUID | None = None
    taxonomies: Taxonomies | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    og_image: str | None = None


UPDATABLE_FIELDS = frozenset(ContentFields.model_fields)
NON_NULLABLE_FIELDS = frozenset(
    {"title", "content", "status", "visibility", "locale", "menu_order", "taxonomies"}
)


# --- Input Models ---


@dataclass(frozen=True)
class CreateContentInput:
    """Input for creating new content; ``fields`` follows ContentFields."""

    type: str
    fields: dict[str, Any]
    author_id: UUID | None = None


@dataclass(frozen=True)
class UpdateContentInput:
    """Input for patching existing content."""

    entity_id: UUID
    patch: dict[str, Any]
    author_id: UUID | None = None


@dataclass(frozen=True)
class GetContentInput:
    """Lookup by id, or by (type, slug, locale)."""

    entity_id: UUID | None = None
    type: str | None = None
    slug: str | None = None
    locale: str | None = None


@dataclass(frozen=True)
class DeleteContentInput:
    entity_id: UUID
    author_id: UUID | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ContentOutput:
    """Output for single content retrieval."""

    entity: ContentEntity | None
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ContentOperationOutput:
    """
    Output for write operations.

    ``warnings`` is non-empty when the write committed but a follow-up step
    (the revision record) did not; ``success`` stays True in that case.
    """

    entity: ContentEntity | None
    errors: list[ContentValidationError] = field(default_factory=list)
    warnings: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class MoveContentInput:
    entity_id: UUID
    parent_id: UUID | None
    author_id: UUID | None = None
