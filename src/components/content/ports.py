"""
Content component port definitions.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import ContentEntity


class ContentRepoPort(Protocol):
    """Repository interface for content persistence."""

    def get_by_id(self, entity_id: UUID, include_deleted: bool = False) -> ContentEntity | None:
        """Get an entity by ID; soft-deleted ones only when asked."""
        ...

    def get_many(self, ids: Iterable[UUID]) -> dict[UUID, ContentEntity]: ...

    def get_by_slug(
        self, type: str, slug: str, locale: str, include_deleted: bool = False
    ) -> ContentEntity | None:
        """Case-insensitive slug lookup within (type, locale)."""
        ...

    def slug_exists(
        self, type: str, locale: str, slug: str, exclude_id: UUID | None = None
    ) -> bool: ...

    def children(self, parent_id: UUID | None, type: str | None = None) -> list[ContentEntity]:
        ...

    def descendants(self, entity_id: UUID, include_deleted: bool = False) -> list[ContentEntity]:
        ...

    def save(
        self, entity: ContentEntity, rebased: Sequence[ContentEntity] = ()
    ) -> ContentEntity:
        """Insert or update; slug collisions raise ConflictError."""
        ...


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
