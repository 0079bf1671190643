"""
Tree component port definitions.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import ContentEntity


class TreeRepoPort(Protocol):
    """Entity storage as seen by the tree maintainer."""

    def get_by_id(self, entity_id: UUID, include_deleted: bool = False) -> ContentEntity | None:
        ...

    def get_many(self, ids: Iterable[UUID]) -> dict[UUID, ContentEntity]:
        ...

    def children(self, parent_id: UUID | None, type: str | None = None) -> list[ContentEntity]:
        """Non-deleted direct children ordered by (menu_order, title)."""
        ...

    def descendants(self, entity_id: UUID, include_deleted: bool = False) -> list[ContentEntity]:
        ...

    def save(
        self, entity: ContentEntity, rebased: Sequence[ContentEntity] = ()
    ) -> ContentEntity:
        """Persist the entity and the rebased descendants atomically."""
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
