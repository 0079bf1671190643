"""
TreeService - materialized-path hierarchy maintenance.

Every entity stores ``ancestors``, the root-first chain of ids above it.
Moving a node recomputes its own chain and rebases the chain of every node
below it in the same storage write.
"""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from src.components.revisions import RevisionLog
from src.domain.entities import Breadcrumb, ContentEntity, utc_now
from src.domain.errors import (
    CyclicParentError,
    InvalidParentError,
    NotFoundError,
    SelfParentError,
)

from .ports import TimePort, TreeRepoPort

logger = logging.getLogger(__name__)


def compute_ancestors(parent: ContentEntity | None) -> list[UUID]:
    """Root-first ancestor chain for a child of ``parent``."""
    if parent is None:
        return []
    return [*parent.ancestors, parent.id]


def check_parent(entity_id: UUID | None, parent_id: UUID, parent: ContentEntity | None) -> None:
    """
    Validate ``parent`` as the new parent of ``entity_id``.

    ``entity_id`` is None for entities that do not exist yet, which can only
    fail the existence check.
    """
    if parent is None or parent.is_deleted:
        raise InvalidParentError(f"Parent {parent_id} does not exist", field="parent_id")
    if entity_id is not None and parent.id == entity_id:
        raise SelfParentError("An entity cannot be its own parent", field="parent_id")
    if entity_id is not None and entity_id in parent.ancestors:
        raise CyclicParentError(
            f"Parent {parent_id} is a descendant of {entity_id}", field="parent_id"
        )


def rebase(descendant: ContentEntity, moved: ContentEntity) -> list[UUID]:
    """New ancestor chain of ``descendant`` after ``moved`` got its new chain."""
    old = descendant.ancestors
    idx = old.index(moved.id)
    return [*moved.ancestors, moved.id, *old[idx + 1 :]]


class TreeService:
    def __init__(
        self,
        repo: TreeRepoPort,
        revisions: RevisionLog | None = None,
        clock: TimePort | None = None,
    ) -> None:
        self.repo = repo
        self.revisions = revisions
        self.clock = clock

    def _now(self) -> datetime:
        return self.clock.now_utc() if self.clock else utc_now()

    def _require(self, entity_id: UUID) -> ContentEntity:
        entity = self.repo.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"Entity {entity_id} not found", field="id")
        return entity

    def resolve_parent(self, entity_id: UUID | None, parent_id: UUID | None) -> list[UUID]:
        """Check a prospective parent and return the ancestors it implies."""
        if parent_id is None:
            return []
        parent = self.repo.get_by_id(parent_id, include_deleted=True)
        try:
            check_parent(entity_id, parent_id, parent)
        except (InvalidParentError, SelfParentError, CyclicParentError) as e:
            logger.warning("Rejected parent %s for %s: %s", parent_id, entity_id, e.code)
            raise
        return compute_ancestors(parent)

    def rebased_descendants(self, moved: ContentEntity) -> list[ContentEntity]:
        """Descendants of ``moved`` (deleted ones included) with rebased chains."""
        now = self._now()
        return [
            d.model_copy(update={"ancestors": rebase(d, moved), "updated_at": now})
            for d in self.repo.descendants(moved.id, include_deleted=True)
        ]

    def reparent(
        self,
        entity_id: UUID,
        new_parent_id: UUID | None,
        author_id: UUID | None = None,
    ) -> ContentEntity:
        entity = self._require(entity_id)
        if entity.parent_id == new_parent_id:
            return entity

        ancestors = self.resolve_parent(entity_id, new_parent_id)
        moved = entity.model_copy(
            update={"parent_id": new_parent_id, "ancestors": ancestors, "updated_at": self._now()}
        )
        rebased = self.rebased_descendants(moved)
        self.repo.save(moved, rebased)
        logger.info(
            "Moved %s under %s (%d descendant(s) rebased)", entity_id, new_parent_id, len(rebased)
        )

        if self.revisions is not None:
            self.revisions.record_after_write(moved, author_id)
        return moved

    def children_of(self, parent_id: UUID | None, type: str | None = None) -> list[ContentEntity]:
        return self.repo.children(parent_id, type)

    def breadcrumbs_of(self, entity_id: UUID) -> list[Breadcrumb]:
        entity = self._require(entity_id)
        found = self.repo.get_many(entity.ancestors)
        # Storage returns ancestors unordered; rebuild root-first order from the chain
        chain = [found[a] for a in entity.ancestors if a in found]
        chain.append(entity)
        return [Breadcrumb(id=e.id, title=e.title, slug=e.slug, type=e.type) for e in chain]

    def descendants_of(self, entity_id: UUID) -> list[ContentEntity]:
        self._require(entity_id)
        return self.repo.descendants(entity_id)
