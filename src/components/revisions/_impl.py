"""
RevisionLog - append-only snapshots of content entities.

Numbering is read-max-then-insert. Two concurrent writers may pick the same
number; the unique (entity_id, rev) index rejects the second one with
ConflictError and nothing is retried here.
"""

from __future__ import annotations

import logging
from uuid import UUID

from src.domain.entities import ContentEntity, Revision, utc_now
from src.domain.errors import NotFoundError, RevisionWriteError

from .ports import RevisionRepoPort, TimePort

logger = logging.getLogger(__name__)


class RevisionLog:
    def __init__(self, repo: RevisionRepoPort, clock: TimePort | None = None) -> None:
        self.repo = repo
        self.clock = clock

    def _now(self):
        return self.clock.now_utc() if self.clock else utc_now()

    def _snapshot(self, entity: ContentEntity, rev: int, author_id: UUID | None) -> Revision:
        return Revision(
            entity_id=entity.id,
            rev=rev,
            snapshot=entity.model_dump(mode="json"),
            author_id=author_id,
            created_at=self._now(),
        )

    def record_creation(self, entity: ContentEntity, author_id: UUID | None = None) -> Revision:
        """Store revision 1; an existing revision 1 raises ConflictError."""
        return self.repo.insert(self._snapshot(entity, 1, author_id or entity.author_id))

    def record_update(self, entity: ContentEntity, author_id: UUID | None = None) -> Revision:
        next_rev = self.repo.max_rev(entity.id) + 1
        return self.repo.insert(self._snapshot(entity, next_rev, author_id))

    def record_after_write(
        self, entity: ContentEntity, author_id: UUID | None = None, *, created: bool = False
    ) -> Revision:
        """
        Record a revision for an entity write that has already committed.

        Any failure is logged and re-raised as RevisionWriteError carrying the
        committed entity, so callers can report the gap without losing it.
        """
        try:
            if created:
                return self.record_creation(entity, author_id)
            return self.record_update(entity, author_id)
        except Exception as e:
            logger.error(
                "Revision write failed for %s %s (entity committed): %s",
                entity.type,
                entity.id,
                e,
            )
            raise RevisionWriteError(
                f"Entity {entity.id} saved but its revision was not recorded",
                entity=entity,
                cause=e,
            ) from e

    def history(self, entity_id: UUID) -> list[Revision]:
        return self.repo.list_for(entity_id)

    def get(self, entity_id: UUID, rev: int) -> Revision:
        revision = self.repo.get(entity_id, rev)
        if revision is None:
            raise NotFoundError(f"Revision {rev} of {entity_id} not found", field="rev")
        return revision

    def find_gaps(self, entity_id: UUID) -> list[int]:
        present = self.repo.rev_numbers(entity_id)
        if not present:
            return []
        have = set(present)
        return [n for n in range(1, max(present) + 1) if n not in have]
