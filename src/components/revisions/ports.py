"""
Revisions component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import Revision


class RevisionRepoPort(Protocol):
    """Append-only revision storage; duplicate (entity_id, rev) raises ConflictError."""

    def max_rev(self, entity_id: UUID) -> int:
        """Highest stored rev, 0 when none."""
        ...

    def insert(self, revision: Revision) -> Revision: ...

    def get(self, entity_id: UUID, rev: int) -> Revision | None: ...

    def list_for(self, entity_id: UUID) -> list[Revision]:
        """All revisions of an entity, rev ascending."""
        ...

    def rev_numbers(self, entity_id: UUID) -> list[int]: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
