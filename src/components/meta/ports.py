"""
Meta component port definitions.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.entities import ContentEntity, MetaEntry


class MetaRepoPort(Protocol):
    def get(self, owner_id: UUID, key: str) -> MetaEntry | None: ...

    def set(self, entry: MetaEntry) -> MetaEntry:
        """Upsert on (owner_id, key)."""
        ...

    def remove(self, owner_id: UUID, key: str) -> bool: ...

    def list(self, owner_id: UUID, key_prefix: str | None = None) -> list[MetaEntry]:
        """Entries ordered by key; prefix match is exact and case-sensitive."""
        ...


class OwnerLookupPort(Protocol):
    """Used to check the owning entity exists before writing."""

    def get_by_id(self, entity_id: UUID, include_deleted: bool = False) -> ContentEntity | None:
        ...
