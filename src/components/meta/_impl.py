"""
MetaStore - free-form key/value pairs attached to an owner.

The same store serves content meta (owner existence checked) and user meta
(no lookup port, used by the auth session stamp).
"""

from __future__ import annotations

import json
from typing import Any
from uuid import UUID

from src.domain.entities import MetaEntry
from src.domain.errors import NotFoundError, ValidationFailedError

from .ports import MetaRepoPort, OwnerLookupPort

DEFAULT_MAX_KEY_LENGTH = 191


class MetaStore:
    def __init__(
        self,
        repo: MetaRepoPort,
        owners: OwnerLookupPort | None = None,
        max_key_length: int = DEFAULT_MAX_KEY_LENGTH,
    ) -> None:
        self.repo = repo
        self.owners = owners
        self.max_key_length = max_key_length

    def _check_key(self, key: str) -> None:
        if not key or len(key) > self.max_key_length:
            raise ValidationFailedError(
                f"Meta key must be 1..{self.max_key_length} characters", field="key"
            )

    def _check_owner(self, owner_id: UUID) -> None:
        if self.owners is not None and self.owners.get_by_id(owner_id) is None:
            raise NotFoundError(f"Entity {owner_id} not found", field="entity_id")

    def get(self, owner_id: UUID, key: str) -> Any | None:
        entry = self.repo.get(owner_id, key)
        return entry.value if entry else None

    def set(self, owner_id: UUID, key: str, value: Any) -> MetaEntry:
        self._check_key(key)
        try:
            json.dumps(value, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise ValidationFailedError(f"Meta value is not JSON-serializable: {e}", field="value") from e
        self._check_owner(owner_id)
        return self.repo.set(MetaEntry(owner_id=owner_id, key=key, value=value))

    def remove(self, owner_id: UUID, key: str) -> None:
        self.repo.remove(owner_id, key)

    def list(self, owner_id: UUID, key_prefix: str | None = None) -> list[MetaEntry]:
        return self.repo.list(owner_id, key_prefix)
