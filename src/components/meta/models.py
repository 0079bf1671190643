"""
Meta component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.domain.entities import MetaEntry


@dataclass(frozen=True)
class MetaValidationError:
    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class GetMetaInput:
    entity_id: UUID
    key: str


@dataclass(frozen=True)
class SetMetaInput:
    entity_id: UUID
    key: str
    value: Any


@dataclass(frozen=True)
class RemoveMetaInput:
    entity_id: UUID
    key: str


@dataclass(frozen=True)
class ListMetaInput:
    entity_id: UUID
    key_prefix: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class MetaOutput:
    entry: MetaEntry | None
    errors: list[MetaValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class MetaListOutput:
    entries: list[MetaEntry]
    errors: list[MetaValidationError] = field(default_factory=list)
    success: bool = True
