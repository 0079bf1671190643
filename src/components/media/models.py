"""
Media component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal
from uuid import UUID

from src.domain.entities import ContentEntity
from src.rules.models import UploadsRules


@dataclass(frozen=True)
class MediaValidationError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class UploadConfig:
    max_upload_bytes: int = 10 * 1024 * 1024
    allowlist_mime_types: tuple[str, ...] = ("image/png", "image/jpeg", "image/gif", "image/webp")
    public_url_prefix: str = "/uploads"

    @classmethod
    def from_rules(cls, rules: UploadsRules | None) -> UploadConfig:
        if rules is None:
            return cls()
        return cls(
            max_upload_bytes=rules.max_upload_bytes,
            allowlist_mime_types=tuple(rules.allowlist_mime_types),
            public_url_prefix=rules.public_url_prefix.rstrip("/"),
        )


@dataclass(frozen=True)
class UploadMediaInput:
    filename: str
    data: bytes
    mime_type: str
    author_id: UUID | None = None


@dataclass(frozen=True)
class ReplaceMediaInput:
    entity_id: UUID
    filename: str
    data: bytes
    mime_type: str
    author_id: UUID | None = None


@dataclass(frozen=True)
class MediaOutput:
    entity: ContentEntity | None
    url: str | None = None
    mode: Literal["create", "replace"] = "create"
    errors: list[MediaValidationError] = field(default_factory=list)
    warnings: list[MediaValidationError] = field(default_factory=list)
    success: bool = True
