from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import (
    Breadcrumb,
    ContentBody,
    ContentEntity,
    ContentStatus,
    ContentVisibility,
    MetaEntry,
    Revision,
    Taxonomies,
    User,
)


# --- Errors ---
class ErrorDetail(BaseModel):
    code: str
    message: str
    field: str | None = None


# --- Content ---
class ContentCreateRequest(BaseModel):
    """
    Create payload. Only ``type`` is interpreted here; every other key is
    checked against the writable field list by the content component.
    """

    model_config = ConfigDict(extra="allow")

    type: str = "post"


class MoveRequest(BaseModel):
    parent_id: UUID | None = None


class ContentResponse(BaseModel):
    id: UUID
    type: str
    title: str
    slug: str
    excerpt: str | None = None
    content: ContentBody
    author_id: UUID | None = None
    status: ContentStatus
    visibility: ContentVisibility
    has_password: bool = False
    locale: str
    featured_media_id: UUID | None = None
    taxonomies: Taxonomies
    parent_id: UUID | None = None
    menu_order: int
    ancestors: list[UUID]
    meta_title: str | None = None
    meta_description: str | None = None
    og_image: str | None = None
    published_at: datetime | None = None
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime
    warnings: list[ErrorDetail] = Field(default_factory=list)

    @classmethod
    def from_entity(
        cls, entity: ContentEntity, warnings: list[Any] | None = None
    ) -> "ContentResponse":
        data = entity.model_dump(exclude={"password"})
        data["has_password"] = bool(entity.password)
        data["warnings"] = [
            ErrorDetail(code=w.code, message=w.message, field=w.field) for w in warnings or []
        ]
        return cls.model_validate(data)


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_prev: bool
    has_next: bool


class ContentListResponse(BaseModel):
    items: list[ContentResponse]
    pagination: PaginationResponse
    mode: Literal["none", "substring", "fulltext"] = "none"


class BreadcrumbResponse(BaseModel):
    id: UUID
    title: str
    slug: str
    type: str

    @classmethod
    def from_crumb(cls, crumb: Breadcrumb) -> "BreadcrumbResponse":
        return cls.model_validate(crumb.model_dump())


class RevisionResponse(BaseModel):
    entity_id: UUID
    rev: int
    snapshot: dict[str, Any]
    author_id: UUID | None = None
    created_at: datetime

    @classmethod
    def from_revision(cls, revision: Revision) -> "RevisionResponse":
        snapshot = dict(revision.snapshot)
        snapshot.pop("password", None)
        return cls(
            entity_id=revision.entity_id,
            rev=revision.rev,
            snapshot=snapshot,
            author_id=revision.author_id,
            created_at=revision.created_at,
        )


class RevisionGapResponse(BaseModel):
    entity_id: UUID
    latest: int
    missing: list[int]


# --- Meta ---
class MetaValueRequest(BaseModel):
    value: Any = None


class MetaEntryResponse(BaseModel):
    key: str
    value: Any = None

    @classmethod
    def from_entry(cls, entry: MetaEntry) -> "MetaEntryResponse":
        return cls(key=entry.key, value=entry.value)


# --- Media ---
class MediaResponse(BaseModel):
    mode: Literal["create", "replace"]
    url: str | None = None
    media: ContentResponse


# --- Users & Auth ---
class UserResponse(BaseModel):
    id: UUID
    login: str
    email: str
    display_name: str
    roles: list[str]
    status: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls.model_validate(user.model_dump(exclude={"password_hash", "updated_at"}))


class UserListResponse(BaseModel):
    items: list[UserResponse]
    pagination: PaginationResponse


class RegisterRequest(BaseModel):
    login: str = Field(min_length=3, max_length=60)
    email: str
    password: str = Field(min_length=1)
    display_name: str | None = None


class LoginRequest(BaseModel):
    identifier: str = Field(min_length=3)  # login or email
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str | None = None  # falls back to the refresh cookie


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
