from datetime import UTC, datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---
RoleType = Literal["administrator", "editor", "author", "contributor", "subscriber"]
ContentStatus = Literal["draft", "published", "private", "archived"]
ContentVisibility = Literal["public", "private", "password"]
UserStatus = Literal["active", "disabled"]

CONTENT_STATUSES: tuple[ContentStatus, ...] = ("draft", "published", "private", "archived")
CONTENT_VISIBILITIES: tuple[ContentVisibility, ...] = ("public", "private", "password")


def utc_now() -> datetime:
    return datetime.now(UTC)


# --- User & Auth ---


class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    login: str
    email: str
    display_name: str
    password_hash: str
    roles: list[RoleType] = Field(default_factory=lambda: ["subscriber"])
    status: UserStatus = "active"
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# --- Content ---


class ContentBlock(BaseModel):
    """One editor block; the payload is opaque to the core."""

    id: str | None = None
    type: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)
    tunes: dict[str, Any] | None = None
    # Position is implicitly defined by list order in ContentBody


class ContentBody(BaseModel):
    """
    Editor document stored in ``ContentEntity.content``.

    Media entities keep their file descriptors (url, size, mime_type, name)
    as extra keys next to the (usually empty) block list.
    """

    model_config = ConfigDict(extra="allow")

    time: int | None = None
    blocks: list[ContentBlock] = Field(default_factory=list)
    version: str | None = None


class Taxonomies(BaseModel):
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class ContentEntity(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    type: str
    title: str
    slug: str
    excerpt: str | None = None
    content: ContentBody = Field(default_factory=ContentBody)

    author_id: UUID | None = None
    status: ContentStatus = "draft"
    visibility: ContentVisibility = "public"
    password: str | None = None
    locale: str = "en"
    featured_media_id: UUID | None = None
    taxonomies: Taxonomies = Field(default_factory=Taxonomies)

    # hierarchy
    parent_id: UUID | None = None
    menu_order: int = 0
    ancestors: list[UUID] = Field(default_factory=list)  # root-first materialized path

    # seo
    meta_title: str | None = None
    meta_description: str | None = None
    og_image: str | None = None

    published_at: datetime | None = None
    is_deleted: bool = False

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Revision(BaseModel):
    entity_id: UUID
    rev: int = Field(ge=1)
    snapshot: dict[str, Any]  # ContentEntity dumped in JSON mode
    author_id: UUID | None = None
    created_at: datetime = Field(default_factory=utc_now)


class MetaEntry(BaseModel):
    owner_id: UUID  # content entity (or user, for the user meta table)
    key: str
    value: Any = None


class Breadcrumb(BaseModel):
    id: UUID
    title: str
    slug: str
    type: str
