"""
ContentService - invariant-enforcing façade over the content store.

Write path: validate fields -> resolve parent (tree) -> check slug -> save
(entity plus rebased descendants) -> record revision -> fire hooks.
Nothing is persisted when validation fails. A revision failure after the
save surfaces as RevisionWriteError with the committed entity attached.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from src.components.hooks import (
    CONTENT_CREATED,
    CONTENT_DELETED,
    CONTENT_PREPARE_CREATE,
    CONTENT_UPDATED,
    HookRegistry,
)
from src.components.revisions import RevisionLog
from src.components.tree import TreeService
from src.domain.entities import ContentEntity, utc_now
from src.domain.errors import (
    ConflictError,
    NotFoundError,
    RevisionWriteError,
    ValidationFailedError,
)
from src.domain.sanitize import slugify

from .models import NON_NULLABLE_FIELDS, ContentConfig, ContentFields
from .ports import ContentRepoPort, TimePort

logger = logging.getLogger(__name__)


def parse_fields(data: dict[str, Any]) -> ContentFields:
    """Validate a create/patch payload, collecting every failing field."""
    try:
        return ContentFields.model_validate(data)
    except ValidationError as e:
        issues: list[tuple[str | None, str]] = []
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"]) or None
            if err["type"] == "extra_forbidden":
                issues.append((loc, f"Field '{loc}' cannot be set"))
            else:
                issues.append((loc, err["msg"]))
        raise ValidationFailedError(issues[0][1], field=issues[0][0], issues=issues) from e


def validate_entity(entity: ContentEntity, config: ContentConfig) -> None:
    """Rule checks that depend on configuration or on several fields together."""
    issues: list[tuple[str | None, str]] = []

    title = entity.title.strip()
    if not (config.title_min <= len(title) <= config.title_max):
        issues.append(("title", f"Title must be {config.title_min}..{config.title_max} characters"))

    if not entity.slug:
        issues.append(("slug", "Slug is required"))
    elif len(entity.slug) > config.slug_max or not config.slug_pattern.match(entity.slug):
        issues.append(("slug", "Slug must be lowercase letters, numbers and single hyphens"))

    if entity.excerpt is not None and len(entity.excerpt) > config.excerpt_max:
        issues.append(("excerpt", f"Excerpt must be at most {config.excerpt_max} characters"))

    if entity.status not in config.statuses:
        issues.append(("status", f"Unknown status '{entity.status}'"))
    if entity.visibility not in config.visibilities:
        issues.append(("visibility", f"Unknown visibility '{entity.visibility}'"))

    if entity.password is not None and len(entity.password) < config.password_min_length:
        issues.append(
            ("password", f"Password must be at least {config.password_min_length} characters")
        )
    elif entity.visibility == "password" and not entity.password:
        issues.append(("password", "Password-protected content needs a password"))

    if issues:
        raise ValidationFailedError(issues[0][1], field=issues[0][0], issues=issues)


def normalize_slug(slug: str | None, title: str) -> str:
    """Lower-case an explicit slug, or derive one from the title."""
    if slug is not None and slug.strip():
        return slug.strip().lower()
    return slugify(title)


def get_content(repo: ContentRepoPort, entity_id: UUID) -> ContentEntity:
    entity = repo.get_by_id(entity_id)
    if entity is None:
        raise NotFoundError(f"Content {entity_id} not found", field="id")
    return entity


def get_content_by_slug(repo: ContentRepoPort, type: str, slug: str, locale: str) -> ContentEntity:
    entity = repo.get_by_slug(type, slug, locale)
    if entity is None:
        raise NotFoundError(f"No {type} with slug '{slug}'", field="slug")
    return entity


class ContentService:
    def __init__(
        self,
        repo: ContentRepoPort,
        revisions: RevisionLog,
        hooks: HookRegistry | None = None,
        clock: TimePort | None = None,
        config: ContentConfig | None = None,
    ) -> None:
        self.repo = repo
        self.revisions = revisions
        self.hooks = hooks or HookRegistry()
        self.clock = clock
        self.config = config or ContentConfig()
        self.tree = TreeService(repo, revisions, clock)

    def _now(self) -> datetime:
        return self.clock.now_utc() if self.clock else utc_now()

    # --- reads ---

    def get(self, entity_id: UUID) -> ContentEntity:
        return get_content(self.repo, entity_id)

    def get_by_slug(self, type: str, slug: str, locale: str | None = None) -> ContentEntity:
        return get_content_by_slug(self.repo, type, slug, locale or self.config.default_locale)

    # --- writes ---

    def _check_slug_free(self, entity: ContentEntity, exclude_id: UUID | None = None) -> None:
        if self.repo.slug_exists(entity.type, entity.locale, entity.slug, exclude_id):
            raise ConflictError(
                f"Slug '{entity.slug}' is already used for {entity.type}/{entity.locale}",
                field="slug",
            )

    def _record(
        self, entity: ContentEntity, author_id: UUID | None, *, created: bool = False
    ) -> RevisionWriteError | None:
        try:
            self.revisions.record_after_write(entity, author_id, created=created)
        except RevisionWriteError as e:
            return e
        return None

    def create(
        self, type: str, fields: dict[str, Any], author_id: UUID | None = None
    ) -> ContentEntity:
        if not type or not type.strip():
            raise ValidationFailedError("type is required", field="type")
        parsed = parse_fields(fields)
        if not parsed.title:
            raise ValidationFailedError("Title is required", field="title")

        data: dict[str, Any] = {
            k: getattr(parsed, k) for k in parsed.model_fields_set if getattr(parsed, k) is not None
        }
        data["type"] = type.strip()
        data = self.hooks.apply_filters(CONTENT_PREPARE_CREATE, data, author_id)
        if not isinstance(data, dict) or not data.get("title"):
            raise ValidationFailedError("prepare_create filter must return the field dict")

        now = self._now()
        data["slug"] = normalize_slug(data.get("slug"), data["title"])
        data.setdefault("locale", self.config.default_locale)
        data["author_id"] = author_id
        data["created_at"] = now
        data["updated_at"] = now
        if data.get("status") == "published" and data.get("published_at") is None:
            data["published_at"] = now

        try:
            entity = ContentEntity.model_validate(data)
        except ValidationError as e:
            # A prepare_create filter handed back something invalid
            raise ValidationFailedError(f"Invalid content after filters: {e}") from e
        validate_entity(entity, self.config)

        ancestors = self.tree.resolve_parent(None, entity.parent_id)
        entity = entity.model_copy(update={"ancestors": ancestors})
        self._check_slug_free(entity)

        self.repo.save(entity)
        logger.info("Created %s %s (%s)", entity.type, entity.id, entity.slug)

        gap = self._record(entity, author_id, created=True)
        self.hooks.do_action(CONTENT_CREATED, entity)
        if gap is not None:
            raise gap
        return entity

    def update(
        self, entity_id: UUID, patch: dict[str, Any], author_id: UUID | None = None
    ) -> ContentEntity:
        existing = self.get(entity_id)
        parsed = parse_fields(patch)
        given = parsed.model_fields_set

        nulls = sorted(k for k in given & NON_NULLABLE_FIELDS if getattr(parsed, k) is None)
        if nulls:
            issues: list[tuple[str | None, str]] = [(k, f"'{k}' cannot be null") for k in nulls]
            raise ValidationFailedError(issues[0][1], field=issues[0][0], issues=issues)

        updates: dict[str, Any] = {k: getattr(parsed, k) for k in given}
        if "slug" in given:
            updates["slug"] = normalize_slug(parsed.slug, updates.get("title", existing.title))

        now = self._now()
        updates["updated_at"] = now
        parent_changed = "parent_id" in given and parsed.parent_id != existing.parent_id
        if parent_changed:
            updates["ancestors"] = self.tree.resolve_parent(existing.id, parsed.parent_id)

        updated = existing.model_copy(update=updates)
        if updated.status == "published" and updated.published_at is None:
            updated = updated.model_copy(update={"published_at": now})
        validate_entity(updated, self.config)
        self._check_slug_free(updated, exclude_id=existing.id)

        rebased = self.tree.rebased_descendants(updated) if parent_changed else []
        self.repo.save(updated, rebased)
        logger.info("Updated %s %s (%s)", updated.type, updated.id, ", ".join(sorted(given)))

        gap = self._record(updated, author_id)
        self.hooks.do_action(CONTENT_UPDATED, updated, existing)
        if gap is not None:
            raise gap
        return updated

    def soft_delete(self, entity_id: UUID, author_id: UUID | None = None) -> ContentEntity:
        existing = self.get(entity_id)
        deleted = existing.model_copy(
            update={"is_deleted": True, "status": "archived", "updated_at": self._now()}
        )
        self.repo.save(deleted)
        logger.info("Soft-deleted %s %s", deleted.type, deleted.id)

        gap = self._record(deleted, author_id)
        self.hooks.do_action(CONTENT_DELETED, deleted)
        if gap is not None:
            raise gap
        return deleted

    def move(
        self, entity_id: UUID, parent_id: UUID | None, author_id: UUID | None = None
    ) -> ContentEntity:
        """Reparent via the tree maintainer and fire ``content.updated``."""
        existing = self.get(entity_id)
        try:
            moved = self.tree.reparent(entity_id, parent_id, author_id)
        except RevisionWriteError as e:
            self.hooks.do_action(CONTENT_UPDATED, e.entity, existing)
            raise
        if existing.parent_id != parent_id:
            self.hooks.do_action(CONTENT_UPDATED, moved, existing)
        return moved
