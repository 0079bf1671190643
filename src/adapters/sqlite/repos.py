import json
import logging
import sqlite3
from collections.abc import Iterable, Sequence
from typing import Any
from uuid import UUID

from src.adapters.sqlite_db import (
    SQLiteRepoBase,
    format_dt,
    format_uuid,
    parse_dt,
    parse_uuid,
)
from src.domain.entities import (
    ContentBody,
    ContentEntity,
    MetaEntry,
    Revision,
    Taxonomies,
    User,
    utc_now,
)
from src.domain.errors import ConflictError

logger = logging.getLogger(__name__)

_ENTITY_COLUMNS = (
    "id, type, title, slug, excerpt, content_json, author_id, status, visibility, "
    "password, locale, featured_media_id, taxonomies_json, parent_id, menu_order, "
    "ancestors_json, meta_title, meta_description, og_image, published_at, "
    "is_deleted, created_at, updated_at"
)

# Newest-first tie-break applied after relevance (text search) or on its own
_LISTING_ORDER = "e.status ASC, e.published_at DESC, e.updated_at DESC"


def _entity_params(entity: ContentEntity) -> tuple[Any, ...]:
    return (
        str(entity.id),
        entity.type,
        entity.title,
        entity.slug,
        entity.excerpt,
        entity.content.model_dump_json(),
        format_uuid(entity.author_id),
        entity.status,
        entity.visibility,
        entity.password,
        entity.locale,
        format_uuid(entity.featured_media_id),
        entity.taxonomies.model_dump_json(),
        format_uuid(entity.parent_id),
        entity.menu_order,
        json.dumps([str(a) for a in entity.ancestors]),
        entity.meta_title,
        entity.meta_description,
        entity.og_image,
        format_dt(entity.published_at),
        1 if entity.is_deleted else 0,
        format_dt(entity.created_at),
        format_dt(entity.updated_at),
    )


def _row_to_entity(row: dict[str, Any]) -> ContentEntity:
    return ContentEntity(
        id=UUID(row["id"]),
        type=row["type"],
        title=row["title"],
        slug=row["slug"],
        excerpt=row["excerpt"],
        content=ContentBody.model_validate_json(row["content_json"]),
        author_id=parse_uuid(row["author_id"]),
        status=row["status"],
        visibility=row["visibility"],
        password=row["password"],
        locale=row["locale"],
        featured_media_id=parse_uuid(row["featured_media_id"]),
        taxonomies=Taxonomies.model_validate_json(row["taxonomies_json"]),
        parent_id=parse_uuid(row["parent_id"]),
        menu_order=row["menu_order"],
        ancestors=[UUID(a) for a in json.loads(row["ancestors_json"])],
        meta_title=row["meta_title"],
        meta_description=row["meta_description"],
        og_image=row["og_image"],
        published_at=parse_dt(row["published_at"]),
        is_deleted=bool(row["is_deleted"]),
        created_at=parse_dt(row["created_at"]) or utc_now(),
        updated_at=parse_dt(row["updated_at"]) or utc_now(),
    )


class SQLiteContentRepo(SQLiteRepoBase):
    """
    Content entities plus the FTS5 index kept in sync by triggers.

    ``save`` writes the entity and any rebased descendants in a single
    transaction; a slug collision on the (type, locale, slug NOCASE) index
    surfaces as ``ConflictError``.
    """

    def save(
        self, entity: ContentEntity, rebased: Sequence[ContentEntity] = ()
    ) -> ContentEntity:
        conn = self._get_conn()
        try:
            self._upsert(conn, entity)
            for descendant in rebased:
                conn.execute(
                    "UPDATE content_entities SET ancestors_json = ?, updated_at = ? WHERE id = ?",
                    (
                        json.dumps([str(a) for a in descendant.ancestors]),
                        format_dt(descendant.updated_at),
                        str(descendant.id),
                    ),
                )
            conn.commit()
            return entity
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ConflictError(
                f"Slug '{entity.slug}' is already used for {entity.type}/{entity.locale}",
                field="slug",
            ) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    def _upsert(self, conn: sqlite3.Connection, entity: ContentEntity) -> None:
        conn.execute(
            f"""
            INSERT INTO content_entities ({_ENTITY_COLUMNS})
            VALUES ({", ".join("?" * 23)})
            ON CONFLICT(id) DO UPDATE SET
                title=excluded.title,
                slug=excluded.slug,
                excerpt=excluded.excerpt,
                content_json=excluded.content_json,
                author_id=excluded.author_id,
                status=excluded.status,
                visibility=excluded.visibility,
                password=excluded.password,
                locale=excluded.locale,
                featured_media_id=excluded.featured_media_id,
                taxonomies_json=excluded.taxonomies_json,
                parent_id=excluded.parent_id,
                menu_order=excluded.menu_order,
                ancestors_json=excluded.ancestors_json,
                meta_title=excluded.meta_title,
                meta_description=excluded.meta_description,
                og_image=excluded.og_image,
                published_at=excluded.published_at,
                is_deleted=excluded.is_deleted,
                updated_at=excluded.updated_at
            """,
            _entity_params(entity),
        )

    def get_by_id(self, entity_id: UUID, include_deleted: bool = False) -> ContentEntity | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM content_entities WHERE id = ?", (str(entity_id),)
            ).fetchone()
        finally:
            self._release(conn)
        if not row:
            return None
        entity = _row_to_entity(row)
        if entity.is_deleted and not include_deleted:
            return None
        return entity

    def get_many(self, ids: Iterable[UUID]) -> dict[UUID, ContentEntity]:
        """Fetch by id regardless of deletion; order is the caller's concern."""
        keys = [str(i) for i in ids]
        if not keys:
            return {}
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"SELECT * FROM content_entities WHERE id IN ({', '.join('?' * len(keys))})",
                keys,
            ).fetchall()
        finally:
            self._release(conn)
        return {UUID(row["id"]): _row_to_entity(row) for row in rows}

    def get_by_slug(
        self, type: str, slug: str, locale: str, include_deleted: bool = False
    ) -> ContentEntity | None:
        sql = (
            "SELECT * FROM content_entities "
            "WHERE type = ? AND locale = ? AND slug = ? COLLATE NOCASE"
        )
        if not include_deleted:
            sql += " AND is_deleted = 0"
        conn = self._get_conn()
        try:
            row = conn.execute(sql, (type, locale, slug)).fetchone()
        finally:
            self._release(conn)
        return _row_to_entity(row) if row else None

    def slug_exists(
        self, type: str, locale: str, slug: str, exclude_id: UUID | None = None
    ) -> bool:
        """Deleted entities keep their slug reserved, matching the unique index."""
        sql = (
            "SELECT 1 FROM content_entities "
            "WHERE type = ? AND locale = ? AND slug = ? COLLATE NOCASE"
        )
        params: list[Any] = [type, locale, slug]
        if exclude_id is not None:
            sql += " AND id != ?"
            params.append(str(exclude_id))
        conn = self._get_conn()
        try:
            return conn.execute(sql + " LIMIT 1", params).fetchone() is not None
        finally:
            self._release(conn)

    def children(self, parent_id: UUID | None, type: str | None = None) -> list[ContentEntity]:
        if parent_id is None:
            sql = "SELECT * FROM content_entities WHERE parent_id IS NULL AND is_deleted = 0"
            params: list[Any] = []
        else:
            sql = "SELECT * FROM content_entities WHERE parent_id = ? AND is_deleted = 0"
            params = [str(parent_id)]
        if type is not None:
            sql += " AND type = ?"
            params.append(type)
        sql += " ORDER BY menu_order ASC, title ASC"
        conn = self._get_conn()
        try:
            rows = conn.execute(sql, params).fetchall()
        finally:
            self._release(conn)
        return [_row_to_entity(r) for r in rows]

    def descendants(self, entity_id: UUID, include_deleted: bool = False) -> list[ContentEntity]:
        sql = (
            "SELECT e.* FROM content_entities e "
            "WHERE EXISTS (SELECT 1 FROM json_each(e.ancestors_json) a WHERE a.value = ?)"
        )
        if not include_deleted:
            sql += " AND e.is_deleted = 0"
        sql += " ORDER BY json_array_length(e.ancestors_json) ASC, e.menu_order ASC, e.title ASC"
        conn = self._get_conn()
        try:
            rows = conn.execute(sql, (str(entity_id),)).fetchall()
        finally:
            self._release(conn)
        return [_row_to_entity(r) for r in rows]

    def search(
        self,
        *,
        type: str,
        status: str | None,
        offset: int,
        limit: int,
        fts_query: str | None = None,
        substring: str | None = None,
        weights: Sequence[float] = (10.0, 6.0, 4.0),
    ) -> tuple[list[ContentEntity], int]:
        """
        Filtered, paged listing of non-deleted entities.

        ``fts_query`` is an FTS5 MATCH expression ranked by weighted BM25
        (title, slug, excerpt); ``substring`` is a case-folded needle found
        literally in any of the same three columns after case folding.
        """
        where = ["e.type = ?", "e.is_deleted = 0"]
        params: list[Any] = [type]
        if status is not None:
            where.append("e.status = ?")
            params.append(status)

        if fts_query is not None:
            source = "content_fts JOIN content_entities e ON e.id = content_fts.entity_id"
            where.insert(0, "content_fts MATCH ?")
            params.insert(0, fts_query)
            select = "e.*, bm25(content_fts, 0.0, ?, ?, ?) AS score"
            select_params: list[Any] = list(weights)
            order = f"score ASC, {_LISTING_ORDER}"
        else:
            source = "content_entities e"
            select = "e.*"
            select_params = []
            order = _LISTING_ORDER
            if substring is not None:
                where.append(
                    "(instr(casefold(e.title), ?) > 0 OR instr(casefold(e.slug), ?) > 0 "
                    "OR instr(casefold(coalesce(e.excerpt, '')), ?) > 0)"
                )
                params.extend([substring, substring, substring])

        where_sql = " AND ".join(where)
        conn = self._get_conn()
        try:
            total = conn.execute(
                f"SELECT COUNT(*) AS n FROM {source} WHERE {where_sql}", params
            ).fetchone()["n"]
            rows = conn.execute(
                f"SELECT {select} FROM {source} WHERE {where_sql} "
                f"ORDER BY {order} LIMIT ? OFFSET ?",
                [*select_params, *params, limit, offset],
            ).fetchall()
        finally:
            self._release(conn)
        return [_row_to_entity(r) for r in rows], total


class SQLiteRevisionRepo(SQLiteRepoBase):
    def max_rev(self, entity_id: UUID) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT MAX(rev) AS m FROM revisions WHERE entity_id = ?", (str(entity_id),)
            ).fetchone()
        finally:
            self._release(conn)
        return row["m"] or 0

    def insert(self, revision: Revision) -> Revision:
        """Append only; an existing (entity_id, rev) is never overwritten."""
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO revisions (entity_id, rev, snapshot_json, author_id, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    str(revision.entity_id),
                    revision.rev,
                    json.dumps(revision.snapshot),
                    format_uuid(revision.author_id),
                    format_dt(revision.created_at),
                ),
            )
            conn.commit()
            return revision
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ConflictError(
                f"Revision {revision.rev} already exists for {revision.entity_id}"
            ) from e
        finally:
            self._release(conn)

    def get(self, entity_id: UUID, rev: int) -> Revision | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM revisions WHERE entity_id = ? AND rev = ?",
                (str(entity_id), rev),
            ).fetchone()
        finally:
            self._release(conn)
        return self._row_to_revision(row) if row else None

    def list_for(self, entity_id: UUID) -> list[Revision]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM revisions WHERE entity_id = ? ORDER BY rev ASC",
                (str(entity_id),),
            ).fetchall()
        finally:
            self._release(conn)
        return [self._row_to_revision(r) for r in rows]

    def rev_numbers(self, entity_id: UUID) -> list[int]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT rev FROM revisions WHERE entity_id = ? ORDER BY rev ASC",
                (str(entity_id),),
            ).fetchall()
        finally:
            self._release(conn)
        return [r["rev"] for r in rows]

    def _row_to_revision(self, row: dict[str, Any]) -> Revision:
        return Revision(
            entity_id=UUID(row["entity_id"]),
            rev=row["rev"],
            snapshot=json.loads(row["snapshot_json"]),
            author_id=parse_uuid(row["author_id"]),
            created_at=parse_dt(row["created_at"]) or utc_now(),
        )


class SQLiteMetaRepo(SQLiteRepoBase):
    """Key/value side table; one instance per owner kind (content or user)."""

    TABLES = {"content_meta": "entity_id", "user_meta": "user_id"}

    def __init__(
        self,
        db_path: str,
        table: str = "content_meta",
        connection: sqlite3.Connection | None = None,
    ):
        if table not in self.TABLES:
            raise ValueError(f"Unknown meta table: {table}")
        super().__init__(db_path, connection)
        self.table = table
        self.owner_column = self.TABLES[table]

    def get(self, owner_id: UUID, key: str) -> MetaEntry | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                f"SELECT meta_key, value_json FROM {self.table} "
                f"WHERE {self.owner_column} = ? AND meta_key = ?",
                (str(owner_id), key),
            ).fetchone()
        finally:
            self._release(conn)
        if not row:
            return None
        return MetaEntry(owner_id=owner_id, key=row["meta_key"], value=json.loads(row["value_json"]))

    def set(self, entry: MetaEntry) -> MetaEntry:
        conn = self._get_conn()
        try:
            conn.execute(
                f"""
                INSERT INTO {self.table} ({self.owner_column}, meta_key, value_json)
                VALUES (?, ?, ?)
                ON CONFLICT({self.owner_column}, meta_key) DO UPDATE SET
                    value_json=excluded.value_json
                """,
                (str(entry.owner_id), entry.key, json.dumps(entry.value)),
            )
            conn.commit()
            return entry
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    def remove(self, owner_id: UUID, key: str) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                f"DELETE FROM {self.table} WHERE {self.owner_column} = ? AND meta_key = ?",
                (str(owner_id), key),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            self._release(conn)

    def list(self, owner_id: UUID, key_prefix: str | None = None) -> list[MetaEntry]:
        sql = f"SELECT meta_key, value_json FROM {self.table} WHERE {self.owner_column} = ?"
        params: list[Any] = [str(owner_id)]
        if key_prefix:
            # substr comparison keeps the match exact and case-sensitive
            sql += " AND substr(meta_key, 1, length(?)) = ?"
            params.extend([key_prefix, key_prefix])
        sql += " ORDER BY meta_key ASC"
        conn = self._get_conn()
        try:
            rows = conn.execute(sql, params).fetchall()
        finally:
            self._release(conn)
        return [
            MetaEntry(owner_id=owner_id, key=r["meta_key"], value=json.loads(r["value_json"]))
            for r in rows
        ]


class SQLiteUserRepo(SQLiteRepoBase):
    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
        finally:
            self._release(conn)
        return self._row_to_user(row) if row else None

    def get_by_login_or_email(self, identifier: str) -> User | None:
        ident = identifier.strip().lower()
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM users WHERE login = ? OR email = ?", (ident, ident)
            ).fetchone()
        finally:
            self._release(conn)
        return self._row_to_user(row) if row else None

    def save(self, user: User) -> User:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, login, email, display_name, password_hash, roles_json,
                    status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    login=excluded.login,
                    email=excluded.email,
                    display_name=excluded.display_name,
                    password_hash=excluded.password_hash,
                    roles_json=excluded.roles_json,
                    status=excluded.status,
                    updated_at=excluded.updated_at
                """,
                (
                    str(user.id),
                    user.login,
                    user.email,
                    user.display_name,
                    user.password_hash,
                    json.dumps(list(user.roles)),
                    user.status,
                    format_dt(user.created_at),
                    format_dt(user.updated_at),
                ),
            )
            conn.commit()
            return user
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ConflictError("Login or email already registered", field="login") from e
        finally:
            self._release(conn)

    def search(self, needle: str | None, offset: int, limit: int) -> tuple[list[User], int]:
        """Page of users, newest first. ``needle`` is already case-folded."""
        where = ""
        params: list[Any] = []
        if needle is not None:
            where = (
                "WHERE instr(casefold(login), ?) > 0 OR instr(casefold(email), ?) > 0 "
                "OR instr(casefold(coalesce(display_name, '')), ?) > 0"
            )
            params = [needle, needle, needle]

        conn = self._get_conn()
        try:
            total = conn.execute(f"SELECT COUNT(*) AS n FROM users {where}", params).fetchone()["n"]
            rows = conn.execute(
                f"SELECT * FROM users {where} ORDER BY created_at DESC, login ASC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
        finally:
            self._release(conn)
        return [self._row_to_user(r) for r in rows], total

    def _row_to_user(self, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            login=row["login"],
            email=row["email"],
            display_name=row["display_name"] or row["login"],
            password_hash=row["password_hash"],
            roles=json.loads(row["roles_json"]),
            status=row["status"],
            created_at=parse_dt(row["created_at"]) or utc_now(),
            updated_at=parse_dt(row["updated_at"]) or utc_now(),
        )
