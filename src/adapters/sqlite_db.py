"""
Shared SQLite plumbing for the repositories in ``src.adapters.sqlite``.

Every repository opens its own connection per call (request-scoped, no
pooling). Passing ``connection`` pins a repository to an existing
connection, which the tests use with ``:memory:`` databases.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def parse_dt(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s) if s else None


def format_dt(dt: datetime | None) -> str | None:
    """Serialize as UTC ISO-8601 so stored values sort lexically."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat()


def parse_uuid(s: str | None) -> UUID | None:
    """Parse UUID string."""
    return UUID(s) if s else None


def format_uuid(value: UUID | None) -> str | None:
    return str(value) if value else None


def casefold(value: str | None) -> str | None:
    """SQL function ``casefold(x)``: Unicode case folding, unlike LIKE and NOCASE."""
    return value.casefold() if value else value


def register_functions(conn: sqlite3.Connection) -> None:
    conn.create_function("casefold", 1, casefold, deterministic=True)


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection
        if connection is not None:
            register_functions(connection)

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        register_functions(conn)
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None

    def _release(self, conn: sqlite3.Connection) -> None:
        if self._should_close():
            conn.close()
