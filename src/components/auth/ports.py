from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from src.domain.entities import MetaEntry, User


class UserRepoPort(Protocol):
    def get_by_login_or_email(self, identifier: str) -> User | None: ...
    def get_by_id(self, user_id: UUID) -> User | None: ...
    def save(self, user: User) -> User: ...
    def search(self, needle: str | None, offset: int, limit: int) -> tuple[list[User], int]: ...


class UserMetaPort(Protocol):
    """User meta side table; holds the refresh rotation stamp."""

    def get(self, owner_id: UUID, key: str) -> MetaEntry | None: ...
    def set(self, entry: MetaEntry) -> MetaEntry: ...
    def remove(self, owner_id: UUID, key: str) -> bool: ...
    def list(self, owner_id: UUID, key_prefix: str | None = None) -> list[MetaEntry]: ...


class AuthAdapterPort(Protocol):
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def hash_password(self, plain: str) -> str: ...
    def issue_access(self, user: User, now_utc: datetime | None = None) -> str: ...
    def issue_refresh(self, user: User, ver: str, now_utc: datetime | None = None) -> str: ...
    def decode_access(self, token: str) -> dict[str, Any] | None: ...
    def decode_refresh(self, token: str) -> dict[str, Any] | None: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
