from dataclasses import dataclass
from typing import Any
from uuid import UUID

from src.components.listing import Pagination
from src.domain.entities import User


@dataclass
class RegisterInput:
    login: str
    email: str
    password: str
    display_name: str | None = None


@dataclass
class LoginInput:
    identifier: str  # login or email
    password: str


@dataclass
class RefreshInput:
    refresh_token: str


@dataclass
class LogoutInput:
    user_id: UUID


@dataclass
class VerifyAccessInput:
    token: str


@dataclass
class ListUsersInput:
    """
    ``q`` matches login, email or display name once it has two or more
    characters. Paging follows the content listing rules.
    """

    actor: User
    q: str | None = None
    page: Any = 1
    limit: Any = None


@dataclass
class AuthOutput:
    user: User | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    success: bool = False
    error: str | None = None
    error_code: str | None = None


@dataclass
class UserListOutput:
    users: list[User]
    pagination: Pagination | None = None
    success: bool = False
    error: str | None = None
    error_code: str | None = None
    error_field: str | None = None
