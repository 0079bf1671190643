"""
Auth component - registration, login and refresh-token rotation.

Every successful register/login/refresh stores a fresh UUID under the user
meta key ``auth.refresh.ver`` and embeds it as the ``ver`` claim of the new
refresh token. A refresh token whose ``ver`` no longer matches is rejected,
so each refresh token is single-use and logout revokes them all.
"""

import logging
import re
from uuid import UUID, uuid4

from src.components.listing import ListingConfig, clamp_paging, paginate
from src.components.meta import MetaStore
from src.domain.entities import User
from src.domain.errors import ConflictError, ValidationFailedError
from src.domain.policy import PolicyEngine

from .models import (
    AuthOutput,
    ListUsersInput,
    LoginInput,
    LogoutInput,
    RefreshInput,
    RegisterInput,
    UserListOutput,
    VerifyAccessInput,
)
from .ports import AuthAdapterPort, TimePort, UserMetaPort, UserRepoPort

logger = logging.getLogger(__name__)

REFRESH_VERSION_KEY = "auth.refresh.ver"
USER_SEARCH_MIN_LENGTH = 2
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _fail(code: str, message: str) -> AuthOutput:
    return AuthOutput(success=False, error=message, error_code=code)


def issue_refresh_version(user_meta: UserMetaPort, user_id: UUID) -> str:
    ver = str(uuid4())
    MetaStore(user_meta).set(user_id, REFRESH_VERSION_KEY, ver)
    return ver


def get_refresh_version(user_meta: UserMetaPort, user_id: UUID) -> str | None:
    value = MetaStore(user_meta).get(user_id, REFRESH_VERSION_KEY)
    return str(value) if value is not None else None


def _session(
    user: User, user_meta: UserMetaPort, auth_adapter: AuthAdapterPort, time: TimePort
) -> AuthOutput:
    ver = issue_refresh_version(user_meta, user.id)
    now = time.now_utc()
    return AuthOutput(
        user=user,
        access_token=auth_adapter.issue_access(user, now),
        refresh_token=auth_adapter.issue_refresh(user, ver, now),
        success=True,
    )


def run_register(
    inp: RegisterInput,
    user_repo: UserRepoPort,
    user_meta: UserMetaPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort,
    default_role: str = "subscriber",
    password_min_length: int = 8,
) -> AuthOutput:
    login = inp.login.strip().lower()
    email = inp.email.strip().lower()
    if not 3 <= len(login) <= 60:
        return _fail("validation_failed", "Login must be 3..60 characters")
    if not _EMAIL.match(email):
        return _fail("validation_failed", "Email address is invalid")
    if len(inp.password) < password_min_length:
        return _fail(
            "validation_failed", f"Password must be at least {password_min_length} characters"
        )

    if user_repo.get_by_login_or_email(login) or user_repo.get_by_login_or_email(email):
        return _fail("conflict", "Login or email already registered")

    now = time.now_utc()
    user = User(
        login=login,
        email=email,
        display_name=(inp.display_name or "").strip() or login,
        password_hash=auth_adapter.hash_password(inp.password),
        roles=[default_role],
        status="active",
        created_at=now,
        updated_at=now,
    )
    try:
        user_repo.save(user)
    except ConflictError as e:
        return _fail(e.code, e.message)

    logger.info("Registered user %s (%s)", user.login, user.id)
    return _session(user, user_meta, auth_adapter, time)


def run_login(
    inp: LoginInput,
    user_repo: UserRepoPort,
    user_meta: UserMetaPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort,
) -> AuthOutput:
    user = user_repo.get_by_login_or_email(inp.identifier)
    if not user:
        return _fail("invalid_credentials", "Invalid credentials")

    if not auth_adapter.verify_password(inp.password, user.password_hash):
        logger.warning("Failed login for %s", user.login)
        return _fail("invalid_credentials", "Invalid credentials")

    if user.status != "active":
        return _fail("account_disabled", "User account is disabled")

    return _session(user, user_meta, auth_adapter, time)


def run_refresh(
    inp: RefreshInput,
    user_repo: UserRepoPort,
    user_meta: UserMetaPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort,
) -> AuthOutput:
    payload = auth_adapter.decode_refresh(inp.refresh_token)
    if not payload or "sub" not in payload or "ver" not in payload:
        return _fail("invalid_token", "Invalid refresh token")

    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        return _fail("invalid_token", "Invalid refresh token")

    user = user_repo.get_by_id(user_id)
    if not user or user.status != "active":
        return _fail("invalid_token", "User not found or disabled")

    if get_refresh_version(user_meta, user.id) != payload["ver"]:
        logger.warning("Rejected stale refresh token for %s", user.id)
        return _fail("token_revoked", "Refresh token has been revoked")

    return _session(user, user_meta, auth_adapter, time)


def run_logout(inp: LogoutInput, user_meta: UserMetaPort) -> AuthOutput:
    """Rotate the stamp without handing out a token: every refresh token dies."""
    issue_refresh_version(user_meta, inp.user_id)
    return AuthOutput(success=True)


def run_verify_access(
    inp: VerifyAccessInput, user_repo: UserRepoPort, auth_adapter: AuthAdapterPort
) -> AuthOutput:
    payload = auth_adapter.decode_access(inp.token)
    if not payload or "sub" not in payload:
        return _fail("invalid_token", "Invalid or expired token")
    try:
        user = user_repo.get_by_id(UUID(str(payload["sub"])))
    except ValueError:
        return _fail("invalid_token", "Invalid or expired token")
    if not user or user.status != "active":
        return _fail("invalid_token", "User not found or disabled")
    return AuthOutput(user=user, success=True)


def run_list_users(
    inp: ListUsersInput,
    user_repo: UserRepoPort,
    policy: PolicyEngine,
    config: ListingConfig | None = None,
) -> UserListOutput:
    """Newest accounts first; disabled accounts are listed too."""
    if not policy.can_manage_users(inp.actor):
        return UserListOutput(users=[], success=False, error="Access denied", error_code="forbidden")
    try:
        page, limit = clamp_paging(inp.page, inp.limit, config or ListingConfig())
    except ValidationFailedError as e:
        return UserListOutput(
            users=[], success=False, error=e.message, error_code=e.code, error_field=e.field
        )

    q = (inp.q or "").strip()
    needle = q.casefold() if len(q) >= USER_SEARCH_MIN_LENGTH else None
    users, total = user_repo.search(needle, offset=(page - 1) * limit, limit=limit)
    return UserListOutput(users=users, pagination=paginate(total, page, limit), success=True)
