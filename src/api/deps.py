import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.fs.filestore import FileSystemStore
from src.adapters.sqlite.repos import (
    SQLiteContentRepo,
    SQLiteMetaRepo,
    SQLiteRevisionRepo,
    SQLiteUserRepo,
)
from src.components.content import ContentConfig, ContentService
from src.components.hooks import HookRegistry
from src.components.listing import ListingConfig, config_from_rules
from src.components.media import UploadConfig
from src.components.meta import MetaStore
from src.components.revisions import RevisionLog
from src.domain.entities import User
from src.domain.policy import PolicyEngine
from src.rules.loader import load_rules
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parents[2]


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = PROJECT_ROOT
        self.data_dir = Path(os.environ.get("LAB_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "cms.db")
        self.uploads_dir = self.data_dir / "uploads"
        self.rules_path = Path(os.environ.get("LAB_RULES_PATH", str(self.base_dir / "rules.yaml")))
        self.migrations_dir = self.base_dir / "migrations"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


def get_content_config(rules: Rules = Depends(get_rules)) -> ContentConfig:
    return ContentConfig.from_rules(rules.content)


def get_listing_config(rules: Rules = Depends(get_rules)) -> ListingConfig:
    return config_from_rules(rules.listing)


def get_upload_config(rules: Rules = Depends(get_rules)) -> UploadConfig:
    return UploadConfig.from_rules(rules.uploads)


# --- Repos ---
def get_content_repo(settings: Settings = Depends(get_settings)) -> SQLiteContentRepo:
    return SQLiteContentRepo(settings.db_path)


def get_revision_repo(settings: Settings = Depends(get_settings)) -> SQLiteRevisionRepo:
    return SQLiteRevisionRepo(settings.db_path)


def get_content_meta_repo(settings: Settings = Depends(get_settings)) -> SQLiteMetaRepo:
    return SQLiteMetaRepo(settings.db_path, table="content_meta")


def get_user_meta_repo(settings: Settings = Depends(get_settings)) -> SQLiteMetaRepo:
    return SQLiteMetaRepo(settings.db_path, table="user_meta")


def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_file_store(settings: Settings = Depends(get_settings)) -> FileSystemStore:
    return FileSystemStore(base_path=str(settings.uploads_dir))


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Component Services ---
def get_hooks(request: Request) -> HookRegistry:
    """The application's hook registry (created with the app, see main.py)."""
    hooks: HookRegistry = request.app.state.hooks
    return hooks


def get_revision_log(
    repo: SQLiteRevisionRepo = Depends(get_revision_repo),
    clock: SystemClock = Depends(get_clock),
) -> RevisionLog:
    return RevisionLog(repo, clock)


def get_content_service(
    repo: SQLiteContentRepo = Depends(get_content_repo),
    revisions: RevisionLog = Depends(get_revision_log),
    hooks: HookRegistry = Depends(get_hooks),
    clock: SystemClock = Depends(get_clock),
    config: ContentConfig = Depends(get_content_config),
) -> ContentService:
    return ContentService(repo, revisions, hooks=hooks, clock=clock, config=config)


def get_meta_store(
    repo: SQLiteMetaRepo = Depends(get_content_meta_repo),
    owners: SQLiteContentRepo = Depends(get_content_repo),
    rules: Rules = Depends(get_rules),
) -> MetaStore:
    return MetaStore(repo, owners, max_key_length=rules.content.meta_key_max)


def get_policy(rules: Rules = Depends(get_rules)) -> PolicyEngine:
    return PolicyEngine(rules)


def get_auth_adapter(rules: Rules = Depends(get_rules)) -> JWTAuthAdapter:
    return JWTAuthAdapter(
        access_ttl_minutes=rules.auth.access_ttl_minutes,
        refresh_ttl_minutes=rules.auth.refresh_ttl_minutes,
        issuer=rules.auth.issuer,
        audience=rules.auth.audience,
    )


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _token_from_request(request: Request, header_token: str | None, cookie_name: str) -> str | None:
    # Cookie first (HttpOnly), then the Authorization header
    cookie_token = request.cookies.get(cookie_name)
    if cookie_token and cookie_token.startswith("Bearer "):
        return cookie_token.split(" ", 1)[1]
    return header_token


async def get_optional_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    rules: Rules = Depends(get_rules),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
) -> User | None:
    raw = _token_from_request(request, token, rules.auth.cookie.access_name)
    if not raw:
        return None
    payload = auth_adapter.decode_access(raw)
    if not payload or not isinstance(payload.get("sub"), str):
        return None
    try:
        user = user_repo.get_by_id(UUID(payload["sub"]))
    except ValueError:
        return None
    if not user or user.status != "active":
        return None
    return user


async def get_current_user(
    user: User | None = Depends(get_optional_user),
) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
