from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.auth_utils import get_password_hash
from src.api.deps import Settings, get_settings
from src.api.main import app
from src.domain.entities import User

PROJECT_ROOT = Path(__file__).resolve().parents[3]


@pytest.fixture
def settings(tmp_path):
    s = Settings()
    s.data_dir = tmp_path / "data"
    s.data_dir.mkdir()
    s.db_path = str(s.data_dir / "cms.db")
    s.uploads_dir = s.data_dir / "uploads"
    s.rules_path = PROJECT_ROOT / "rules.yaml"
    SQLiteMigrator(s.db_path, PROJECT_ROOT / "migrations").run_migrations()
    return s


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    app.state.hooks.remove_all()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(settings):
    users = SQLiteUserRepo(settings.db_path)

    def _make(login, *roles, password="password123", status="active"):
        return users.save(
            User(
                login=login,
                email=f"{login}@example.com",
                display_name=login.title(),
                password_hash=get_password_hash(password),
                roles=list(roles),
                status=status,
            )
        )

    return _make


@pytest.fixture
def auth_headers():
    adapter = JWTAuthAdapter()

    def _headers(user):
        return {"Authorization": f"Bearer {adapter.issue_access(user)}"}

    return _headers


@pytest.fixture
def admin(make_user):
    return make_user("admin", "administrator")


@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)
