from datetime import UTC, datetime
from pathlib import Path

import pytest

from fakes import InMemoryContentRepo, InMemoryMetaRepo, InMemoryRevisionRepo
from src.adapters.clock import FrozenClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.components.content import ContentService
from src.components.hooks import HookRegistry
from src.components.revisions import RevisionLog
from src.rules.loader import load_rules

PROJECT_ROOT = Path(__file__).resolve().parents[1]
MIGRATIONS_DIR = PROJECT_ROOT / "migrations"
RULES_PATH = PROJECT_ROOT / "rules.yaml"


@pytest.fixture
def rules():
    return load_rules(RULES_PATH)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 1, 5, 9, 0, tzinfo=UTC))


@pytest.fixture
def db_path(tmp_path):
    """A fresh SQLite file with every migration applied."""
    path = str(tmp_path / "cms.db")
    SQLiteMigrator(path, MIGRATIONS_DIR).run_migrations()
    return path


# --- in-memory wiring for unit tests ---


@pytest.fixture
def content_repo():
    return InMemoryContentRepo()


@pytest.fixture
def revision_repo():
    return InMemoryRevisionRepo()


@pytest.fixture
def meta_repo():
    return InMemoryMetaRepo()


@pytest.fixture
def hooks():
    return HookRegistry()


@pytest.fixture
def revisions(revision_repo, clock):
    return RevisionLog(revision_repo, clock)


@pytest.fixture
def service(content_repo, revisions, hooks, clock):
    return ContentService(content_repo, revisions, hooks=hooks, clock=clock)
