from datetime import UTC, datetime, timedelta

import pytest

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import FrozenClock, SystemClock
from src.adapters.fs.filestore import FileSystemStore
from src.domain.entities import User


# --- clock ---


def test_system_clock_is_utc_aware():
    now = SystemClock().now_utc()
    assert now.tzinfo is not None
    assert abs((datetime.now(UTC) - now).total_seconds()) < 1.0


def test_frozen_clock_advances():
    clock = FrozenClock(datetime(2026, 1, 1, tzinfo=UTC))
    clock.advance(hours=2)
    assert clock.now_utc() == datetime(2026, 1, 1, 2, tzinfo=UTC)


# --- file store ---


@pytest.fixture
def store(tmp_path):
    return FileSystemStore(str(tmp_path / "store"))


def test_save_returns_relative_posix_path(store):
    assert store.save("foo/bar/baz.txt", b"nested") == "foo/bar/baz.txt"
    assert store.get("foo/bar/baz.txt") == b"nested"


def test_delete_is_idempotent(store):
    store.save("zombie.txt", b"brains")
    store.delete("zombie.txt")
    store.delete("zombie.txt")
    with pytest.raises(FileNotFoundError):
        store.get("zombie.txt")


def test_path_traversal(store):
    with pytest.raises(ValueError):
        store.save("../hack.txt", b"bad")
    with pytest.raises(ValueError):
        store.get("/etc/passwd")


# --- passwords and tokens ---


@pytest.fixture
def auth():
    return JWTAuthAdapter(access_ttl_minutes=15, refresh_ttl_minutes=60)


@pytest.fixture
def user():
    return User(
        login="alice", email="alice@example.com", display_name="Alice", password_hash="", roles=["editor"]
    )


def test_hash_verify(auth):
    hashed = auth.hash_password("my-secret-password")
    assert hashed != "my-secret-password"
    assert auth.verify_password("my-secret-password", hashed)
    assert not auth.verify_password("wrong", hashed)


def test_access_token_claims(auth, user):
    payload = auth.decode_access(auth.issue_access(user))
    assert payload["sub"] == str(user.id)
    assert payload["role"] == "editor"
    assert payload["email"] == "alice@example.com"


def test_access_and_refresh_tokens_are_not_interchangeable(auth, user):
    access = auth.issue_access(user)
    refresh = auth.issue_refresh(user, "v1")

    assert auth.decode_refresh(refresh)["ver"] == "v1"
    assert auth.decode_refresh(access) is None
    assert auth.decode_access(refresh) is None


def test_expired_token_rejected(auth, user):
    issued = datetime.now(UTC) - timedelta(hours=1)
    assert auth.decode_access(auth.issue_access(user, issued)) is None


def test_foreign_audience_rejected(user):
    mine = JWTAuthAdapter(audience="block-cms-users")
    theirs = JWTAuthAdapter(audience="someone-else")
    assert mine.decode_access(theirs.issue_access(user)) is None
