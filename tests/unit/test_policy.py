from uuid import uuid4

import pytest

from src.domain.entities import ContentEntity, User
from src.domain.errors import PermissionDeniedError
from src.domain.policy import PolicyEngine


@pytest.fixture
def engine(rules):
    return PolicyEngine(rules)


def _user(*roles, status="active"):
    return User(
        login=f"u{uuid4().hex[:6]}",
        email="u@example.com",
        display_name="U",
        password_hash="h",
        roles=list(roles),
        status=status,
    )


def test_public_permission_needs_no_user(engine):
    assert engine.check_permission(None, [], "public:read") is True
    assert engine.check_permission(None, [], "content:read") is False


def test_administrator_wildcard(engine):
    admin = _user("administrator")
    assert engine.check_permission(admin, admin.roles, "users:manage")
    assert engine.can_manage_users(admin)


def test_scoped_wildcard(engine):
    editor = _user("editor")
    assert engine.check_permission(editor, editor.roles, "content:delete")
    assert engine.check_permission(editor, editor.roles, "meta:write")
    assert not engine.check_permission(editor, editor.roles, "users:manage")


def test_disabled_user_denied(engine):
    admin = _user("administrator", status="disabled")
    assert not engine.check_permission(admin, admin.roles, "content:read")


def test_author_may_edit_own_content_only(engine):
    author = _user("author")
    own = ContentEntity(type="post", title="Mine", slug="mine", author_id=author.id)
    theirs = ContentEntity(type="post", title="Theirs", slug="theirs", author_id=uuid4())

    assert engine.check_permission(author, author.roles, "content:edit", own)
    assert not engine.check_permission(author, author.roles, "content:edit", theirs)
    assert not engine.check_permission(author, author.roles, "content:edit")


def test_ownership_does_not_grant_unlisted_actions(engine):
    author = _user("author")
    own = ContentEntity(type="post", title="Mine", slug="mine", author_id=author.id)
    assert not engine.check_permission(author, author.roles, "users:manage", own)


def test_subscriber_has_nothing(engine):
    sub = _user("subscriber")
    own = ContentEntity(type="post", title="Mine", slug="mine", author_id=sub.id)
    assert not engine.check_permission(sub, sub.roles, "content:edit", own)


def test_require_raises(engine):
    with pytest.raises(PermissionDeniedError):
        engine.require(_user("contributor"), "content:delete")
    with pytest.raises(PermissionDeniedError):
        engine.require(None, "content:list")
    engine.require(_user("contributor"), "content:create")
