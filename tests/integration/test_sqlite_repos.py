from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from src.adapters.sqlite.repos import (
    SQLiteContentRepo,
    SQLiteMetaRepo,
    SQLiteRevisionRepo,
    SQLiteUserRepo,
)
from src.components.listing import ListingService
from src.domain.entities import ContentEntity, MetaEntry, Revision, User
from src.domain.errors import ConflictError

T0 = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture
def repo(db_path):
    return SQLiteContentRepo(db_path)


def _entity(title, slug=None, **kw):
    return ContentEntity(
        type=kw.pop("type", "post"),
        title=title,
        slug=slug or title.lower().replace(" ", "-"),
        created_at=T0,
        updated_at=kw.pop("updated_at", T0),
        **kw,
    )


# --- content ---


def test_save_and_get_round_trip(repo):
    entity = _entity(
        "Hello",
        excerpt="Intro",
        content={"blocks": [{"type": "paragraph", "data": {"text": "Hi"}}]},
        taxonomies={"tags": ["a"]},
        published_at=T0,
    )
    repo.save(entity)

    loaded = repo.get_by_id(entity.id)
    assert loaded == entity
    assert loaded.published_at.tzinfo is not None


def test_upsert_overwrites(repo):
    entity = repo.save(_entity("Hello"))
    repo.save(entity.model_copy(update={"title": "Changed"}))
    assert repo.get_by_id(entity.id).title == "Changed"


def test_slug_unique_per_type_and_locale_ignoring_case(repo):
    repo.save(_entity("A", slug="my-post"))
    with pytest.raises(ConflictError):
        repo.save(_entity("B", slug="My-Post"))

    repo.save(_entity("C", slug="my-post", type="page"))
    repo.save(_entity("D", slug="my-post", locale="de"))


def test_slug_lookup_and_exists(repo):
    entity = repo.save(_entity("A", slug="hello"))

    assert repo.get_by_slug("post", "HELLO", "en").id == entity.id
    assert repo.slug_exists("post", "en", "Hello")
    assert not repo.slug_exists("post", "en", "hello", exclude_id=entity.id)


def test_deleted_hidden_but_slug_reserved(repo):
    entity = repo.save(_entity("A", slug="gone", is_deleted=True))

    assert repo.get_by_id(entity.id) is None
    assert repo.get_by_id(entity.id, include_deleted=True) is not None
    assert repo.get_by_slug("post", "gone", "en") is None
    assert repo.slug_exists("post", "en", "gone")


def test_children_and_descendants(repo):
    root = repo.save(_entity("Root", type="page"))
    b = repo.save(_entity("B", type="page", parent_id=root.id, ancestors=[root.id], menu_order=1))
    a = repo.save(_entity("A", type="page", parent_id=root.id, ancestors=[root.id], menu_order=1))
    z = repo.save(_entity("Z", type="page", parent_id=root.id, ancestors=[root.id], menu_order=0))
    leaf = repo.save(_entity("Leaf", type="page", parent_id=a.id, ancestors=[root.id, a.id]))
    repo.save(
        _entity("Gone", type="page", parent_id=a.id, ancestors=[root.id, a.id], is_deleted=True)
    )

    assert [e.title for e in repo.children(root.id)] == ["Z", "A", "B"]
    assert [e.title for e in repo.children(None, type="page")] == ["Root"]
    assert [e.id for e in repo.descendants(a.id)] == [leaf.id]
    assert len(repo.descendants(a.id, include_deleted=True)) == 2
    assert {e.id for e in repo.descendants(root.id)} == {a.id, b.id, z.id, leaf.id}


def test_save_with_rebased_descendants_is_one_write(repo):
    a = repo.save(_entity("A", type="page"))
    child = repo.save(_entity("Child", type="page", parent_id=a.id, ancestors=[a.id]))
    new_root = repo.save(_entity("New", type="page"))

    moved = a.model_copy(update={"parent_id": new_root.id, "ancestors": [new_root.id]})
    rebased = child.model_copy(update={"ancestors": [new_root.id, a.id]})
    repo.save(moved, [rebased])

    assert repo.get_by_id(child.id).ancestors == [new_root.id, a.id]


def test_get_many(repo):
    a = repo.save(_entity("A"))
    b = repo.save(_entity("B"))
    assert set(repo.get_many([a.id, b.id, uuid4()])) == {a.id, b.id}
    assert repo.get_many([]) == {}


# --- listing over the real index ---


def test_fulltext_ranking_prefers_denser_matches(repo):
    repo.save(_entity("Short Job First", status="published"))
    repo.save(_entity("First Come First Serve", status="published"))
    repo.save(_entity("Unrelated Post", status="published"))

    out = ListingService(repo).list("post", q="first scheduling")

    assert out.mode == "fulltext"
    assert [e.title for e in out.items] == ["First Come First Serve", "Short Job First"]


def test_substring_for_short_queries(repo):
    repo.save(_entity("Short Job First"))
    repo.save(_entity("First Come First Serve"))
    repo.save(_entity("Other", excerpt="Has FI inside"))
    repo.save(_entity("Nothing"))

    out = ListingService(repo).list("post", q="fi")

    assert out.mode == "substring"
    assert {e.title for e in out.items} == {"Short Job First", "First Come First Serve", "Other"}


def test_substring_folds_non_ascii_case(repo):
    repo.save(_entity("École ouverte", slug="ecole-ouverte"))
    repo.save(_entity("Plain", excerpt="ÜBER alles"))
    repo.save(_entity("Nothing"))
    service = ListingService(repo)

    assert [e.title for e in service.list("post", q="éc").items] == ["École ouverte"]
    assert [e.title for e in service.list("post", q="ÉC").items] == ["École ouverte"]
    assert [e.title for e in service.list("post", q="üb").items] == ["Plain"]


def test_substring_treats_wildcards_literally(repo):
    repo.save(_entity("50% off", slug="fifty-off"))
    repo.save(_entity("500 items", slug="five-hundred"))

    assert [e.title for e in ListingService(repo).list("post", q="0%").items] == ["50% off"]


def test_fulltext_index_follows_updates(repo):
    entity = repo.save(_entity("Alpha"))
    repo.save(entity.model_copy(update={"title": "Gamma"}))

    assert ListingService(repo).list("post", q="alpha").items == []
    assert [e.id for e in ListingService(repo).list("post", q="gamma").items] == [entity.id]


def test_listing_excludes_deleted_and_filters_status(repo):
    repo.save(_entity("Draft one"))
    repo.save(_entity("Live one", status="published"))
    repo.save(_entity("Deleted one", is_deleted=True))

    service = ListingService(repo)
    assert service.list("post").pagination.total == 2
    assert [e.title for e in service.list("post", status="published").items] == ["Live one"]


def test_default_order(repo):
    repo.save(_entity("Old", status="published", published_at=T0))
    repo.save(_entity("New", status="published", published_at=T0 + timedelta(days=1)))
    repo.save(_entity("Draft"))

    titles = [e.title for e in ListingService(repo).list("post").items]
    assert titles == ["Draft", "New", "Old"]


def test_pagination_past_the_end(repo):
    for i in range(45):
        repo.save(_entity(f"Post {i:02d}", updated_at=T0 + timedelta(minutes=i)))
    service = ListingService(repo)

    third = service.list("post", page=3, limit=20)
    fourth = service.list("post", page=4, limit=20)

    assert len(third.items) == 5
    assert (third.pagination.total_pages, third.pagination.has_next, third.pagination.has_prev) == (
        3,
        False,
        True,
    )
    assert fourth.items == []
    assert fourth.pagination.total == 45
    assert fourth.pagination.total_pages == 3


# --- revisions ---


def test_revision_repo(db_path):
    revisions = SQLiteRevisionRepo(db_path)
    eid = uuid4()
    assert revisions.max_rev(eid) == 0

    for rev in (1, 2, 4):
        revisions.insert(Revision(entity_id=eid, rev=rev, snapshot={"rev": rev}, created_at=T0))

    assert revisions.max_rev(eid) == 4
    assert revisions.rev_numbers(eid) == [1, 2, 4]
    assert revisions.get(eid, 2).snapshot == {"rev": 2}
    assert revisions.get(eid, 3) is None
    assert [r.rev for r in revisions.list_for(eid)] == [1, 2, 4]

    with pytest.raises(ConflictError):
        revisions.insert(Revision(entity_id=eid, rev=2, snapshot={}, created_at=T0))
    assert revisions.get(eid, 2).snapshot == {"rev": 2}


# --- meta ---


def test_meta_repo_upsert_remove_and_prefix(db_path):
    meta = SQLiteMetaRepo(db_path, table="content_meta")
    owner = uuid4()

    meta.set(MetaEntry(owner_id=owner, key="seo.title", value="T"))
    meta.set(MetaEntry(owner_id=owner, key="seo.title", value={"v": 2}))
    meta.set(MetaEntry(owner_id=owner, key="seo_x", value=1))
    meta.set(MetaEntry(owner_id=owner, key="SEO.upper", value=None))

    assert meta.get(owner, "seo.title").value == {"v": 2}
    assert [e.key for e in meta.list(owner, "seo.")] == ["seo.title"]
    assert [e.key for e in meta.list(owner)] == ["SEO.upper", "seo.title", "seo_x"]
    assert meta.get(owner, "SEO.upper").value is None

    assert meta.remove(owner, "seo_x") is True
    assert meta.remove(owner, "seo_x") is False


def test_user_meta_table_is_separate(db_path):
    owner = uuid4()
    SQLiteMetaRepo(db_path, table="user_meta").set(MetaEntry(owner_id=owner, key="k", value=1))
    assert SQLiteMetaRepo(db_path, table="content_meta").get(owner, "k") is None


def test_meta_repo_rejects_unknown_table(db_path):
    with pytest.raises(ValueError):
        SQLiteMetaRepo(db_path, table="users")


# --- users ---


def test_user_repo(db_path):
    users = SQLiteUserRepo(db_path)
    alice = users.save(
        User(login="alice", email="alice@example.com", display_name="Alice", password_hash="h", roles=["editor"])
    )

    assert users.get_by_id(alice.id).roles == ["editor"]
    assert users.get_by_login_or_email("ALICE").id == alice.id
    assert users.get_by_login_or_email("alice@example.com").id == alice.id
    assert users.search(None, offset=0, limit=10) == ([users.get_by_id(alice.id)], 1)

    with pytest.raises(ConflictError):
        users.save(User(login="alice", email="other@example.com", display_name="A", password_hash="h"))


def test_user_search_folds_case_and_pages(db_path):
    users = SQLiteUserRepo(db_path)
    for i, (login, name) in enumerate([("anna", "Ånna Berg"), ("bert", "Bert"), ("cleo", "Cleo")]):
        users.save(
            User(
                login=login,
                email=f"{login}@example.com",
                display_name=name,
                password_hash="h",
                created_at=T0 + timedelta(days=i),
                updated_at=T0 + timedelta(days=i),
            )
        )

    found, total = users.search("ånna", offset=0, limit=10)
    assert ([u.login for u in found], total) == (["anna"], 1)
    assert [u.login for u in users.search("example", offset=0, limit=10)[0]] == ["cleo", "bert", "anna"]

    page, total = users.search(None, offset=2, limit=2)
    assert ([u.login for u in page], total) == (["anna"], 3)
