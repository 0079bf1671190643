from uuid import uuid4

import pytest

from src.components.tree import (
    BreadcrumbsInput,
    ChildrenInput,
    MoveInput,
    TreeService,
    run_breadcrumbs,
    run_children,
    run_move,
)
from src.domain.entities import ContentEntity
from src.domain.errors import CyclicParentError, InvalidParentError, SelfParentError


def _node(repo, title, parent=None, **kw):
    entity = ContentEntity(
        type="page",
        title=title,
        slug=title.lower().replace(" ", "-"),
        parent_id=parent.id if parent else None,
        ancestors=[*parent.ancestors, parent.id] if parent else [],
        **kw,
    )
    return repo.save(entity)


@pytest.fixture
def chain(content_repo):
    """root > a > b > c"""
    root = _node(content_repo, "Root")
    a = _node(content_repo, "A", root)
    b = _node(content_repo, "B", a)
    c = _node(content_repo, "C", b)
    return root, a, b, c


def test_resolve_parent_returns_root_first_chain(content_repo, chain):
    root, a, b, c = chain
    tree = TreeService(content_repo)

    assert tree.resolve_parent(None, c.id) == [root.id, a.id, b.id, c.id]
    assert tree.resolve_parent(None, None) == []


def test_resolve_parent_rejects_missing_and_deleted_parent(content_repo):
    tree = TreeService(content_repo)
    gone = _node(content_repo, "Gone", is_deleted=True)

    with pytest.raises(InvalidParentError):
        tree.resolve_parent(None, uuid4())
    with pytest.raises(InvalidParentError):
        tree.resolve_parent(None, gone.id)


def test_self_parent_rejected(content_repo, chain):
    _, a, _, _ = chain
    with pytest.raises(SelfParentError):
        TreeService(content_repo).resolve_parent(a.id, a.id)


def test_moving_under_own_descendant_is_cyclic(content_repo, chain):
    _, a, _, c = chain
    with pytest.raises(CyclicParentError):
        TreeService(content_repo).reparent(a.id, c.id)
    # nothing written
    assert content_repo.get_by_id(a.id).parent_id == chain[0].id


def test_reparent_rebases_whole_subtree(content_repo, revisions, revision_repo, chain):
    root, a, b, c = chain
    other = _node(content_repo, "Other")

    moved = TreeService(content_repo, revisions).reparent(b.id, other.id)

    assert moved.parent_id == other.id
    assert moved.ancestors == [other.id]
    assert content_repo.get_by_id(c.id).ancestors == [other.id, b.id]
    assert revision_repo.rev_numbers(b.id) == [1]


def test_reparent_to_root(content_repo, chain):
    root, a, b, c = chain
    moved = TreeService(content_repo).reparent(b.id, None)

    assert moved.ancestors == []
    assert content_repo.get_by_id(c.id).ancestors == [b.id]


def test_reparent_rebases_deleted_descendants(content_repo, chain):
    root, a, b, c = chain
    content_repo.save(c.model_copy(update={"is_deleted": True}))

    TreeService(content_repo).reparent(b.id, None)

    assert content_repo.get_by_id(c.id, include_deleted=True).ancestors == [b.id]


def test_reparent_to_same_parent_is_noop(content_repo, revisions, revision_repo, chain):
    _, a, b, _ = chain
    saves = content_repo.saves

    TreeService(content_repo, revisions).reparent(b.id, a.id)

    assert content_repo.saves == saves
    assert revision_repo.rev_numbers(b.id) == []


def test_children_sorted_by_menu_order_then_title(content_repo):
    root = _node(content_repo, "Root")
    _node(content_repo, "Zeta", root, menu_order=0)
    _node(content_repo, "Alpha", root, menu_order=1)
    _node(content_repo, "Beta", root, menu_order=0)

    result = run_children(ChildrenInput(parent_id=root.id), repo=content_repo)

    assert [e.title for e in result.items] == ["Beta", "Zeta", "Alpha"]


def test_breadcrumbs_root_first(content_repo, chain):
    root, a, b, c = chain
    result = run_breadcrumbs(BreadcrumbsInput(entity_id=c.id), repo=content_repo)

    assert result.success
    assert [crumb.title for crumb in result.crumbs] == ["Root", "A", "B", "C"]


def test_breadcrumbs_unknown_entity(content_repo):
    result = run_breadcrumbs(BreadcrumbsInput(entity_id=uuid4()), repo=content_repo)

    assert not result.success
    assert result.errors[0].code == "not_found"


def test_run_move_reports_cycle_as_error(content_repo, chain):
    _, a, _, c = chain
    result = run_move(MoveInput(entity_id=a.id, parent_id=c.id), repo=content_repo)

    assert not result.success
    assert result.errors[0].code == "cyclic"
    assert result.errors[0].field == "parent_id"
