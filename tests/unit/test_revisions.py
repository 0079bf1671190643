import logging
from uuid import uuid4

import pytest

from fakes import FailingRevisionRepo
from src.components.revisions import (
    GetRevisionInput,
    HistoryInput,
    RevisionLog,
    run_find_gaps,
    run_get,
    run_history,
)
from src.domain.entities import ContentEntity, Revision
from src.domain.errors import ConflictError, NotFoundError, RevisionWriteError


@pytest.fixture
def entity():
    return ContentEntity(type="post", title="Hello", slug="hello", author_id=uuid4())


def test_creation_is_rev_one_and_updates_increment(revisions, entity):
    first = revisions.record_creation(entity)
    second = revisions.record_update(entity.model_copy(update={"title": "Hello again"}))
    third = revisions.record_update(entity)

    assert [first.rev, second.rev, third.rev] == [1, 2, 3]
    assert second.snapshot["title"] == "Hello again"


def test_creation_defaults_author_to_entity_author(revisions, entity):
    assert revisions.record_creation(entity).author_id == entity.author_id


def test_snapshot_is_json_ready(revisions, entity):
    snap = revisions.record_creation(entity).snapshot
    assert snap["id"] == str(entity.id)
    assert isinstance(snap["created_at"], str)


def test_duplicate_creation_is_conflict(revisions, entity):
    revisions.record_creation(entity)
    with pytest.raises(ConflictError):
        revisions.record_creation(entity)


def test_failed_write_raises_revision_write_error(clock, entity, caplog):
    log = RevisionLog(FailingRevisionRepo(), clock)

    with caplog.at_level(logging.ERROR):
        with pytest.raises(RevisionWriteError) as exc:
            log.record_after_write(entity, created=True)

    assert exc.value.entity is entity
    assert isinstance(exc.value.cause, RuntimeError)
    assert "entity committed" in caplog.text


def test_get_missing_revision(revisions, entity):
    with pytest.raises(NotFoundError):
        revisions.get(entity.id, 7)


def test_find_gaps(revision_repo, revisions, entity, clock):
    for rev in (1, 2, 5):
        revision_repo.insert(
            Revision(entity_id=entity.id, rev=rev, snapshot={}, created_at=clock.now_utc())
        )

    assert revisions.find_gaps(entity.id) == [3, 4]
    assert revisions.find_gaps(uuid4()) == []

    report = run_find_gaps(HistoryInput(entity_id=entity.id), repo=revision_repo)
    assert report.missing == [3, 4]
    assert report.latest == 5
    assert not report.success


def test_component_history_and_get(revision_repo, revisions, entity):
    revisions.record_creation(entity)
    revisions.record_update(entity)

    history = run_history(HistoryInput(entity_id=entity.id), repo=revision_repo)
    assert [r.rev for r in history.revisions] == [1, 2]

    found = run_get(GetRevisionInput(entity_id=entity.id, rev=2), repo=revision_repo)
    assert found.success and found.revision.rev == 2

    missing = run_get(GetRevisionInput(entity_id=entity.id, rev=9), repo=revision_repo)
    assert not missing.success
    assert missing.errors[0].code == "not_found"
