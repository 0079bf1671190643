from uuid import uuid4

import pytest

from src.adapters.fs.filestore import FileSystemStore
from src.components.media import (
    MediaService,
    ReplaceMediaInput,
    UploadConfig,
    UploadMediaInput,
    run_replace,
    run_upload,
)
from src.components.meta import MetaStore
from src.domain.errors import ValidationFailedError

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def files(tmp_path):
    return FileSystemStore(str(tmp_path / "uploads"))


@pytest.fixture
def meta(meta_repo, content_repo):
    return MetaStore(meta_repo, content_repo)


@pytest.fixture
def config():
    return UploadConfig(max_upload_bytes=1024, allowlist_mime_types=("image/png", "text/plain"))


@pytest.fixture
def media(service, meta, files, config):
    return MediaService(service, meta, files, config)


def test_upload_creates_published_media_entity(media, meta, files):
    entity, url = media.upload("Cover Photo.png", PNG, "image/png", uuid4())

    assert entity.type == "media"
    assert entity.status == "published"
    assert entity.slug.startswith("cover-photo-")
    assert url.startswith("/uploads/") and url.endswith("-Cover_Photo.png")
    assert files.get(url.removeprefix("/uploads/")) == PNG

    body = entity.content.model_dump()
    assert (body["size"], body["mime_type"], body["name"]) == (len(PNG), "image/png", "Cover Photo.png")
    assert meta.get(entity.id, "mime_type") == "image/png"
    assert meta.get(entity.id, "size") == len(PNG)
    assert meta.get(entity.id, "original_name") == "Cover Photo.png"


@pytest.mark.parametrize(
    "filename,data,mime",
    [("a.png", b"", "image/png"), ("a.png", b"x" * 2048, "image/png"), ("a.exe", b"MZ", "application/x-msdownload")],
)
def test_upload_rejects_before_storing(media, files, filename, data, mime):
    with pytest.raises(ValidationFailedError):
        media.upload(filename, data, mime)
    assert list(files.base_path.iterdir()) == []


def test_failed_create_removes_stored_file(service, meta, files, config, hooks):
    hooks.add_filter("content.prepare_create", lambda data, author: {**data, "status": "nonsense"})
    out = run_upload(
        UploadMediaInput(filename="a.png", data=PNG, mime_type="image/png"),
        content=service,
        meta=meta,
        files=files,
        config=config,
    )

    assert not out.success
    assert out.errors[0].code == "validation_failed"
    assert list(files.base_path.iterdir()) == []


def test_replace_swaps_file_and_records_revision(media, service, files, revision_repo):
    entity, old_url = media.upload("a.txt", b"one", "text/plain")

    replaced, new_url = media.replace(entity.id, "b.txt", b"two", "text/plain")

    assert new_url != old_url
    assert replaced.content.model_dump()["url"] == new_url
    assert revision_repo.rev_numbers(entity.id) == [1, 2]
    # the previous file stays for older revisions
    assert files.get(old_url.removeprefix("/uploads/")) == b"one"


def test_replace_requires_media_entity(service, meta, files, config):
    post = service.create("post", {"title": "Not media"})

    out = run_replace(
        ReplaceMediaInput(entity_id=post.id, filename="a.txt", data=b"x", mime_type="text/plain"),
        content=service,
        meta=meta,
        files=files,
        config=config,
    )

    assert not out.success
    assert out.mode == "replace"
    assert out.errors[0].code == "not_found"
