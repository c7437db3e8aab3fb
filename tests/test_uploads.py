"""Tests for the upload router and local storage."""

import pytest

from warden.core.errors import (
    Forbidden,
    NotFound,
    TooLarge,
    UnsupportedType,
    UploadFailed,
    ValidationError,
)
from warden.media.categories import MB
from warden.media.uploads import MediaUploader
from warden.storage.base import ObjectExistsError, StorageError
from warden.storage.local import LocalStorage

BASE = "http://media.test"


@pytest.fixture
def uploader(storage):
    return MediaUploader(storage, BASE + "/")


class TestStore:
    """Tests for MediaUploader.store."""

    def test_public_category_url(self, uploader, storage):
        ref = uploader.store(b"png", "image/png", "post", "u1", "cat.png", now_ms=1700)
        assert ref.bucket == "post"
        assert ref.path.startswith("u1/post/1700-")
        assert ref.path.endswith("-cat.png")
        assert ref.url == f"{BASE}/media/public/post/{ref.path}"
        assert storage.read("post", ref.path) == b"png"

    def test_private_category_reference(self, uploader):
        ref = uploader.store(b"%PDF", "application/pdf", "archive", "u1", "zine.pdf")
        assert ref.url == f"{BASE}/media/object/archive/{ref.path}"

    def test_folder(self, uploader):
        ref = uploader.store(b"x", "image/png", "journal", "u1", "a.png", folder="2024/summer")
        assert ref.path.startswith("u1/journal/2024/summer/")

    def test_traversal_folder_rejected(self, uploader):
        with pytest.raises(ValidationError):
            uploader.store(b"x", "image/png", "journal", "u1", "a.png", folder="../../u2")

    def test_same_name_same_millisecond_distinct(self, uploader):
        """Two uploads in the same millisecond land at different paths."""
        a = uploader.store(b"a", "image/png", "post", "u1", "same.png", now_ms=42)
        b = uploader.store(b"b", "image/png", "post", "u1", "same.png", now_ms=42)
        assert a.path != b.path

    def test_rejected_before_storage(self, uploader, storage, monkeypatch):
        calls = []
        monkeypatch.setattr(storage, "write", lambda *a, **k: calls.append(a))
        with pytest.raises(UnsupportedType):
            uploader.store(b"x", "text/html", "post", "u1", "x.html")
        with pytest.raises(TooLarge):
            uploader.store(b"x" * (5 * MB + 1), "image/png", "avatar", "u1", "big.png")
        assert calls == []

    def test_backend_failure_is_upload_failed(self, uploader, storage, monkeypatch):
        def boom(*args, **kwargs):
            raise StorageError("disk full")

        monkeypatch.setattr(storage, "write", boom)
        with pytest.raises(UploadFailed):
            uploader.store(b"x", "image/png", "post", "u1", "a.png")

    def test_collision_is_upload_failed(self, uploader, monkeypatch):
        monkeypatch.setattr(
            "warden.media.uploads.unique_object_name", lambda filename, now_ms=None: "fixed.png"
        )
        uploader.store(b"first", "image/png", "post", "u1", "a.png")
        with pytest.raises(UploadFailed):
            uploader.store(b"second", "image/png", "post", "u1", "a.png")


class TestDelete:
    """Tests for MediaUploader.delete."""

    def test_owner_deletes(self, uploader, storage):
        ref = uploader.store(b"x", "image/png", "post", "u1", "a.png")
        uploader.delete("post", ref.path, "u1")
        assert not storage.exists("post", ref.path)

    def test_non_owner_forbidden(self, uploader, storage):
        ref = uploader.store(b"x", "image/png", "post", "u1", "a.png")
        with pytest.raises(Forbidden, match="your own files"):
            uploader.delete("post", ref.path, "u2")
        assert storage.exists("post", ref.path)

    def test_missing(self, uploader):
        with pytest.raises(NotFound):
            uploader.delete("post", "u1/post/nothing.png", "u1")

    def test_traversal_rejected(self, uploader):
        with pytest.raises(ValidationError):
            uploader.delete("post", "u1/../u2/post/a.png", "u1")


class TestLocalStorage:
    def test_no_overwrite(self, tmp_path):
        storage = LocalStorage(tmp_path)
        storage.write("post", "u1/a.png", b"1", "image/png")
        with pytest.raises(ObjectExistsError):
            storage.write("post", "u1/a.png", b"2", "image/png")
        assert storage.read("post", "u1/a.png") == b"1"

    def test_escape_rejected(self, tmp_path):
        storage = LocalStorage(tmp_path / "root")
        with pytest.raises(StorageError):
            storage.write("post", "../../outside.txt", b"x", "text/plain")
        assert not (tmp_path / "outside.txt").exists()

    def test_content_type_from_extension(self, tmp_path):
        storage = LocalStorage(tmp_path)
        assert storage.content_type("post", "u1/a.png") == "image/png"
