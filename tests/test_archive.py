"""Tests for archive item mutations."""

import pytest

from warden.core.errors import Forbidden, NotFound, ValidationError
from warden.db import repo
from warden.db.schema import ArchiveComment, ArchiveLike
from warden.records.archive import (
    ArchiveItemInput,
    create_archive_item,
    delete_archive_item,
    update_archive_item,
)
from warden.records.comments import create_archive_comment
from warden.records.likes import toggle_archive_like


def _item_input(**overrides):
    fields = dict(
        actor_id="u1",
        title="Whale song",
        content_type="audio",
        media_url="http://m/song.mp3",
    )
    fields.update(overrides)
    return ArchiveItemInput(**fields)


class TestCreateArchiveItem:
    def test_create(self, session):
        item = create_archive_item(session, _item_input(artist_name=" Moby ", tags=["sea"]))
        assert item.user_id == "u1"
        assert item.artist_name == "Moby"
        assert item.tags == ["sea"]

    @pytest.mark.parametrize("field", ["title", "content_type", "media_url"])
    def test_required_fields(self, session, field):
        with pytest.raises(ValidationError, match="is required"):
            create_archive_item(session, _item_input(**{field: ""}))

    def test_unknown_content_type(self, session):
        with pytest.raises(ValidationError, match="Invalid content type"):
            create_archive_item(session, _item_input(content_type="hologram"))


class TestUpdateArchiveItem:
    """Partial update semantics."""

    def test_partial(self, session):
        item = create_archive_item(session, _item_input(description="old", tags=["a"]))
        updated = update_archive_item(session, item.id, "u1", {"description": "new"})
        assert updated.description == "new"
        assert updated.tags == ["a"]
        assert updated.title == "Whale song"

    def test_media_fields_immutable(self, session):
        item = create_archive_item(session, _item_input())
        with pytest.raises(ValidationError, match="media_url"):
            update_archive_item(session, item.id, "u1", {"media_url": "http://evil"})

    def test_non_owner_forbidden(self, session):
        item = create_archive_item(session, _item_input())
        with pytest.raises(Forbidden, match="your own archive items"):
            update_archive_item(session, item.id, "u2", {"title": "Mine"})

    def test_missing(self, session):
        with pytest.raises(NotFound, match="Archive item not found"):
            update_archive_item(session, "nope", "u1", {"title": "x"})


class TestDeleteArchiveItem:
    def test_delete_cascades(self, session):
        item = create_archive_item(session, _item_input())
        toggle_archive_like(session, "u2", item.id)
        create_archive_comment(session, item.id, "u2", "lovely")

        delete_archive_item(session, item.id, "u1")

        assert repo.get_archive_item(session, item.id) is None
        assert session.query(ArchiveLike).count() == 0
        assert session.query(ArchiveComment).count() == 0

    def test_non_owner_forbidden(self, session):
        item = create_archive_item(session, _item_input())
        with pytest.raises(Forbidden):
            delete_archive_item(session, item.id, "u2")
        assert repo.get_archive_item(session, item.id) is not None
