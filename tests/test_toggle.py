"""Tests for the like toggle engine.

Invariants:
1. Toggling alternates liked / unliked
2. At most one edge per (actor, target), whatever the interleaving
3. A lost insert race still reports liked=True
4. A toggle on a missing target is a store error, not a silent success
"""

import threading
import time

import pytest

from warden.core.errors import StoreError, ValidationError
from warden.db import repo
from warden.db.schema import ArchiveLike, Like
from warden.db.session import (
    build_engine,
    build_session_factory,
    init_db,
    session_scope,
    sqlite_url,
)
from warden.records.archive import ArchiveItemInput, create_archive_item
from warden.records.likes import toggle_archive_like, toggle_post_like
from warden.records.posts import PostInput, create_post


@pytest.fixture
def post(session):
    return create_post(session, PostInput(actor_id="author", content="hello"))


class TestPostToggle:
    """Tests for post likes."""

    def test_alternates(self, session, post):
        results = [toggle_post_like(session, "u2", post.id).liked for _ in range(5)]
        assert results == [True, False, True, False, True]
        assert session.query(Like).count() == 1

    def test_like_count(self, session, post):
        assert toggle_post_like(session, "u2", post.id).like_count == 1
        assert toggle_post_like(session, "u3", post.id).like_count == 2
        assert toggle_post_like(session, "u2", post.id).like_count == 1

    def test_actors_independent(self, session, post):
        toggle_post_like(session, "u2", post.id)
        result = toggle_post_like(session, "u3", post.id)
        assert result.liked is True
        assert repo.find_edge_id(session, Like, "u2", post.id) is not None

    def test_lost_race_reports_liked(self, session, post, monkeypatch):
        """Both toggles saw no edge; the second insert hits the unique constraint."""
        toggle_post_like(session, "u2", post.id)
        monkeypatch.setattr(repo, "find_edge_id", lambda *args: None)

        result = toggle_post_like(session, "u2", post.id)

        assert result.liked is True
        assert result.like_count == 1
        assert session.query(Like).filter(Like.user_id == "u2").count() == 1

    def test_missing_post_is_store_error(self, session):
        with pytest.raises(StoreError):
            toggle_post_like(session, "u2", "no-such-post")
        assert session.query(Like).count() == 0

    def test_blank_actor_rejected(self, session, post):
        with pytest.raises(ValidationError):
            toggle_post_like(session, "", post.id)

    def test_post_delete_removes_likes(self, session, post):
        from warden.records.posts import delete_post

        toggle_post_like(session, "u2", post.id)
        delete_post(session, post.id, "author")
        assert session.query(Like).count() == 0


@pytest.fixture
def file_factory(tmp_path):
    """Session factory over a file database; each session owns a connection."""
    engine = build_engine(sqlite_url(tmp_path / "race.db"))
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


class TestConcurrentToggle:
    """Two requests racing on separate sessions leave exactly one edge."""

    def _post_id(self, factory):
        with session_scope(factory) as s:
            return create_post(s, PostInput(actor_id="author", content="hello")).id

    def test_engine_does_not_share_connections(self, file_factory):
        a, b = file_factory(), file_factory()
        try:
            assert a.connection().connection.dbapi_connection is not (
                b.connection().connection.dbapi_connection
            )
        finally:
            a.close()
            b.close()

    def test_loser_after_winner_commits(self, file_factory, monkeypatch):
        post_id = self._post_id(file_factory)
        a, b = file_factory(), file_factory()
        try:
            assert repo.find_edge_id(a, Like, "u2", post_id) is None
            assert repo.find_edge_id(b, Like, "u2", post_id) is None

            repo.insert_edge(a, Like, "edge-a", "u2", post_id)
            repo.commit(a)

            monkeypatch.setattr(repo, "find_edge_id", lambda *args: None)
            result = toggle_post_like(b, "u2", post_id)
        finally:
            a.close()
            b.close()

        assert result.liked is True
        assert result.like_count == 1
        with session_scope(file_factory) as s:
            assert s.query(Like).count() == 1

    def test_loser_rollback_keeps_winner_edge(self, file_factory, monkeypatch):
        """The loser blocks on the winner's uncommitted insert, then rolls back only itself."""
        post_id = self._post_id(file_factory)
        a, b = file_factory(), file_factory()
        outcome = {}

        def lose_race():
            try:
                outcome["result"] = toggle_post_like(b, "u2", post_id)
            except Exception as e:
                outcome["error"] = e

        try:
            assert repo.find_edge_id(a, Like, "u2", post_id) is None
            repo.insert_edge(a, Like, "edge-a", "u2", post_id)

            monkeypatch.setattr(repo, "find_edge_id", lambda *args: None)
            loser = threading.Thread(target=lose_race)
            loser.start()
            time.sleep(0.2)
            repo.commit(a)
            loser.join(timeout=10)
        finally:
            a.close()
            b.close()

        assert not loser.is_alive()
        assert "error" not in outcome
        assert outcome["result"].liked is True
        assert outcome["result"].like_count == 1
        with session_scope(file_factory) as s:
            assert s.query(Like).count() == 1


class TestArchiveToggle:
    """The same engine serves archive likes."""

    def test_alternates(self, session):
        item = create_archive_item(
            session,
            ArchiveItemInput(
                actor_id="u1", title="Whale", content_type="artwork", media_url="http://m/w.png"
            ),
        )
        assert toggle_archive_like(session, "u2", item.id).liked is True
        assert toggle_archive_like(session, "u2", item.id).liked is False
        assert session.query(ArchiveLike).count() == 0
