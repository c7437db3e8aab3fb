"""Tests for journal mutations and the access log."""

import pytest
from sqlalchemy.exc import OperationalError

from warden.core.errors import Forbidden, NotFound, ValidationError
from warden.db import repo
from warden.db.schema import JournalAccessLog, JournalEntry
from warden.records.journal import (
    AccessContext,
    JournalInput,
    create_journal_entry,
    delete_journal_entry,
    list_own_entries,
    update_journal_entry,
)


def _encrypted(**overrides):
    fields = dict(
        is_encrypted=True,
        content="plain text that must not be stored",
        content_encrypted="ciphertext",
        encryption_key_id="k1",
        encryption_salt="salt",
        encryption_iv="iv",
    )
    fields.update(overrides)
    return JournalInput(**fields)


class TestCreateJournalEntry:
    """Tests for create_journal_entry."""

    def test_private_by_default(self, session):
        entry = create_journal_entry(session, "u1", JournalInput(content="dear diary"))
        assert entry.is_private is True
        assert entry.tags == []
        assert entry.title is None

    def test_content_required(self, session):
        with pytest.raises(ValidationError, match="Content is required"):
            create_journal_entry(session, "u1", JournalInput(content="  "))

    def test_encrypted_drops_plain_content(self, session):
        entry = create_journal_entry(session, "u1", _encrypted())
        assert entry.content is None
        assert entry.content_encrypted == "ciphertext"
        assert entry.encryption_iv == "iv"

    def test_encrypted_requires_salt_and_iv(self, session):
        with pytest.raises(ValidationError, match="salt and IV"):
            create_journal_entry(session, "u1", _encrypted(encryption_iv=None))

    def test_access_logged_with_context(self, session):
        entry = create_journal_entry(
            session,
            "u1",
            JournalInput(content="dear diary"),
            AccessContext(ip_address="10.0.0.1", user_agent="pytest"),
        )
        log = session.query(JournalAccessLog).one()
        assert log.entry_id == entry.id
        assert log.action == "create"
        assert log.ip_address == "10.0.0.1"
        assert log.user_agent == "pytest"

    def test_access_log_failure_does_not_fail_create(self, session, monkeypatch):
        def boom(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("log table locked"))

        monkeypatch.setattr(repo, "create_journal_access_log", boom)
        entry = create_journal_entry(session, "u1", JournalInput(content="dear diary"))

        assert repo.get_journal_entry(session, entry.id) is not None
        assert session.query(JournalAccessLog).count() == 0


class TestUpdateJournalEntry:
    """Full replace semantics."""

    def test_omitted_fields_reset(self, session):
        entry = create_journal_entry(
            session,
            "u1",
            JournalInput(
                content="first",
                title="Day 1",
                mood="calm",
                tags=["sea"],
                media_url="http://m/a.png",
                is_private=False,
            ),
        )
        updated = update_journal_entry(session, entry.id, "u1", JournalInput(content="second"))

        assert updated.content == "second"
        assert updated.title is None
        assert updated.mood is None
        assert updated.tags == []
        assert updated.media_url is None
        assert updated.is_private is True
        assert updated.updated_at is not None

    def test_non_owner_forbidden(self, session):
        entry = create_journal_entry(session, "u1", JournalInput(content="secret"))
        with pytest.raises(Forbidden, match="your own journal entries"):
            update_journal_entry(session, entry.id, "u2", JournalInput(content="mine now"))
        assert repo.get_journal_entry(session, entry.id).content == "secret"

    def test_missing_entry(self, session):
        with pytest.raises(NotFound, match="Journal entry not found"):
            update_journal_entry(session, "nope", "u1", JournalInput(content="x"))

    def test_logs_update(self, session):
        entry = create_journal_entry(session, "u1", JournalInput(content="first"))
        update_journal_entry(session, entry.id, "u1", JournalInput(content="second"))
        actions = [row.action for row in session.query(JournalAccessLog).all()]
        assert sorted(actions) == ["create", "update"]


class TestDeleteJournalEntry:
    def test_owner_deletes_and_log_survives(self, session):
        entry = create_journal_entry(session, "u1", JournalInput(content="bye"))
        delete_journal_entry(session, entry.id, "u1")

        assert session.query(JournalEntry).count() == 0
        actions = {row.action for row in session.query(JournalAccessLog).all()}
        assert actions == {"create", "delete"}

    def test_non_owner_forbidden(self, session):
        entry = create_journal_entry(session, "u1", JournalInput(content="stay"))
        with pytest.raises(Forbidden):
            delete_journal_entry(session, entry.id, "u2")
        assert session.query(JournalEntry).count() == 1


class TestListOwnEntries:
    def test_only_own_entries(self, session):
        create_journal_entry(session, "u1", JournalInput(content="a"))
        create_journal_entry(session, "u2", JournalInput(content="b"))
        entries = list_own_entries(session, "u1")
        assert [e.content for e in entries] == ["a"]
