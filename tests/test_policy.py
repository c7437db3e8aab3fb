"""Tests for the authorization gate.

Rules:
1. Owner-scoped kinds allow only the owner
2. Empty or missing actors are always denied on owner-scoped kinds
3. Administrative kinds always allow
4. require() raises Forbidden with a message naming the record kind
"""

import pytest

from warden.core.errors import Forbidden
from warden.core.policy import (
    ADMINISTRATIVE_KINDS,
    Decision,
    RecordKind,
    authorize,
    require,
)

OWNER_SCOPED = [k for k in RecordKind if k not in ADMINISTRATIVE_KINDS]


class TestAuthorize:
    """Tests for authorize decisions."""

    @pytest.mark.parametrize("kind", OWNER_SCOPED)
    def test_owner_allowed(self, kind):
        assert authorize("u1", "u1", "update", kind) is Decision.ALLOW
        assert authorize("u1", "u1", "delete", kind) is Decision.ALLOW

    @pytest.mark.parametrize("kind", OWNER_SCOPED)
    def test_non_owner_denied(self, kind):
        assert authorize("u2", "u1", "delete", kind) is Decision.DENY

    def test_empty_actor_denied_even_against_empty_owner(self):
        """An empty actor id never matches, including an empty owner."""
        assert authorize("", "", "update", RecordKind.POST) is Decision.DENY
        assert authorize(None, None, "update", RecordKind.POST) is Decision.DENY

    def test_missing_owner_denied(self):
        assert authorize("u1", None, "delete", RecordKind.COMMENT) is Decision.DENY

    @pytest.mark.parametrize("kind", sorted(ADMINISTRATIVE_KINDS))
    def test_administrative_kinds_always_allow(self, kind):
        assert authorize("anyone", "someone-else", "delete", kind) is Decision.ALLOW
        assert authorize(None, None, "update", kind) is Decision.ALLOW

    def test_ids_compared_exactly(self):
        """No trimming or case folding happens in the gate."""
        assert authorize("U1", "u1", "update", RecordKind.POST) is Decision.DENY
        assert authorize("u1 ", "u1", "update", RecordKind.POST) is Decision.DENY


class TestRequire:
    """Tests for require()."""

    def test_allows_silently(self):
        require("u1", "u1", "delete", RecordKind.POST)

    def test_raises_forbidden_with_kind_label(self):
        with pytest.raises(Forbidden) as exc_info:
            require("u2", "u1", "delete", RecordKind.POST)
        assert exc_info.value.detail == "Unauthorized: you can only delete your own posts"
        assert exc_info.value.status_code == 403

    def test_journal_label_plural(self):
        with pytest.raises(Forbidden, match="your own journal entries"):
            require("u2", "u1", "update", RecordKind.JOURNAL_ENTRY)
