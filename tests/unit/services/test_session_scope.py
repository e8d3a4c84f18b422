"""Tests for per-session identity binding."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from folio.constants import SESSION_USER_INFO_KEY
from folio.services.session_scope import (
    StorageUnavailableError,
    bind_session_identity,
    session_user_id,
)


class TestBindSessionIdentity:
    """Tests for bind_session_identity and session_user_id."""

    def test_records_identity_on_session(self, db):
        bind_session_identity(db, 42)
        assert db.info[SESSION_USER_INFO_KEY] == 42
        assert session_user_id(db) == 42

    def test_identity_survives_commit(self, db):
        bind_session_identity(db, 42)
        db.commit()
        assert session_user_id(db) == 42

    def test_rebinding_replaces_identity(self, db):
        bind_session_identity(db, 1)
        bind_session_identity(db, 2)
        assert session_user_id(db) == 2

    def test_sessions_are_independent(self, session_factory):
        """Two concurrent sessions keep their own identities."""
        first, second = session_factory(), session_factory()
        try:
            bind_session_identity(first, 1)
            bind_session_identity(second, 2)
            assert session_user_id(first) == 1
            assert session_user_id(second) == 2
        finally:
            first.close()
            second.close()

    def test_unbound_session_raises(self, db):
        with pytest.raises(RuntimeError):
            session_user_id(db)

    def test_connection_failure_raises_storage_unavailable(self):
        """Should translate driver errors and leave the session unbound."""
        db = MagicMock()
        db.info = {}
        db.in_transaction.return_value = False
        db.connection.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

        with pytest.raises(StorageUnavailableError):
            bind_session_identity(db, 5)
        assert SESSION_USER_INFO_KEY not in db.info

    def test_applies_setting_on_postgresql_when_transaction_open(self):
        db = MagicMock()
        db.info = {}
        db.in_transaction.return_value = True
        connection = db.connection.return_value
        connection.dialect.name = "postgresql"

        bind_session_identity(db, 9)

        statement, params = connection.execute.call_args.args
        assert "set_config" in str(statement)
        assert params == {"name": "app.user_id", "value": "9"}

    def test_identity_reapplied_at_each_transaction_start(self, db):
        """The after_begin listener applies the bound identity to every new transaction."""
        with patch("folio.services.session_scope._apply_identity") as apply_identity:
            bind_session_identity(db, 3)
            db.commit()
            db.connection()

        assert apply_identity.call_count == 2
        assert all(call.args[1] == 3 for call in apply_identity.call_args_list)
