"""Tests for UserRepository."""

import pytest

from folio.services.repositories import DuplicateError, NotFoundError, UserRepository


class TestUserRepository:
    """Test cases for UserRepository."""

    def test_find_by_id_returns_user(self, db, user_a):
        """Should return user when ID exists."""
        user = UserRepository(db).find_by_id(user_a.id)
        assert user is not None
        assert user.email == "alice@example.com"

    def test_find_by_id_returns_none_for_missing(self, db):
        assert UserRepository(db).find_by_id(999) is None

    def test_get_by_id_raises_for_missing(self, db):
        with pytest.raises(NotFoundError):
            UserRepository(db).get_by_id(999)

    def test_find_by_email_is_case_insensitive(self, db, user_a):
        """Should find user regardless of email case."""
        user = UserRepository(db).find_by_email("ALICE@EXAMPLE.COM")
        assert user is not None
        assert user.id == user_a.id

    def test_create_rejects_duplicate_email(self, db, user_a):
        with pytest.raises(DuplicateError):
            UserRepository(db).create(name="Other Alice", email="Alice@example.com")

    def test_update_changes_name_and_email(self, db, user_a):
        repo = UserRepository(db)
        user = repo.update(user_a, name="Alice Liddell", email="liddell@example.com")
        db.commit()

        assert repo.get_by_id(user.id).name == "Alice Liddell"
        assert repo.find_by_email("liddell@example.com") is not None

    def test_update_rejects_email_of_another_user(self, db, user_a, user_b):
        with pytest.raises(DuplicateError):
            UserRepository(db).update(user_a, email="bob@example.com")

    def test_find_all_ids(self, db, user_a, user_b):
        assert UserRepository(db).find_all_ids() == [user_a.id, user_b.id]
