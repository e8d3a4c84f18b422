"""Tests for PortfolioRepository, including tenant isolation."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from folio.services.repositories import (
    ConstraintViolationError,
    DuplicateError,
    InvestmentRepository,
    NotFoundError,
    PortfolioRepository,
)
from folio.services.repositories.exceptions import is_unique_violation


class TestPortfolioRepository:
    """Test cases for PortfolioRepository."""

    def test_create_and_find(self, db, user_a):
        repo = PortfolioRepository(db, user_a.id)
        portfolio = repo.create("Growth", "Long term")
        db.commit()

        found = repo.find_by_id(portfolio.id)
        assert found is not None
        assert found.user_id == user_a.id
        assert found.description == "Long term"

    def test_name_unique_per_user(self, db, user_a, portfolio_a):
        with pytest.raises(DuplicateError):
            PortfolioRepository(db, user_a.id).create("Growth")

    def test_same_name_allowed_for_different_users(self, db, user_b, portfolio_a):
        portfolio = PortfolioRepository(db, user_b.id).create("Growth")
        assert portfolio.user_id == user_b.id

    def test_find_all_returns_owned_portfolios(self, db, user_a, portfolio_a):
        repo = PortfolioRepository(db, user_a.id)
        repo.create("Income")
        db.commit()

        assert {p.name for p in repo.find_all()} == {"Growth", "Income"}

    def test_update_name_and_description(self, db, user_a, portfolio_a):
        repo = PortfolioRepository(db, user_a.id)
        repo.update(portfolio_a.id, name="Aggressive Growth", description=None)
        db.commit()

        updated = repo.get_by_id(portfolio_a.id)
        assert updated.name == "Aggressive Growth"
        assert updated.description is None

    def test_update_rejects_taken_name(self, db, user_a, portfolio_a):
        repo = PortfolioRepository(db, user_a.id)
        other = repo.create("Income")
        with pytest.raises(DuplicateError):
            repo.update(other.id, name="Growth")

    def test_null_name_is_constraint_violation_not_duplicate(self, db, user_a, portfolio_a):
        with pytest.raises(ConstraintViolationError):
            PortfolioRepository(db, user_a.id).update(portfolio_a.id, name=None)

    def test_delete_empty_portfolio(self, db, user_a, portfolio_a):
        repo = PortfolioRepository(db, user_a.id)
        repo.delete(portfolio_a.id)
        db.commit()
        assert repo.find_by_id(portfolio_a.id) is None

    def test_delete_refused_while_holding_investments(self, db, user_a, portfolio_a):
        InvestmentRepository(db, user_a.id).create(
            portfolio_id=portfolio_a.id,
            name="AAPL shares",
            amount=Decimal("1000.00"),
            investment_type="stocks",
        )
        db.commit()

        with pytest.raises(ConstraintViolationError, match="1 investment"):
            PortfolioRepository(db, user_a.id).delete(portfolio_a.id)
        assert PortfolioRepository(db, user_a.id).find_by_id(portfolio_a.id) is not None


class TestPortfolioTenantIsolation:
    """Foreign-owned portfolios behave exactly like missing ones."""

    def test_find_by_id_returns_none_for_other_user(self, db, user_b, portfolio_a):
        assert PortfolioRepository(db, user_b.id).find_by_id(portfolio_a.id) is None

    def test_get_by_id_raises_not_found_for_other_user(self, db, user_b, portfolio_a):
        with pytest.raises(NotFoundError) as owned_elsewhere:
            PortfolioRepository(db, user_b.id).get_by_id(portfolio_a.id)
        with pytest.raises(NotFoundError) as missing:
            PortfolioRepository(db, user_b.id).get_by_id(9999)

        assert type(owned_elsewhere.value) is type(missing.value)

    def test_find_all_excludes_other_users(self, db, user_b, portfolio_a):
        assert PortfolioRepository(db, user_b.id).find_all() == []

    def test_update_other_users_portfolio_rejected(self, db, user_a, user_b, portfolio_a):
        with pytest.raises(NotFoundError):
            PortfolioRepository(db, user_b.id).update(portfolio_a.id, name="Mine now")
        assert PortfolioRepository(db, user_a.id).get_by_id(portfolio_a.id).name == "Growth"

    def test_delete_other_users_portfolio_rejected(self, db, user_a, user_b, portfolio_a):
        with pytest.raises(NotFoundError):
            PortfolioRepository(db, user_b.id).delete(portfolio_a.id)
        assert PortfolioRepository(db, user_a.id).find_by_id(portfolio_a.id) is not None


class PgError(Exception):
    """Stand-in for a psycopg2 error carrying a SQLSTATE."""

    def __init__(self, pgcode):
        super().__init__("constraint failed")
        self.pgcode = pgcode


@pytest.mark.parametrize(
    "orig, expected",
    [
        (Exception("UNIQUE constraint failed: portfolios.user_id, portfolios.name"), True),
        (Exception("NOT NULL constraint failed: portfolios.name"), False),
        (PgError("23505"), True),
        (PgError("23502"), False),
    ],
)
def test_is_unique_violation(orig, expected):
    assert is_unique_violation(IntegrityError("UPDATE portfolios", {}, orig)) is expected
