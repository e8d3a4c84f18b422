"""Tests for DistributionRepository."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from folio.services.repositories import (
    ConstraintViolationError,
    DistributionRepository,
    InvestmentRepository,
    NotFoundError,
)


@pytest.fixture
def investment(db, user_a, portfolio_a):
    investment = InvestmentRepository(db, user_a.id).create(
        portfolio_id=portfolio_a.id,
        name="Rental",
        amount=Decimal("20000"),
        investment_type="real_estate",
    )
    db.commit()
    return investment


class TestDistributionRepository:
    """Test cases for DistributionRepository."""

    def test_list_newest_first(self, db, user_a, investment):
        repo = DistributionRepository(db, user_a.id)
        today = date.today()
        repo.create(investment.id, today - timedelta(days=30), Decimal("800"))
        repo.create(investment.id, today, Decimal("850"), "June rent")
        db.commit()

        amounts = [d.amount for d in repo.find_by_investment(investment.id)]
        assert amounts == [Decimal("850.00"), Decimal("800.00")]

    def test_negative_amount_rejected(self, db, user_a, investment):
        with pytest.raises(ConstraintViolationError):
            DistributionRepository(db, user_a.id).create(investment.id, date.today(), Decimal("-5"))

    def test_update_and_delete(self, db, user_a, investment):
        repo = DistributionRepository(db, user_a.id)
        distribution = repo.create(investment.id, date.today(), Decimal("10"))
        db.commit()

        repo.update(distribution.id, amount=Decimal("12.50"), description="corrected")
        db.commit()
        assert repo.get_by_id(distribution.id).amount == Decimal("12.50")

        repo.delete(distribution.id)
        db.commit()
        assert repo.find_by_id(distribution.id) is None

    def test_update_rejects_negative_amount(self, db, user_a, investment):
        repo = DistributionRepository(db, user_a.id)
        distribution = repo.create(investment.id, date.today(), Decimal("10"))

        with pytest.raises(ConstraintViolationError):
            repo.update(distribution.id, amount=Decimal("-1"))

    def test_other_user_cannot_list_or_add(self, db, user_b, investment):
        repo = DistributionRepository(db, user_b.id)
        with pytest.raises(NotFoundError):
            repo.find_by_investment(investment.id)
        with pytest.raises(NotFoundError):
            repo.create(investment.id, date.today(), Decimal("1"))

    def test_other_user_cannot_modify(self, db, user_a, user_b, investment):
        distribution = DistributionRepository(db, user_a.id).create(
            investment.id, date.today(), Decimal("10")
        )
        db.commit()

        repo = DistributionRepository(db, user_b.id)
        assert repo.find_by_id(distribution.id) is None
        with pytest.raises(NotFoundError):
            repo.update(distribution.id, amount=Decimal("0"))
        with pytest.raises(NotFoundError):
            repo.delete(distribution.id)
