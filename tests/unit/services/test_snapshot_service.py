"""Tests for SnapshotService and the batch snapshot job."""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch

from folio.models import InvestmentValueHistory, PortfolioDailySnapshot, UserDailySnapshot
from folio.services.repositories import (
    DistributionRepository,
    InvestmentRepository,
    PortfolioRepository,
)
from folio.services.session_scope import bind_session_identity
from folio.services.snapshot_service import SnapshotService, save_all_snapshots


def add_stock(db, user_id, portfolio_id, amount="1000.00", quantity=None, price=None):
    investment = InvestmentRepository(db, user_id).create(
        portfolio_id=portfolio_id,
        name="AAPL shares",
        amount=Decimal(amount),
        investment_type="stocks",
        stock_symbol="AAPL",
        stock_quantity=quantity,
        current_stock_price=price,
    )
    db.commit()
    return investment


class TestSaveSnapshots:
    """Tests for SnapshotService.save_snapshots."""

    def test_saves_every_level(self, db, user_a, portfolio_a):
        investment = add_stock(db, user_a.id, portfolio_a.id)
        PortfolioRepository(db, user_a.id).create("Empty")
        DistributionRepository(db, user_a.id).create(investment.id, date.today(), Decimal("25.50"))
        db.commit()
        today = date.today()

        result = SnapshotService(db, user_a.id).save_snapshots(today)
        db.commit()

        assert result == {"snapshot_date": today, "portfolios_saved": 2, "investments_saved": 1}
        user_row = db.get(UserDailySnapshot, (user_a.id, today))
        assert user_row.portfolio_count == 2
        assert user_row.investment_count == 1
        assert user_row.total_invested == Decimal("1000.00")
        assert user_row.total_distributions == Decimal("25.50")

        value_row = db.get(InvestmentValueHistory, (investment.id, today))
        assert value_row.value == Decimal("1000.00")
        assert value_row.total_distributions == Decimal("25.50")

    def test_same_day_upsert_keeps_one_row_with_latest_values(self, db, user_a, portfolio_a):
        investment = add_stock(db, user_a.id, portfolio_a.id, quantity=Decimal("10"))
        service = SnapshotService(db, user_a.id)
        today = date.today()

        service.save_snapshots(today)
        db.commit()

        InvestmentRepository(db, user_a.id).update(
            investment.id, current_stock_price=Decimal("190")
        )
        db.commit()
        service.save_snapshots(today)
        db.commit()

        rows = db.query(PortfolioDailySnapshot).filter_by(portfolio_id=portfolio_a.id).all()
        assert len(rows) == 1
        history = service.get_portfolio_history(portfolio_a.id, days=1)
        assert len(history) == 1
        assert history[0].total_value == Decimal("1900.00")
        assert db.query(UserDailySnapshot).count() == 1
        assert db.query(InvestmentValueHistory).count() == 1

    def test_history_is_ascending_and_bounded(self, db, user_a, portfolio_a):
        add_stock(db, user_a.id, portfolio_a.id)
        service = SnapshotService(db, user_a.id)
        today = date.today()
        for days_ago in (40, 2, 1):
            service.save_snapshots(today - timedelta(days=days_ago))
        db.commit()

        history = service.get_user_history(days=30)

        assert [row.snapshot_date for row in history] == [
            today - timedelta(days=2),
            today - timedelta(days=1),
        ]


class TestSaveAllSnapshots:
    """Tests for the batch job across users."""

    def test_saves_each_user_under_its_own_identity(self, db, user_a, user_b, portfolio_a):
        bind_session_identity(db, user_b.id)
        PortfolioRepository(db, user_b.id).create("Bob's")
        db.commit()
        add_stock(db, user_a.id, portfolio_a.id)

        stats = save_all_snapshots(db, date(2026, 1, 31))

        assert stats["users_saved"] == 2
        assert stats["portfolios_saved"] == 2
        assert stats["failed_users"] == []
        assert db.query(UserDailySnapshot).count() == 2

    def test_failing_user_does_not_stop_others(self, db, user_a, user_b, portfolio_a):
        original = SnapshotService.save_snapshots

        def flaky(service, snapshot_date=None):
            if service.user_id == user_a.id:
                raise RuntimeError("boom")
            return original(service, snapshot_date)

        with patch.object(SnapshotService, "save_snapshots", flaky):
            stats = save_all_snapshots(db, date(2026, 1, 31))

        assert stats["failed_users"] == [user_a.id]
        assert stats["users_saved"] == 1
