"""Daily snapshot service - records portfolio, user and investment value per day."""

import logging
from datetime import date, timedelta

from sqlalchemy.orm import Session

from folio.models import Investment, Portfolio
from folio.services.portfolio import ValuationService
from folio.services.repositories import (
    InvestmentRepository,
    PortfolioRepository,
    SnapshotRepository,
    UserRepository,
)
from folio.services.session_scope import bind_session_identity

logger = logging.getLogger(__name__)


class SnapshotService:
    """Computes and stores snapshots for one user."""

    def __init__(self, db: Session, user_id: int) -> None:
        self.db = db
        self.user_id = user_id
        self.portfolios = PortfolioRepository(db, user_id)
        self.investments = InvestmentRepository(db, user_id)
        self.snapshots = SnapshotRepository(db, user_id)

    def save_portfolio_snapshot(self, portfolio: Portfolio, snapshot_date: date) -> None:
        totals = ValuationService.value_portfolio(portfolio)
        self.snapshots.upsert_portfolio_snapshot(
            {
                "portfolio_id": portfolio.id,
                "snapshot_date": snapshot_date,
                "total_value": totals.total_value,
                "total_invested": totals.total_invested,
                "total_distributions": totals.total_distributions,
                "investment_count": totals.investment_count,
            }
        )

    def save_investment_snapshot(self, investment: Investment, snapshot_date: date) -> None:
        totals = ValuationService.value_investment(investment)
        self.snapshots.upsert_investment_value(
            {
                "investment_id": investment.id,
                "snapshot_date": snapshot_date,
                "stock_price": investment.current_stock_price,
                "stock_quantity": investment.stock_quantity,
                "value": totals.current_value,
                "total_distributions": totals.total_distributions,
            }
        )

    def save_user_snapshot(self, portfolios: list[Portfolio], snapshot_date: date) -> None:
        totals = ValuationService.value_user(portfolios)
        self.snapshots.upsert_user_snapshot(
            {
                "snapshot_date": snapshot_date,
                "total_value": totals.total_value,
                "total_invested": totals.total_invested,
                "total_distributions": totals.total_distributions,
                "portfolio_count": totals.portfolio_count,
                "investment_count": totals.investment_count,
            }
        )

    def save_snapshots(self, snapshot_date: date | None = None) -> dict:
        """
        Save every snapshot of the user for a date (default: today).

        Each portfolio, each investment, then the user aggregate.

        Returns:
            Counts of rows written per level
        """
        snapshot_date = snapshot_date or date.today()
        portfolios = self.portfolios.find_all()

        investment_count = 0
        for portfolio in portfolios:
            self.save_portfolio_snapshot(portfolio, snapshot_date)
            for investment in portfolio.investments:
                self.save_investment_snapshot(investment, snapshot_date)
                investment_count += 1
        self.save_user_snapshot(portfolios, snapshot_date)

        logger.debug(
            f"Saved snapshots for user {self.user_id} on {snapshot_date}: "
            f"{len(portfolios)} portfolios, {investment_count} investments"
        )
        return {
            "snapshot_date": snapshot_date,
            "portfolios_saved": len(portfolios),
            "investments_saved": investment_count,
        }

    def get_user_history(self, days: int = 30) -> list:
        return self.snapshots.find_user_history(_since(days))

    def get_portfolio_history(self, portfolio_id: int, days: int = 30) -> list:
        """Raises NotFoundError if the portfolio is not owned by the user."""
        self.portfolios.get_by_id(portfolio_id)
        return self.snapshots.find_portfolio_history(portfolio_id, _since(days))

    def get_investment_history(self, investment_id: int, days: int = 30) -> list:
        """Raises NotFoundError if the investment is not owned by the user."""
        self.investments.get_by_id(investment_id)
        return self.snapshots.find_investment_history(investment_id, _since(days))


def _since(days: int) -> date:
    return date.today() - timedelta(days=days)


def save_all_snapshots(db: Session, snapshot_date: date | None = None) -> dict:
    """
    Save snapshots for every user, binding each identity in turn.

    Commits once per user so one failing user does not discard the others' rows.

    Returns:
        {"snapshot_date", "portfolios_saved", "users_saved", "failed_users"}
    """
    snapshot_date = snapshot_date or date.today()
    stats = {
        "snapshot_date": snapshot_date,
        "portfolios_saved": 0,
        "users_saved": 0,
        "failed_users": [],
    }

    for user_id in UserRepository(db).find_all_ids():
        try:
            bind_session_identity(db, user_id)
            result = SnapshotService(db, user_id).save_snapshots(snapshot_date)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"Snapshot failed for user {user_id} on {snapshot_date}")
            stats["failed_users"].append(user_id)
            continue

        stats["portfolios_saved"] += result["portfolios_saved"]
        stats["users_saved"] += 1

    logger.info(
        f"Saved snapshots for {stats['users_saved']} users "
        f"({stats['portfolios_saved']} portfolios) on {snapshot_date}"
    )
    return stats
