"""Daily snapshot data access layer.

Snapshots are keyed by (owner, snapshot_date). Saving the same key again
overwrites the computed columns instead of adding a row.
"""

from datetime import date
from typing import Any

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Query

from folio.models import (
    Investment,
    InvestmentValueHistory,
    Portfolio,
    PortfolioDailySnapshot,
    UserDailySnapshot,
)

from .base import ScopedRepository


class SnapshotRepository(ScopedRepository):
    """Snapshot rows owned by the bound user."""

    def upsert_portfolio_snapshot(self, values: dict[str, Any]) -> None:
        self._upsert(PortfolioDailySnapshot, values, ["portfolio_id", "snapshot_date"])

    def upsert_user_snapshot(self, values: dict[str, Any]) -> None:
        values = {**values, "user_id": self._user_id}
        self._upsert(UserDailySnapshot, values, ["user_id", "snapshot_date"])

    def upsert_investment_value(self, values: dict[str, Any]) -> None:
        self._upsert(InvestmentValueHistory, values, ["investment_id", "snapshot_date"])

    def find_user_history(self, since: date) -> list[UserDailySnapshot]:
        return (
            self._fresh(self._db.query(UserDailySnapshot))
            .filter(
                UserDailySnapshot.user_id == self._user_id,
                UserDailySnapshot.snapshot_date >= since,
            )
            .order_by(UserDailySnapshot.snapshot_date.asc())
            .all()
        )

    def find_portfolio_history(self, portfolio_id: int, since: date) -> list[PortfolioDailySnapshot]:
        return (
            self._fresh(self._db.query(PortfolioDailySnapshot))
            .join(Portfolio, Portfolio.id == PortfolioDailySnapshot.portfolio_id)
            .filter(
                Portfolio.user_id == self._user_id,
                PortfolioDailySnapshot.portfolio_id == portfolio_id,
                PortfolioDailySnapshot.snapshot_date >= since,
            )
            .order_by(PortfolioDailySnapshot.snapshot_date.asc())
            .all()
        )

    def find_investment_history(
        self, investment_id: int, since: date
    ) -> list[InvestmentValueHistory]:
        return (
            self._fresh(self._db.query(InvestmentValueHistory))
            .join(Investment, Investment.id == InvestmentValueHistory.investment_id)
            .join(Portfolio, Portfolio.id == Investment.portfolio_id)
            .filter(
                Portfolio.user_id == self._user_id,
                InvestmentValueHistory.investment_id == investment_id,
                InvestmentValueHistory.snapshot_date >= since,
            )
            .order_by(InvestmentValueHistory.snapshot_date.asc())
            .all()
        )

    @staticmethod
    def _fresh(query: Query) -> Query:
        # Rows may have been rewritten by an upsert that bypassed the identity map
        return query.execution_options(populate_existing=True)

    def _upsert(self, model: type, values: dict[str, Any], key: list[str]) -> None:
        """INSERT ... ON CONFLICT (key) DO UPDATE, refreshing created_at."""
        dialect = self._db.get_bind().dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert

        stmt = insert(model).values(**values)
        updates = {column: stmt.excluded[column] for column in values if column not in key}
        updates["created_at"] = func.now()
        self._db.execute(stmt.on_conflict_do_update(index_elements=key, set_=updates))
