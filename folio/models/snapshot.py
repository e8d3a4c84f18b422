"""Daily snapshot models - one row per (owner, date)."""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from folio.database import Base

if TYPE_CHECKING:
    from folio.models.investment import Investment
    from folio.models.portfolio import Portfolio
    from folio.models.user import User


class PortfolioDailySnapshot(Base):
    """Aggregate value of a portfolio on a date."""

    __tablename__ = "portfolio_daily_snapshots"
    __table_args__ = (
        Index("idx_portfolio_snapshots_date", "snapshot_date"),
        Index("idx_portfolio_snapshots_portfolio", "portfolio_id", "snapshot_date"),
    )

    portfolio_id: Mapped[int] = mapped_column(
        ForeignKey("portfolios.id", ondelete="CASCADE"), primary_key=True
    )
    snapshot_date: Mapped[date] = mapped_column(Date, primary_key=True)
    total_value: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    total_invested: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    total_distributions: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    investment_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    portfolio: Mapped["Portfolio"] = relationship(back_populates="daily_snapshots")

    def __repr__(self) -> str:
        return f"<PortfolioDailySnapshot(portfolio_id={self.portfolio_id}, date={self.snapshot_date}, value={self.total_value})>"


class UserDailySnapshot(Base):
    """Aggregate value of all of a user's portfolios on a date."""

    __tablename__ = "user_daily_snapshots"
    __table_args__ = (
        Index("idx_user_snapshots_date", "snapshot_date"),
        Index("idx_user_snapshots_user", "user_id", "snapshot_date"),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    snapshot_date: Mapped[date] = mapped_column(Date, primary_key=True)
    total_value: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    total_invested: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    total_distributions: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    portfolio_count: Mapped[int] = mapped_column(Integer, default=0)
    investment_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    user: Mapped["User"] = relationship(back_populates="daily_snapshots")

    def __repr__(self) -> str:
        return f"<UserDailySnapshot(user_id={self.user_id}, date={self.snapshot_date}, value={self.total_value})>"


class InvestmentValueHistory(Base):
    """Value of a single investment on a date."""

    __tablename__ = "investment_value_history"
    __table_args__ = (
        Index("idx_investment_history_date", "snapshot_date"),
        Index("idx_investment_history_investment", "investment_id", "snapshot_date"),
    )

    investment_id: Mapped[int] = mapped_column(
        ForeignKey("investments.id", ondelete="CASCADE"), primary_key=True
    )
    snapshot_date: Mapped[date] = mapped_column(Date, primary_key=True)
    stock_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 8))
    stock_quantity: Mapped[Decimal | None] = mapped_column(Numeric(18, 8))
    value: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    total_distributions: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    investment: Mapped["Investment"] = relationship(back_populates="value_history")

    def __repr__(self) -> str:
        return f"<InvestmentValueHistory(investment_id={self.investment_id}, date={self.snapshot_date}, value={self.value})>"
