"""Investment model - a holding inside a portfolio."""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from folio.database import Base
from folio.models.investment_labels import investment_categories, investment_tags

if TYPE_CHECKING:
    from folio.models.distribution import Distribution
    from folio.models.label import Category, Tag
    from folio.models.portfolio import Portfolio
    from folio.models.snapshot import InvestmentValueHistory


class Investment(Base):
    """Investment model. Ownership is derived through the portfolio."""

    __tablename__ = "investments"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="chk_investments_amount_nonneg"),
        CheckConstraint(
            "stock_quantity IS NULL OR stock_quantity >= 0", name="chk_investments_qty_nonneg"
        ),
        CheckConstraint(
            "current_stock_price IS NULL OR current_stock_price >= 0",
            name="chk_investments_price_nonneg",
        ),
        Index("idx_investments_portfolio_id", "portfolio_id"),
        Index("idx_investments_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    # Nullable: added to the legacy flat table by a backfilling migration
    portfolio_id: Mapped[int | None] = mapped_column(
        ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=True
    )
    # Legacy owner column from the flat layout. Kept for backfill only.
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    date_started: Mapped[date | None] = mapped_column(Date)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    investment_type: Mapped[str] = mapped_column(String(100))
    has_distributions: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    stock_symbol: Mapped[str | None] = mapped_column(String(20))
    stock_quantity: Mapped[Decimal | None] = mapped_column(Numeric(18, 8))
    current_stock_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 8))
    stock_price_updated_at: Mapped[datetime | None] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    # Relationships
    portfolio: Mapped["Portfolio"] = relationship(back_populates="investments")
    distributions: Mapped[list["Distribution"]] = relationship(
        back_populates="investment",
        cascade="all, delete-orphan",
        order_by="Distribution.date.desc()",
    )
    categories: Mapped[list["Category"]] = relationship(
        secondary=investment_categories, order_by="Category.name"
    )
    tags: Mapped[list["Tag"]] = relationship(secondary=investment_tags, order_by="Tag.name")
    value_history: Mapped[list["InvestmentValueHistory"]] = relationship(
        back_populates="investment", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Investment(id={self.id}, name='{self.name}', amount={self.amount})>"
