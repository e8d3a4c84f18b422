"""Distribution model - inbound cash events (dividends, returns) on an investment."""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from folio.database import Base

if TYPE_CHECKING:
    from folio.models.investment import Investment


class Distribution(Base):
    """Distribution model. Never an additional contribution."""

    __tablename__ = "distributions"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="chk_distributions_amount_nonneg"),
        Index("idx_distributions_investment_id", "investment_id"),
        Index("idx_distributions_date", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    investment_id: Mapped[int] = mapped_column(ForeignKey("investments.id", ondelete="CASCADE"))
    date: Mapped[date] = mapped_column(Date)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    # Relationships
    investment: Mapped["Investment"] = relationship(back_populates="distributions")

    def __repr__(self) -> str:
        return f"<Distribution(id={self.id}, investment_id={self.investment_id}, amount={self.amount})>"
