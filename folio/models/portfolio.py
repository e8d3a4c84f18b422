"""Portfolio model - groups investments for a user."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from folio.database import Base

if TYPE_CHECKING:
    from folio.models.investment import Investment
    from folio.models.snapshot import PortfolioDailySnapshot
    from folio.models.user import User


class Portfolio(Base):
    """Portfolio model representing a named grouping of investments."""

    __tablename__ = "portfolios"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_portfolios_user_name"),
        Index("idx_portfolios_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    # Relationships
    user: Mapped["User"] = relationship(back_populates="portfolios")
    investments: Mapped[list["Investment"]] = relationship(
        back_populates="portfolio", cascade="all, delete-orphan"
    )
    daily_snapshots: Mapped[list["PortfolioDailySnapshot"]] = relationship(
        back_populates="portfolio", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Portfolio(id={self.id}, name='{self.name}')>"
