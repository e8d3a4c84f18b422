"""Portfolio data access layer."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, selectinload

from folio.models import Investment, Portfolio

from .base import ScopedRepository
from .exceptions import (
    ConstraintViolationError,
    DuplicateError,
    NotFoundError,
    is_unique_violation,
)

logger = logging.getLogger(__name__)


class PortfolioRepository(ScopedRepository):
    """Portfolios owned by the bound user."""

    def _query(self) -> Query:
        return self._db.query(Portfolio).filter(Portfolio.user_id == self._user_id)

    def find_by_id(self, portfolio_id: int) -> Portfolio | None:
        """Find an owned portfolio by primary key."""
        return self._query().filter(Portfolio.id == portfolio_id).first()

    def get_by_id(self, portfolio_id: int) -> Portfolio:
        portfolio = self.find_by_id(portfolio_id)
        if portfolio is None:
            raise NotFoundError("Portfolio", portfolio_id)
        return portfolio

    def get_with_investments(self, portfolio_id: int) -> Portfolio:
        """Get an owned portfolio with investments and their distributions loaded."""
        portfolio = (
            self._query()
            .options(
                selectinload(Portfolio.investments).selectinload(Investment.distributions),
                selectinload(Portfolio.investments).selectinload(Investment.categories),
                selectinload(Portfolio.investments).selectinload(Investment.tags),
            )
            .filter(Portfolio.id == portfolio_id)
            .first()
        )
        if portfolio is None:
            raise NotFoundError("Portfolio", portfolio_id)
        return portfolio

    def find_by_name(self, name: str) -> Portfolio | None:
        return self._query().filter(Portfolio.name == name).first()

    def find_all(self) -> list[Portfolio]:
        """All owned portfolios, newest first, with investments loaded."""
        return (
            self._query()
            .options(selectinload(Portfolio.investments).selectinload(Investment.distributions))
            .order_by(Portfolio.created_at.desc(), Portfolio.id.desc())
            .all()
        )

    def count_investments(self, portfolio_id: int) -> int:
        return (
            self._db.query(func.count(Investment.id))
            .join(Portfolio, Portfolio.id == Investment.portfolio_id)
            .filter(Portfolio.id == portfolio_id, Portfolio.user_id == self._user_id)
            .scalar()
        )

    def create(self, name: str, description: str | None = None) -> Portfolio:
        """Create a portfolio. Names are unique per user."""
        if self.find_by_name(name) is not None:
            raise DuplicateError("Portfolio", "name", name)

        portfolio = Portfolio(user_id=self._user_id, name=name, description=description)
        self._db.add(portfolio)
        self._flush_unique(name)
        logger.info(f"Created portfolio {portfolio.id} for user {self._user_id}")
        return portfolio

    def update(self, portfolio_id: int, **fields) -> Portfolio:
        """Update name and/or description of an owned portfolio."""
        portfolio = self.get_by_id(portfolio_id)

        name = fields.get("name")
        if name is not None and name != portfolio.name:
            if self.find_by_name(name) is not None:
                raise DuplicateError("Portfolio", "name", name)

        for field in ("name", "description"):
            if field in fields:
                setattr(portfolio, field, fields[field])
        self._flush_unique(portfolio.name)
        return portfolio

    def delete(self, portfolio_id: int) -> None:
        """Delete an owned portfolio that holds no investments."""
        portfolio = self.get_by_id(portfolio_id)
        count = self.count_investments(portfolio_id)
        if count > 0:
            raise ConstraintViolationError(
                f"Cannot delete portfolio with {count} investment(s). "
                "Move or delete the investments first."
            )
        self._db.delete(portfolio)
        self._db.flush()
        logger.info(f"Deleted portfolio {portfolio_id} for user {self._user_id}")

    def _flush_unique(self, name: str) -> None:
        try:
            self._db.flush()
        except IntegrityError as e:
            self._db.rollback()
            if is_unique_violation(e):
                raise DuplicateError("Portfolio", "name", name) from e
            raise ConstraintViolationError(f"Portfolio rejected by the database: {e.orig}") from e
