"""Investment data access layer."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Query, selectinload

from folio.constants import InvestmentTypeName
from folio.models import Category, Investment, Portfolio, Tag

from .base import ScopedRepository
from .exceptions import ConstraintViolationError, NotFoundError
from .label_repository import LabelRepository
from .portfolio_repository import PortfolioRepository

logger = logging.getLogger(__name__)

# Columns callers may set directly
EDITABLE_FIELDS = (
    "name",
    "description",
    "date_started",
    "amount",
    "investment_type",
    "has_distributions",
    "stock_symbol",
    "stock_quantity",
    "current_stock_price",
    "stock_price_updated_at",
)


class InvestmentRepository(ScopedRepository):
    """Investments whose portfolio is owned by the bound user."""

    def _query(self) -> Query:
        return (
            self._db.query(Investment)
            .join(Portfolio, Portfolio.id == Investment.portfolio_id)
            .filter(Portfolio.user_id == self._user_id)
        )

    def find_by_id(self, investment_id: int) -> Investment | None:
        """Find an owned investment with distributions and labels loaded."""
        return (
            self._query()
            .options(
                selectinload(Investment.distributions),
                selectinload(Investment.categories),
                selectinload(Investment.tags),
            )
            .filter(Investment.id == investment_id)
            .first()
        )

    def get_by_id(self, investment_id: int) -> Investment:
        investment = self.find_by_id(investment_id)
        if investment is None:
            raise NotFoundError("Investment", investment_id)
        return investment

    def find_all(self) -> list[Investment]:
        """All owned investments across portfolios, newest first."""
        return (
            self._query()
            .options(selectinload(Investment.distributions), selectinload(Investment.portfolio))
            .order_by(Investment.created_at.desc(), Investment.id.desc())
            .all()
        )

    def find_stale_stocks(
        self, older_than: datetime, limit: int, portfolio_id: int | None = None
    ) -> list[Investment]:
        """Stock investments with a symbol whose price is missing or older than ``older_than``.

        Never-priced investments come first, then the oldest prices.
        """
        query = self._query().filter(
            Investment.investment_type == InvestmentTypeName.STOCKS,
            Investment.stock_symbol.is_not(None),
            Investment.stock_symbol != "",
            (Investment.current_stock_price.is_(None))
            | (Investment.stock_price_updated_at.is_(None))
            | (Investment.stock_price_updated_at < older_than),
        )
        if portfolio_id is not None:
            query = query.filter(Investment.portfolio_id == portfolio_id)
        return (
            query.order_by(Investment.stock_price_updated_at.asc().nulls_first(), Investment.id)
            .limit(limit)
            .all()
        )

    def create(
        self,
        portfolio_id: int,
        category_ids: list[int] | None = None,
        tag_ids: list[int] | None = None,
        **fields: Any,
    ) -> Investment:
        """Create an investment in an owned portfolio, with optional labels.

        Raises:
            NotFoundError: If the portfolio is not owned by the user
            ConstraintViolationError: If a label id is not owned by the user
        """
        _check_non_negative(fields)
        PortfolioRepository(self._db, self._user_id).get_by_id(portfolio_id)

        investment = Investment(
            portfolio_id=portfolio_id,
            **{field: fields[field] for field in EDITABLE_FIELDS if field in fields},
        )
        investment.categories = self._resolve_labels(Category, category_ids or [])
        investment.tags = self._resolve_labels(Tag, tag_ids or [])
        self._db.add(investment)
        self._db.flush()
        logger.info(f"Created investment {investment.id} in portfolio {portfolio_id}")
        return investment

    def update(
        self,
        investment_id: int,
        category_ids: list[int] | None = None,
        tag_ids: list[int] | None = None,
        **fields: Any,
    ) -> Investment:
        """Update fields; move to another owned portfolio; replace labels when ids are given."""
        investment = self.get_by_id(investment_id)
        _check_non_negative(fields)

        new_portfolio_id = fields.get("portfolio_id")
        if new_portfolio_id is not None and new_portfolio_id != investment.portfolio_id:
            PortfolioRepository(self._db, self._user_id).get_by_id(new_portfolio_id)
            investment.portfolio_id = new_portfolio_id

        for field in EDITABLE_FIELDS:
            if field in fields:
                setattr(investment, field, fields[field])

        if category_ids is not None:
            investment.categories = self._resolve_labels(Category, category_ids)
        if tag_ids is not None:
            investment.tags = self._resolve_labels(Tag, tag_ids)

        self._db.flush()
        return investment

    def update_stock_price(self, investment: Investment, price, fetched_at: datetime) -> None:
        investment.current_stock_price = price
        investment.stock_price_updated_at = fetched_at
        self._db.flush()

    def delete(self, investment_id: int) -> None:
        """Delete an owned investment with its distributions, labels links and history."""
        investment = self.get_by_id(investment_id)
        self._db.delete(investment)
        self._db.flush()
        logger.info(f"Deleted investment {investment_id} for user {self._user_id}")

    def _resolve_labels(self, model: type[Category] | type[Tag], label_ids: list[int]) -> list:
        """Load owned labels, rejecting ids that belong to another user (or nobody)."""
        wanted = set(label_ids)
        labels = LabelRepository(self._db, self._user_id, model).find_by_ids(list(wanted))
        missing = wanted - {label.id for label in labels}
        if missing:
            raise ConstraintViolationError(
                f"Cross-tenant association not allowed: {model.__name__.lower()} "
                f"{sorted(missing)} does not belong to this user"
            )
        return labels


def _check_non_negative(fields: dict[str, Any]) -> None:
    for field in ("amount", "stock_quantity", "current_stock_price"):
        value = fields.get(field)
        if value is not None and value < 0:
            raise ConstraintViolationError(f"Investment {field} must be non-negative")
