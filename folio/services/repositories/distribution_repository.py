"""Distribution data access layer."""

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Query

from folio.models import Distribution, Investment, Portfolio

from .base import ScopedRepository
from .exceptions import ConstraintViolationError, NotFoundError
from .investment_repository import InvestmentRepository


class DistributionRepository(ScopedRepository):
    """Distributions of investments owned by the bound user."""

    def _query(self) -> Query:
        return (
            self._db.query(Distribution)
            .join(Investment, Investment.id == Distribution.investment_id)
            .join(Portfolio, Portfolio.id == Investment.portfolio_id)
            .filter(Portfolio.user_id == self._user_id)
        )

    def find_by_id(self, distribution_id: int) -> Distribution | None:
        return self._query().filter(Distribution.id == distribution_id).first()

    def get_by_id(self, distribution_id: int) -> Distribution:
        distribution = self.find_by_id(distribution_id)
        if distribution is None:
            raise NotFoundError("Distribution", distribution_id)
        return distribution

    def find_by_investment(self, investment_id: int) -> list[Distribution]:
        """Distributions of an owned investment, newest date first.

        Raises:
            NotFoundError: If the investment is not owned by the user
        """
        InvestmentRepository(self._db, self._user_id).get_by_id(investment_id)
        return (
            self._query()
            .filter(Distribution.investment_id == investment_id)
            .order_by(Distribution.date.desc(), Distribution.id.desc())
            .all()
        )

    def create(
        self,
        investment_id: int,
        distribution_date: date,
        amount: Decimal,
        description: str | None = None,
    ) -> Distribution:
        investment = InvestmentRepository(self._db, self._user_id).get_by_id(investment_id)
        _check_amount(amount)

        distribution = Distribution(
            investment=investment,
            date=distribution_date,
            amount=amount,
            description=description,
        )
        self._db.add(distribution)
        self._db.flush()
        return distribution

    def update(self, distribution_id: int, **fields) -> Distribution:
        distribution = self.get_by_id(distribution_id)
        if "amount" in fields:
            _check_amount(fields["amount"])
        for field in ("date", "amount", "description"):
            if field in fields:
                setattr(distribution, field, fields[field])
        self._db.flush()
        return distribution

    def delete(self, distribution_id: int) -> None:
        distribution = self.get_by_id(distribution_id)
        self._db.delete(distribution)
        self._db.flush()


def _check_amount(amount: Decimal | None) -> None:
    if amount is None or amount < 0:
        raise ConstraintViolationError("Distribution amount must be non-negative")
