"""Investment and portfolio valuation.

Value of an investment:
- stocks with both a quantity and a price: quantity * price
- anything else: the principal amount

All monetary results are quantized to cents.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from folio.constants import InvestmentTypeName
from folio.models import Investment, Portfolio
from folio.services.portfolio.valuation_types import InvestmentTotals, PortfolioTotals, UserTotals

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def to_cents(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


class ValuationService:
    """Stateless valuation helpers over loaded ORM objects."""

    @staticmethod
    def current_value(investment: Investment) -> Decimal:
        """Market value for priced stocks, otherwise the principal."""
        if (
            investment.investment_type == InvestmentTypeName.STOCKS
            and investment.stock_quantity is not None
            and investment.current_stock_price is not None
        ):
            return to_cents(investment.stock_quantity * investment.current_stock_price)
        return to_cents(investment.amount)

    @staticmethod
    def total_distributions(investment: Investment) -> Decimal:
        return to_cents(sum((d.amount for d in investment.distributions), ZERO))

    @classmethod
    def value_investment(cls, investment: Investment) -> InvestmentTotals:
        total_distributions = cls.total_distributions(investment)
        amount = to_cents(investment.amount)
        return InvestmentTotals(
            investment_id=investment.id,
            amount=amount,
            total_distributions=total_distributions,
            current_value=cls.current_value(investment),
            current_return=total_distributions - amount,
        )

    @classmethod
    def value_investments(cls, investments: Iterable[Investment]) -> PortfolioTotals:
        """Sum an arbitrary set of investments (usually one portfolio)."""
        totals = PortfolioTotals(
            investment_count=0,
            total_invested=ZERO,
            total_distributions=ZERO,
            total_value=ZERO,
        )
        for investment in investments:
            valued = cls.value_investment(investment)
            totals.investment_count += 1
            totals.total_invested += valued.amount
            totals.total_distributions += valued.total_distributions
            totals.total_value += valued.current_value

        totals.total_invested = to_cents(totals.total_invested)
        totals.total_distributions = to_cents(totals.total_distributions)
        totals.total_value = to_cents(totals.total_value)
        return totals

    @classmethod
    def value_portfolio(cls, portfolio: Portfolio) -> PortfolioTotals:
        return cls.value_investments(portfolio.investments)

    @classmethod
    def value_user(cls, portfolios: Iterable[Portfolio]) -> UserTotals:
        """Sum over portfolios; empty portfolios still count."""
        portfolios = list(portfolios)
        combined = cls.value_investments(
            investment for portfolio in portfolios for investment in portfolio.investments
        )
        return UserTotals(
            investment_count=combined.investment_count,
            total_invested=combined.total_invested,
            total_distributions=combined.total_distributions,
            total_value=combined.total_value,
            portfolio_count=len(portfolios),
        )
