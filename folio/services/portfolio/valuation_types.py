"""Value objects for investment and portfolio valuation."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class InvestmentTotals:
    """Derived values for a single investment."""

    investment_id: int
    amount: Decimal
    total_distributions: Decimal
    current_value: Decimal

    # Distributions received minus principal
    current_return: Decimal


@dataclass
class PortfolioTotals:
    """Aggregated values over a set of investments."""

    investment_count: int
    total_invested: Decimal
    total_distributions: Decimal
    total_value: Decimal


@dataclass
class UserTotals(PortfolioTotals):
    """Aggregated values over all of a user's portfolios."""

    portfolio_count: int = 0
