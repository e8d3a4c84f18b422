"""Portfolio valuation services."""

from .valuation_service import ValuationService
from .valuation_types import InvestmentTotals, PortfolioTotals, UserTotals

__all__ = [
    "InvestmentTotals",
    "PortfolioTotals",
    "UserTotals",
    "ValuationService",
]
