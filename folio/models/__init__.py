"""SQLAlchemy ORM models."""

from folio.models.distribution import Distribution
from folio.models.investment import Investment
from folio.models.investment_labels import investment_categories, investment_tags
from folio.models.label import Category, InvestmentType, Tag
from folio.models.portfolio import Portfolio
from folio.models.snapshot import InvestmentValueHistory, PortfolioDailySnapshot, UserDailySnapshot
from folio.models.user import User

__all__ = [
    "Category",
    "Distribution",
    "Investment",
    "InvestmentType",
    "InvestmentValueHistory",
    "Portfolio",
    "PortfolioDailySnapshot",
    "Tag",
    "User",
    "UserDailySnapshot",
    "investment_categories",
    "investment_tags",
]
