"""Repository layer - data access abstraction.

Repositories handle all database queries, providing a clean interface
for services and routers. Tenant repositories derive from ScopedRepository
and filter every query by the bound user, in addition to the row-level
security policies enforced by PostgreSQL.

Dependency direction: Routers/Services -> Repositories -> Models
"""

from .base import ScopedRepository
from .distribution_repository import DistributionRepository
from .exceptions import ConstraintViolationError, DuplicateError, NotFoundError, RepositoryError
from .investment_repository import InvestmentRepository
from .label_repository import LabelRepository
from .portfolio_repository import PortfolioRepository
from .snapshot_repository import SnapshotRepository
from .user_repository import UserRepository

__all__ = [
    "ConstraintViolationError",
    "DistributionRepository",
    "DuplicateError",
    "InvestmentRepository",
    "LabelRepository",
    "NotFoundError",
    "PortfolioRepository",
    "RepositoryError",
    "ScopedRepository",
    "SnapshotRepository",
    "UserRepository",
]
