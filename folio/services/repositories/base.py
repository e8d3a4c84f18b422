"""Base class for tenant-scoped repositories."""

from sqlalchemy.orm import Session


class ScopedRepository:
    """Data access restricted to the rows one user owns.

    Every query a subclass issues filters on ownership through the owning
    chain (portfolio.user_id, investment -> portfolio, ...). This is
    independent of the database row-level security policies and must not be
    dropped because those policies exist.

    Lookups of rows owned by another user behave exactly like lookups of rows
    that do not exist.

    Naming conventions:
    - find_* : Query that may return None or empty list
    - get_* : Query that raises NotFoundError if missing
    """

    def __init__(self, db: Session, user_id: int) -> None:
        self._db = db
        self._user_id = user_id

    @property
    def user_id(self) -> int:
        return self._user_id
