"""User data access layer.

Users are not tenant rows themselves, so this repository is not scoped.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from folio.models import User

from .exceptions import (
    ConstraintViolationError,
    DuplicateError,
    NotFoundError,
    is_unique_violation,
)

logger = logging.getLogger(__name__)


class UserRepository:
    """Centralized user data access.

    Naming conventions:
    - find_* : Query that may return None
    - get_* : Query that raises exception if missing
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, user_id: int) -> User | None:
        """Find user by primary key."""
        return self._db.query(User).filter(User.id == user_id).first()

    def get_by_id(self, user_id: int) -> User:
        """Get user by primary key."""
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def find_by_email(self, email: str) -> User | None:
        """Find user by email (case-insensitive)."""
        return self._db.query(User).filter(User.email.ilike(email)).first()

    def find_all(self) -> list[User]:
        """All users ordered by name."""
        return self._db.query(User).order_by(User.name, User.id).all()

    def find_all_ids(self) -> list[int]:
        return [row[0] for row in self._db.query(User.id).order_by(User.id).all()]

    def create(self, name: str, email: str) -> User:
        """Create a user. Raises DuplicateError if the email is taken."""
        if self.find_by_email(email) is not None:
            raise DuplicateError("User", "email", email)

        user = User(name=name, email=email)
        self._db.add(user)
        self._flush_unique(email)
        logger.info(f"Created user {user.id} ({email})")
        return user

    def update(self, user: User, name: str | None = None, email: str | None = None) -> User:
        """Update name and/or email."""
        if email is not None and email.lower() != user.email.lower():
            existing = self.find_by_email(email)
            if existing is not None and existing.id != user.id:
                raise DuplicateError("User", "email", email)
            user.email = email
        if name is not None:
            user.name = name
        self._flush_unique(user.email)
        return user

    def _flush_unique(self, email: str) -> None:
        try:
            self._db.flush()
        except IntegrityError as e:
            self._db.rollback()
            if is_unique_violation(e):
                raise DuplicateError("User", "email", email) from e
            raise ConstraintViolationError(f"User rejected by the database: {e.orig}") from e
