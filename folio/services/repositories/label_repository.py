"""Data access for user-scoped labels: categories, tags and investment types."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from folio.models import Category, InvestmentType, Tag, investment_categories, investment_tags

from .base import ScopedRepository
from .exceptions import (
    ConstraintViolationError,
    DuplicateError,
    NotFoundError,
    is_unique_violation,
)

logger = logging.getLogger(__name__)

LabelModel = type[Category] | type[Tag] | type[InvestmentType]

# Junction table and label column per label kind
ASSOCIATIONS = {
    Category: (investment_categories, "category_id"),
    Tag: (investment_tags, "tag_id"),
}


class LabelRepository(ScopedRepository):
    """Labels of one kind owned by the bound user.

    Example:
        tags = LabelRepository(db, user_id, Tag)
        tags.create("dividend")
    """

    def __init__(self, db: Session, user_id: int, model: LabelModel) -> None:
        super().__init__(db, user_id)
        self._model = model

    @property
    def entity_type(self) -> str:
        return self._model.__name__

    def _query(self) -> Query:
        return self._db.query(self._model).filter(self._model.user_id == self._user_id)

    def find_all(self) -> list:
        """All owned labels ordered by name."""
        return self._query().order_by(self._model.name).all()

    def find_by_id(self, label_id: int):
        return self._query().filter(self._model.id == label_id).first()

    def get_by_id(self, label_id: int):
        label = self.find_by_id(label_id)
        if label is None:
            raise NotFoundError(self.entity_type, label_id)
        return label

    def find_by_ids(self, label_ids: list[int]) -> list:
        """Owned labels among ``label_ids``; ids owned by others are silently absent."""
        if not label_ids:
            return []
        return self._query().filter(self._model.id.in_(label_ids)).all()

    def find_by_name(self, name: str):
        return self._query().filter(self._model.name == name).first()

    def create(self, name: str):
        if self.find_by_name(name) is not None:
            raise DuplicateError(self.entity_type, "name", name)

        label = self._model(user_id=self._user_id, name=name)
        self._db.add(label)
        self._flush_unique(name)
        return label

    def rename(self, label_id: int, name: str):
        label = self.get_by_id(label_id)
        if name != label.name and self.find_by_name(name) is not None:
            raise DuplicateError(self.entity_type, "name", name)
        label.name = name
        self._flush_unique(name)
        return label

    def delete(self, label_id: int) -> None:
        """Delete an owned label. Associations with investments go with it."""
        label = self.get_by_id(label_id)
        if self._model in ASSOCIATIONS:
            junction, column = ASSOCIATIONS[self._model]
            self._db.execute(junction.delete().where(junction.c[column] == label.id))
        self._db.delete(label)
        self._db.flush()
        logger.debug(f"Deleted {self.entity_type} {label_id} for user {self._user_id}")

    def _flush_unique(self, name: str) -> None:
        try:
            self._db.flush()
        except IntegrityError as e:
            self._db.rollback()
            if is_unique_violation(e):
                raise DuplicateError(self.entity_type, "name", name) from e
            raise ConstraintViolationError(
                f"{self.entity_type} rejected by the database: {e.orig}"
            ) from e
