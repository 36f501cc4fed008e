"""
Shared helpers for SQLAlchemy repositories.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, Query


class SQLAlchemyRepository:
    """
    Base class holding the session and the soft-delete and write helpers.
    Subclasses set model and translate their own constraint violations.
    """

    model = None

    def __init__(self, session: Session):
        self.session = session

    def _query(self, include_deleted: bool = False) -> Query:
        query = self.session.query(self.model)
        if not include_deleted:
            query = query.filter(self.model.deleted_at.is_(None))
        return query

    def _get_model(self, entity_id: int, include_deleted: bool = False):
        return self._query(include_deleted).filter(self.model.id == entity_id).first()

    def _write(self, entity, model=None) -> None:
        """
        Flush pending changes inside a savepoint.
        A constraint violation rolls back only this write and is translated
        into a domain error, so the surrounding transaction stays usable.
        """
        try:
            with self.session.begin_nested():
                if model is not None:
                    self.session.add(model)
                self.session.flush()
        except IntegrityError as exc:
            translated = self._translate_integrity_error(exc, entity)
            if translated is None:
                raise
            raise translated from exc

    def _translate_integrity_error(self, exc: IntegrityError, entity) -> Optional[Exception]:
        """Map a constraint violation to a domain error, or None to re-raise it."""
        return None

    @staticmethod
    def _now() -> datetime:
        return datetime.utcnow()

    @staticmethod
    def _violates(exc: IntegrityError, *names: str) -> bool:
        message = str(exc.orig).lower()
        return any(name.lower() in message for name in names)
