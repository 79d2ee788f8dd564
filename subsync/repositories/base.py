"""
Generic CRUD repository over a SQLAlchemy session.

Every database failure surfaces as DataError; lookups of missing rows return
None and leave the decision to the caller.
"""

import logging
from contextlib import contextmanager
from typing import Any, Generic, Iterator, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from subsync.core.errors import DataError
from subsync.db.base import Base

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Base)


@contextmanager
def backend_errors(db: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise any SQLAlchemy failure inside the block as DataError."""
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        logger.warning("%s violated a constraint: %s", action, exc.orig)
        raise DataError(f"{action} failed: conflicting or invalid data", status_code=409) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s failed", action, exc_info=True)
        raise DataError(f"{action} failed", status_code=500) from exc


class BaseRepository(Generic[T]):
    model: type[T]
    # name used in error messages, e.g. "Plan"
    label: str = "Record"

    def __init__(self, db: Session):
        self.db = db

    def backend(self, action: str):
        return backend_errors(self.db, action)

    # ---------------------------
    # reads
    # ---------------------------

    def list(self, *, order_by: Any = None, limit: int | None = None, **filters: Any) -> list[T]:
        query = select(self.model)
        for key, value in filters.items():
            if value is None:
                continue
            column = getattr(self.model, key)
            if isinstance(value, (list, tuple, set)):
                query = query.where(column.in_(value))
            else:
                query = query.where(column == value)
        if order_by is not None:
            query = query.order_by(*order_by) if isinstance(order_by, (list, tuple)) else query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)

        with self.backend(f"Listing {self.label.lower()}s"):
            return list(self.db.execute(query).scalars().all())

    def get_by_id(self, id: int) -> T | None:
        with self.backend(f"Loading {self.label.lower()}"):
            return self.db.get(self.model, id)

    def require(self, id: int) -> T:
        obj = self.get_by_id(id)
        if obj is None:
            raise DataError(f"{self.label} not found", status_code=404)
        return obj

    # ---------------------------
    # writes
    # ---------------------------

    def create(self, **values: Any) -> T:
        obj = self.model(**values)
        with self.backend(f"Creating {self.label.lower()}"):
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        return obj

    def update(self, id: int, **values: Any) -> T:
        obj = self.require(id)
        with self.backend(f"Updating {self.label.lower()}"):
            for key, value in values.items():
                setattr(obj, key, value)
            self.db.commit()
            self.db.refresh(obj)
        return obj

    def delete(self, id: int) -> None:
        obj = self.require(id)
        with self.backend(f"Deleting {self.label.lower()}"):
            self.db.delete(obj)
            self.db.commit()
