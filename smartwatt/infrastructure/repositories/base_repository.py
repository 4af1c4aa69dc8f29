"""
SQLAlchemy implementation of the generic repository.
Writes only flush; callers group them in ``atomic()`` to commit.
"""

from contextlib import contextmanager
from typing import Any, Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from smartwatt.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class SQLAlchemyRepository(Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    model: Type[ModelType]

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def atomic(self) -> Iterator[Session]:
        """Commit everything done inside the block, or roll all of it back."""
        try:
            yield self.db
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get_by_id(self, id: int, lock: bool = False) -> Optional[ModelType]:
        """With ``lock``, re-read the row under SELECT ... FOR UPDATE."""
        return self.db.get(self.model, id, with_for_update=lock, populate_existing=lock)

    def list(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return self.db.query(self.model).order_by(self.model.id.desc()).offset(skip).limit(limit).all()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def create(self, obj_in: dict[str, Any]) -> ModelType:
        db_obj = self.model(**obj_in)
        self.db.add(db_obj)
        self.db.flush()
        return db_obj

    def update(self, db_obj: ModelType, obj_in: dict[str, Any]) -> ModelType:
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        self.db.add(db_obj)
        self.db.flush()
        return db_obj

    def delete(self, db_obj: ModelType) -> None:
        self.db.delete(db_obj)
        self.db.flush()

    def refresh(self, db_obj: ModelType) -> ModelType:
        self.db.refresh(db_obj)
        return db_obj
