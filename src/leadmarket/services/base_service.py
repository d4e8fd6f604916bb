"""
Base service class for common service functionality
"""
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Generic, TypeVar, Type, Optional
from leadmarket.database.models.base import BaseModel
from leadmarket.utils.exceptions import StoreWriteFailed
from leadmarket.utils.logging import get_logger

ModelType = TypeVar("ModelType", bound=BaseModel)

logger = get_logger(__name__)


class BaseService(Generic[ModelType]):
    """
    Base service class with common CRUD operations.
    Services should inherit from this for standard database operations.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[red]❌ Failed to write {self.model.__tablename__}:[/red] {e}")
            raise StoreWriteFailed(f"Failed to write {self.model.__tablename__}")

    def get(self, id: str) -> Optional[ModelType]:
        """Get a single record by ID"""
        return self.db.query(self.model).filter(self.model.id == id).first()

    def create(self, **kwargs) -> ModelType:
        """Create a new record"""
        db_obj = self.model(**kwargs)
        self.db.add(db_obj)
        self._commit()
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, id: str) -> bool:
        """Delete a record; False when it does not exist"""
        db_obj = self.get(id)
        if not db_obj:
            return False
        self.db.delete(db_obj)
        self._commit()
        return True
