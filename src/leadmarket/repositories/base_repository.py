"""
Base repository class for data access operations
"""
from sqlalchemy.orm import Session
from typing import Any, Dict, Generic, TypeVar, Type, Optional, List
from leadmarket.database.models.base import BaseModel

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class for database operations.
    Repositories handle direct database access and queries; committing is
    left to the calling service so several writes can share one transaction.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def find_by_id(self, id: str) -> Optional[ModelType]:
        """Find a record by ID"""
        return self.db.query(self.model).filter(self.model.id == id).first()

    def find_one_by(self, **filters) -> Optional[ModelType]:
        """Find a single record by filters"""
        return self.db.query(self.model).filter_by(**filters).first()

    def add(self, **kwargs) -> ModelType:
        """Stage a new record in the current transaction"""
        db_obj = self.model(**kwargs)
        self.db.add(db_obj)
        self.db.flush()
        return db_obj

    def update_where(self, criteria: List[Any], values: Dict[str, Any]) -> int:
        """
        Conditional update in the current transaction.

        Args:
            criteria: SQLAlchemy filter expressions that must all hold
            values: Column values to set

        Returns:
            Number of rows matched
        """
        return (
            self.db.query(self.model)
            .filter(*criteria)
            .update(values, synchronize_session=False)
        )
