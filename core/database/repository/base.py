"""Base repository with dependency injection pattern."""

from typing import Generic, TypeVar

from sqlmodel import Session, SQLModel, func, select

from core.log import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=SQLModel)


class BaseRepository(Generic[T]):
    """Base repository with dependency injection pattern."""

    def __init__(self, model: type[T], db: Session) -> None:
        self.model = model
        self.db = db

    def create(self, obj: T) -> T:
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
            logger.debug(f"Created {obj.model_dump()}")
        except Exception as exc:
            self.db.rollback()
            logger.error(f"Failed to create {obj.model_dump()}: {exc}")
            raise

        return obj

    def get_by_id(self, obj_id: int) -> T | None:
        return self.db.get(self.model, obj_id)

    def get_all(self, skip: int = 0, limit: int = 100) -> list[T]:
        """Get all objects with pagination."""
        statement = select(self.model).offset(skip).limit(limit)
        return list(self.db.exec(statement).all())

    def count(self) -> int:
        """Count all objects."""
        statement = select(func.count()).select_from(self.model)
        return int(self.db.exec(statement).one())
