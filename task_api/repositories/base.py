"""Base repository with generic CRUD operations."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.core.exceptions import StoreError
from task_api.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Re-raise any SQLAlchemy failure inside the block as ``StoreError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise StoreError(f"Database error while trying to {action}") from exc


class BaseRepository(Generic[ModelType]):
    """Generic repository providing common CRUD operations.

    This base class implements the repository pattern, abstracting
    database operations from business logic. Every method raises
    ``StoreError`` when the database call fails.

    Attributes:
        model: The SQLAlchemy model class this repository manages.
        session: The async database session.
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        """Initialize repository with model and session.

        Args:
            model: SQLAlchemy model class.
            session: Async database session.
        """
        self.model = model
        self.session = session

    @property
    def _name(self) -> str:
        return self.model.__name__.lower()

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new entity.

        Args:
            **kwargs: Fields to set on the new entity.

        Returns:
            The created entity, refreshed from the database.
        """
        with store_errors(f"create {self._name}"):
            instance = self.model(**kwargs)
            self.session.add(instance)
            await self.session.flush()
            await self.session.refresh(instance)
            return instance

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """Get an entity by its ID.

        Args:
            entity_id: The entity's primary key.

        Returns:
            The entity if found, None otherwise.
        """
        with store_errors(f"load {self._name} {entity_id}"):
            result = await self.session.execute(
                select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
            )
            return result.scalar_one_or_none()

    async def get_all(self, *, order_by: Any | None = None) -> list[ModelType]:
        """Get all entities.

        Args:
            order_by: Column to order by (defaults to the primary key).

        Returns:
            List of entities.
        """
        if order_by is None:
            order_by = self.model.id  # type: ignore[attr-defined]

        with store_errors(f"list {self._name} records"):
            result = await self.session.execute(select(self.model).order_by(order_by))
            return list(result.scalars().all())

    async def update(self, entity: ModelType, **kwargs: Any) -> ModelType:
        """Update an entity with given fields.

        Args:
            entity: The entity to update.
            **kwargs: Fields to update.

        Returns:
            The updated entity.
        """
        with store_errors(f"update {self._name}"):
            for key, value in kwargs.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)

            await self.session.flush()
            await self.session.refresh(entity)
            return entity

    async def delete(self, entity: ModelType) -> None:
        """Delete an entity.

        Args:
            entity: The entity to delete.
        """
        with store_errors(f"delete {self._name}"):
            await self.session.delete(entity)
            await self.session.flush()

    async def count(self) -> int:
        """Count total number of entities.

        Returns:
            Total count.
        """
        with store_errors(f"count {self._name} records"):
            result = await self.session.execute(select(func.count()).select_from(self.model))
            return result.scalar_one()

    async def commit(self) -> None:
        """Commit the current unit of work."""
        with store_errors(f"commit {self._name} changes"):
            await self.session.commit()
