"""Base repository with common database operations."""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import LoaderOption

from ..database.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations."""

    def __init__(self, model: Type[T], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy ORM model class
            session: Database session
        """
        self.model = model
        self.session = session

    async def get(self, id: str, *options: LoaderOption) -> Optional[T]:
        """
        Get a single record by primary key.

        Args:
            id: Primary key value
            *options: Loader options such as selectinload()

        Returns:
            Model instance or None
        """
        return await self.session.get(self.model, id, options=options or None)

    async def find(
        self, *criteria: Any, order_by: Any = None, options: tuple = ()
    ) -> list[T]:
        """
        Get all records matching the given criteria.

        Args:
            *criteria: SQLAlchemy where clauses
            order_by: Optional ordering clause
            options: Loader options

        Returns:
            List of model instances
        """
        query = select(self.model).where(*criteria).options(*options)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create(self, instance: T) -> T:
        """
        Create a new record.

        Args:
            instance: Model instance to create

        Returns:
            Created instance
        """
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def update(self, instance: T) -> T:
        """Flush pending changes on an existing record."""
        await self.session.flush()
        return instance

    async def delete(self, instance: T) -> None:
        """
        Delete a record.

        Args:
            instance: Model instance to delete
        """
        await self.session.delete(instance)
        await self.session.flush()
