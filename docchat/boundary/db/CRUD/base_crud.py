"""
Generic persistence helpers shared by the document and message stores.

Every method flushes inside the caller's session and never commits, so a
service can group several writes (for example, deleting a document's
messages and then the document) into one transaction.

Dependencies: sqlalchemy
System role: Base class for model-specific CRUD singletons
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Primary-key operations for one mapped model.

    Attributes:
        model: Mapped class the queries target
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """
        Insert a row and load server-generated columns.

        Args:
            session: Caller-owned async session
            **values: Column values for the new row

        Returns:
            The persisted instance with id and timestamps populated
        """
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """Fetch one row by primary key, or None."""
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def count(self, session: AsyncSession, **filters) -> int:
        """
        Count rows matching equality filters.

        Args:
            session: Caller-owned async session
            **filters: Column name to required value

        Returns:
            Number of matching rows (all rows when no filter is given)
        """
        stmt = select(func.count()).select_from(self.model).filter_by(**filters)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def update_by_id(self, session: AsyncSession, id: UUID, **values) -> ModelT | None:
        """
        Apply column updates to one row.

        Returns:
            The refreshed instance, or None when no row has that id
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**values)
            .returning(self.model)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """Delete one row; returns False when nothing matched."""
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0
