"""
Message CRUD operations.

Append-only chat history with keyset pagination (newest first, cursor is
the id of the last message on the previous page).

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Chat history persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.models.message_model import MessageModel


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def list_for_document(
        self,
        session: AsyncSession,
        document_id: UUID,
        limit: int = 10,
        cursor: UUID | None = None,
    ) -> tuple[Sequence[MessageModel], UUID | None]:
        """
        Page through a document's messages, newest first.

        Args:
            session: Async database session
            document_id: Owning document UUID
            limit: Page size
            cursor: Id of the oldest message already seen (None for first page)

        Returns:
            Tuple of (messages newest first, cursor for the next page or None)
        """
        stmt = select(MessageModel).where(MessageModel.document_id == document_id)

        if cursor is not None:
            anchor = await self.get_by_id(session, cursor)
            if anchor is None or anchor.document_id != document_id:
                return [], None
            stmt = stmt.where(
                or_(
                    MessageModel.created_at < anchor.created_at,
                    and_(
                        MessageModel.created_at == anchor.created_at,
                        MessageModel.id < anchor.id,
                    ),
                )
            )

        stmt = stmt.order_by(MessageModel.created_at.desc(), MessageModel.id.desc()).limit(limit + 1)
        result = await session.execute(stmt)
        rows = list(result.scalars().all())

        next_cursor = None
        if len(rows) > limit:
            rows = rows[:limit]
            next_cursor = rows[-1].id
        return rows, next_cursor

    async def delete_for_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Delete every message of a document; returns the number removed."""
        stmt = delete(MessageModel).where(MessageModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount


message_crud = MessageCRUD()
