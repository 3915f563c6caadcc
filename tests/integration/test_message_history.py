"""
Test suite for MessageCRUD keyset pagination.

System role: Verification of chat history persistence
"""

import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.message_crud import message_crud
from docchat.boundary.db.models.document_model import UploadStatus


async def seed_conversation(session: AsyncSession, owner_id: str, count: int):
    """Create a document with `count` messages one second apart; returns (document, messages oldest first)."""
    document = await document_crud.create(
        session,
        key=f"uploads/{uuid.uuid4()}.pdf",
        name="notes.pdf",
        owner_id=owner_id,
        url="https://files.example.com/f/notes",
        status=UploadStatus.SUCCESS,
    )
    start = datetime.now(timezone.utc) - timedelta(hours=1)
    messages = []
    for index in range(count):
        messages.append(
            await message_crud.create(
                session,
                text=f"message {index}",
                is_user_message=index % 2 == 0,
                document_id=document.id,
                owner_id=owner_id,
                created_at=start + timedelta(seconds=index),
            )
        )
    await session.commit()
    return document, messages


class TestMessagePagination:
    """Test suite for MessageCRUD.list_for_document()."""

    async def test_first_page_is_newest_first_with_cursor(
        self,
        test_async_db: AsyncSession,
        owner_id: str,
    ) -> None:
        # Arrange
        document, messages = await seed_conversation(test_async_db, owner_id, 5)

        # Act
        rows, next_cursor = await message_crud.list_for_document(test_async_db, document.id, limit=3)

        # Assert
        assert [r.text for r in rows] == ["message 4", "message 3", "message 2"]
        assert next_cursor == messages[2].id

    async def test_cursor_continues_after_last_seen_message(
        self,
        test_async_db: AsyncSession,
        owner_id: str,
    ) -> None:
        # Arrange
        document, _ = await seed_conversation(test_async_db, owner_id, 5)
        _, cursor = await message_crud.list_for_document(test_async_db, document.id, limit=3)

        # Act
        rows, next_cursor = await message_crud.list_for_document(test_async_db, document.id, limit=3, cursor=cursor)

        # Assert
        assert [r.text for r in rows] == ["message 1", "message 0"]
        assert next_cursor is None

    async def test_exact_page_has_no_cursor(self, test_async_db: AsyncSession, owner_id: str) -> None:
        document, _ = await seed_conversation(test_async_db, owner_id, 3)

        rows, next_cursor = await message_crud.list_for_document(test_async_db, document.id, limit=3)

        assert len(rows) == 3
        assert next_cursor is None

    async def test_cursor_from_another_document_yields_empty_page(
        self,
        test_async_db: AsyncSession,
        owner_id: str,
    ) -> None:
        # Arrange
        document, _ = await seed_conversation(test_async_db, owner_id, 2)
        _, other_messages = await seed_conversation(test_async_db, owner_id, 2)

        # Act
        rows, next_cursor = await message_crud.list_for_document(
            test_async_db,
            document.id,
            cursor=other_messages[0].id,
        )

        # Assert
        assert rows == []
        assert next_cursor is None

    async def test_messages_are_scoped_to_their_document(
        self,
        test_async_db: AsyncSession,
        owner_id: str,
    ) -> None:
        document, _ = await seed_conversation(test_async_db, owner_id, 2)
        await seed_conversation(test_async_db, owner_id, 4)

        rows, _ = await message_crud.list_for_document(test_async_db, document.id, limit=10)

        assert len(rows) == 2
        assert all(r.document_id == document.id for r in rows)


class TestMessageDeletion:
    """Test suite for MessageCRUD.delete_for_document()."""

    async def test_delete_for_document_removes_only_that_history(
        self,
        test_async_db: AsyncSession,
        owner_id: str,
    ) -> None:
        # Arrange
        document, _ = await seed_conversation(test_async_db, owner_id, 3)
        other, _ = await seed_conversation(test_async_db, owner_id, 2)

        # Act
        removed = await message_crud.delete_for_document(test_async_db, document.id)
        await test_async_db.commit()

        # Assert
        assert removed == 3
        remaining, _ = await message_crud.list_for_document(test_async_db, other.id)
        assert len(remaining) == 2
