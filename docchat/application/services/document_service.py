"""
Document service.

Owner-scoped document lookups, deletion (partition first, then record),
and message history paging.

Dependencies: docchat.boundary.db, docchat.boundary.vdb
System role: Document management orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.message_crud import message_crud
from docchat.boundary.db.models.document_model import DocumentModel
from docchat.boundary.db.models.message_model import MessageModel
from docchat.boundary.vdb.base import VectorIndex
from docchat.core.exceptions import DocumentNotFoundError

logger = logging.getLogger(__name__)


class DocumentService:
    """Document lifecycle operations for one request."""

    def __init__(self, db: AsyncSession, vector_index: VectorIndex) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata
            vector_index: Index holding the documents' partitions
        """
        self.db = db
        self._vector_index = vector_index

    async def list_for_owner(self, owner_id: str) -> Sequence[DocumentModel]:
        return await document_crud.list_for_owner(self.db, owner_id)

    async def get_for_owner(self, document_id: UUID, owner_id: str) -> DocumentModel:
        """
        Fetch a document the owner is allowed to see.

        Raises:
            DocumentNotFoundError: Missing, or owned by someone else
        """
        document = await document_crud.get_for_owner(self.db, document_id, owner_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return document

    async def get_by_key_for_owner(self, key: str, owner_id: str) -> DocumentModel:
        """
        Fetch a document by storage key.

        Used by upload polling; not-found is expected until ingestion has
        created the record.

        Raises:
            DocumentNotFoundError: No record for the key, or not the owner's
        """
        document = await document_crud.get_by_key(self.db, key)
        if document is None or document.owner_id != owner_id:
            raise DocumentNotFoundError(key)
        return document

    async def delete(self, document_id: UUID, owner_id: str) -> None:
        """
        Delete a document, its partition, and its messages.

        The partition is removed first so a failed index call leaves the
        record in place for a retry.

        Raises:
            DocumentNotFoundError: Missing, or owned by someone else
            VectorStoreError: Partition removal failed
        """
        document = await self.get_for_owner(document_id, owner_id)

        removed = await self._vector_index.delete_namespace(str(document.id))

        try:
            await message_crud.delete_for_document(self.db, document.id)
            await document_crud.delete_by_id(self.db, document.id)
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:delete - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

        logger.info(
            f"{__name__}:delete - Document deleted",
            extra={"document_id": str(document_id), "vectors_removed": removed},
        )

    async def list_messages(
        self,
        document_id: UUID,
        owner_id: str,
        limit: int = 10,
        cursor: UUID | None = None,
    ) -> tuple[Sequence[MessageModel], UUID | None]:
        """
        Page through a document's messages, newest first.

        Args:
            document_id: Document UUID
            owner_id: Requesting user
            limit: Page size
            cursor: Id of the oldest message already held by the caller

        Returns:
            Tuple of (messages, next cursor or None)

        Raises:
            DocumentNotFoundError: Missing, or owned by someone else
        """
        await self.get_for_owner(document_id, owner_id)
        return await message_crud.list_for_document(self.db, document_id, limit=limit, cursor=cursor)
