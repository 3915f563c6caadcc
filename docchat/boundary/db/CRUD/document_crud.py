"""
Document CRUD operations.

Adds storage-key and owner-scoped lookups to BaseCRUD and guards status
transitions so a document never leaves SUCCESS or FAILED.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.models.document_model import (
    DocumentModel,
    FailureReason,
    UploadStatus,
)

MAX_ERROR_MESSAGE_LENGTH = 2000

# Source states each target status may be entered from
ALLOWED_TRANSITIONS: dict[UploadStatus, tuple[UploadStatus, ...]] = {
    UploadStatus.PROCESSING: (UploadStatus.PENDING,),
    UploadStatus.SUCCESS: (UploadStatus.PROCESSING,),
    UploadStatus.FAILED: (UploadStatus.PENDING, UploadStatus.PROCESSING),
}


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with storage-key lookup, owner scoping, and guarded
    status transitions.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_by_key(self, session: AsyncSession, key: str) -> DocumentModel | None:
        """
        Retrieve a document by its upload storage key.

        Args:
            session: Async database session
            key: Storage key issued by the upload transport

        Returns:
            DocumentModel if found, None otherwise
        """
        stmt = select(DocumentModel).where(DocumentModel.key == key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_owner(
        self,
        session: AsyncSession,
        id: UUID,
        owner_id: str,
    ) -> DocumentModel | None:
        """
        Retrieve a document only if it belongs to the given owner.

        Args:
            session: Async database session
            id: Document UUID
            owner_id: Requesting user identifier

        Returns:
            DocumentModel if found and owned, None otherwise
        """
        stmt = select(DocumentModel).where(
            DocumentModel.id == id,
            DocumentModel.owner_id == owner_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        List an owner's documents, newest first.

        Args:
            session: Async database session
            owner_id: Owning user identifier
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.owner_id == owner_id)
            .order_by(DocumentModel.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def transition_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: UploadStatus,
        failure_reason: FailureReason | None = None,
        error_message: str | None = None,
        page_count: int | None = None,
    ) -> DocumentModel | None:
        """
        Move a document to a new status if the transition is allowed.

        The guard is part of the UPDATE statement, so a concurrent writer
        cannot move a terminal document backwards.

        Args:
            session: Async database session
            id: Document UUID
            status: Target status
            failure_reason: Reason code when status is FAILED
            error_message: Error details when status is FAILED
            page_count: Page count discovered during extraction

        Returns:
            Updated DocumentModel, or None if the document is missing or
            the transition is not allowed from its current status
        """
        allowed_sources = ALLOWED_TRANSITIONS.get(status)
        if not allowed_sources:
            return None

        values: dict = {"status": status}
        if failure_reason is not None:
            values["failure_reason"] = failure_reason
        if error_message is not None:
            values["error_message"] = error_message[:MAX_ERROR_MESSAGE_LENGTH]
        if page_count is not None:
            values["page_count"] = page_count

        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.id == id,
                DocumentModel.status.in_(allowed_sources),
            )
            .values(**values)
            .returning(DocumentModel)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_page_count(
        self,
        session: AsyncSession,
        id: UUID,
        page_count: int,
    ) -> DocumentModel | None:
        """Record the extracted page count without touching status."""
        return await self.update_by_id(session, id, page_count=page_count)

    async def mark_success(self, session: AsyncSession, id: UUID) -> DocumentModel | None:
        """Mark a PROCESSING document as fully indexed."""
        return await self.transition_status(session, id, UploadStatus.SUCCESS)

    async def mark_failed(
        self,
        session: AsyncSession,
        id: UUID,
        failure_reason: FailureReason,
        error_message: str | None = None,
    ) -> DocumentModel | None:
        """
        Mark a non-terminal document as failed with a reason code.

        Args:
            session: Async database session
            id: Document UUID
            failure_reason: Machine-readable failure cause
            error_message: Human-readable error description

        Returns:
            Updated DocumentModel, or None if already terminal or missing
        """
        return await self.transition_status(
            session,
            id,
            UploadStatus.FAILED,
            failure_reason=failure_reason,
            error_message=error_message,
        )


document_crud = DocumentCRUD()
