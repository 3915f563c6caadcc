"""
Document status tracker.

Writes each ingestion status change in its own short transaction so the
progression PROCESSING -> SUCCESS | FAILED is visible to readers while
the pipeline is still running.

Dependencies: sqlalchemy, docchat.boundary.db
System role: Database persistence for ingestion state
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.models.document_model import (
    DocumentModel,
    FailureReason,
    UploadStatus,
)

logger = logging.getLogger(__name__)


class DocumentStatusTracker:
    """Create document rows and move them through their lifecycle."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Initialize tracker.

        Args:
            session_factory: Factory producing independent async sessions
        """
        self._session_factory = session_factory

    async def find_by_key(self, key: str) -> DocumentModel | None:
        async with self._session_factory() as session:
            return await document_crud.get_by_key(session, key)

    async def create_processing(
        self,
        key: str,
        name: str,
        owner_id: str,
        url: str,
    ) -> DocumentModel | None:
        """
        Insert a document row in PROCESSING state.

        Args:
            key: Storage key (unique)
            name: Display name
            owner_id: Owning user
            url: Upload URL

        Returns:
            DocumentModel, or None if another run created the key first
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.create(
                    session,
                    key=key,
                    name=name,
                    owner_id=owner_id,
                    url=url,
                    status=UploadStatus.PROCESSING,
                )
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.info(
                    f"{__name__}:create_processing - Key already recorded by a concurrent run",
                    extra={"file_key": key},
                )
                return None
            except Exception as e:
                logger.error(f"{__name__}:create_processing - {type(e).__name__}: {e}")
                await session.rollback()
                raise

        logger.info(
            f"{__name__}:create_processing - Document {document.id} marked PROCESSING",
            extra={"document_id": str(document.id), "file_key": key},
        )
        return document

    async def record_page_count(self, document_id: UUID, page_count: int) -> None:
        async with self._session_factory() as session:
            try:
                await document_crud.set_page_count(session, document_id, page_count)
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:record_page_count - {type(e).__name__}: {e}")
                await session.rollback()
                raise

    async def mark_success(self, document_id: UUID) -> DocumentModel | None:
        """
        Mark a PROCESSING document as SUCCESS.

        Returns:
            Updated DocumentModel, or None if the document was no longer PROCESSING
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.mark_success(session, document_id)
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:mark_success - {type(e).__name__}: {e}")
                await session.rollback()
                raise

        if document is None:
            logger.warning(
                f"{__name__}:mark_success - Transition refused, document not PROCESSING",
                extra={"document_id": str(document_id)},
            )
        else:
            logger.info(f"{__name__}:mark_success - Document {document_id} marked SUCCESS")
        return document

    async def mark_failed(
        self,
        document_id: UUID,
        reason: FailureReason,
        error_message: str | None = None,
    ) -> DocumentModel | None:
        """
        Mark a non-terminal document as FAILED.

        Args:
            document_id: Document UUID
            reason: Machine-readable failure cause
            error_message: Human-readable error (truncated to 2000 chars)

        Returns:
            Updated DocumentModel, or None if it was already terminal
        """
        async with self._session_factory() as session:
            try:
                document = await document_crud.mark_failed(
                    session,
                    document_id,
                    failure_reason=reason,
                    error_message=error_message,
                )
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:mark_failed - {type(e).__name__}: {e}")
                await session.rollback()
                raise

        logger.info(
            f"{__name__}:mark_failed - Document {document_id} marked FAILED",
            extra={"document_id": str(document_id), "reason": reason.value},
        )
        return document
