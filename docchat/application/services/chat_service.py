"""
Chat service for retrieval-augmented answers over one document.

Validates ownership, persists the user question, retrieves the top-K
passages from the document's partition, and streams the assembled answer.
The system message is persisted with whatever text was produced when the
stream ends or is interrupted.

Sessions come from a factory instead of a request-scoped session because
the answer keeps streaming after the request handler has returned.

Dependencies: docchat.boundary.db, docchat.boundary.vdb, docchat.core.answer_builder
System role: Chat responder orchestration layer
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.message_crud import message_crud
from docchat.boundary.db.models.document_model import DocumentModel, UploadStatus
from docchat.boundary.vdb.base import VectorIndex
from docchat.boundary.vdb.embedding_provider import EmbeddingProvider
from docchat.core.answer_builder import AnswerBuilder
from docchat.core.exceptions import DocumentNotFoundError
from docchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class ChatService:
    """
    Answer questions about a single document.

    Embedding provider and vector index must agree on dimension; the same
    provider instance is used at ingestion time.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        embedding_provider: EmbeddingProvider,
        vector_index: VectorIndex,
        top_k: int = 2,
        answer_builder: AnswerBuilder | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            session_factory: Factory producing independent async sessions
            embedding_provider: Query embedding (same model and dimension as ingestion)
            vector_index: Namespaced index to query
            top_k: Passages retrieved per question
            answer_builder: Text composition, defaults to AnswerBuilder()

        Raises:
            ValueError: If provider and index dimensions differ
        """
        if embedding_provider.dimension != vector_index.dimension:
            raise ValueError(
                f"Embedding dimension {embedding_provider.dimension} does not match "
                f"index dimension {vector_index.dimension}"
            )
        self._session_factory = session_factory
        self._embedding_provider = embedding_provider
        self._vector_index = vector_index
        self._top_k = top_k
        self._answer_builder = answer_builder or AnswerBuilder()

    async def answer(
        self,
        document_id: UUID,
        question: str,
        owner_id: str,
    ) -> AsyncGenerator[str, None]:
        """
        Start answering a question.

        Ownership check and user message persistence happen before this
        returns, so a missing document fails the request before any
        bytes are streamed.

        Args:
            document_id: Document to ask about
            question: User question
            owner_id: Authenticated requester

        Returns:
            AsyncGenerator[str, None]: Answer fragments in order

        Raises:
            DocumentNotFoundError: Document missing or owned by someone else
        """
        async with self._session_factory() as session:
            document = await document_crud.get_for_owner(session, document_id, owner_id)
            if document is None:
                logger.warning(
                    f"{__name__}:answer - Document not found for owner",
                    extra={"document_id": str(document_id), "owner_id": owner_id},
                )
                raise DocumentNotFoundError(str(document_id))

            try:
                await message_crud.create(
                    session,
                    text=question,
                    is_user_message=True,
                    document_id=document_id,
                    owner_id=owner_id,
                )
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:answer - User message storage failed: {type(e).__name__}: {e}")
                await session.rollback()
                raise

        logger.info(
            f"{__name__}:answer - START",
            extra={"document_id": str(document_id), "status": document.status.value},
        )
        return self._stream(document, question, owner_id)

    async def _stream(
        self,
        document: DocumentModel,
        question: str,
        owner_id: str,
    ) -> AsyncGenerator[str, None]:
        produced: list[str] = []
        try:
            if document.status != UploadStatus.SUCCESS:
                fragments = [self._answer_builder.not_ready()]
            else:
                fragments = await self._retrieve(document, question)

            for fragment in fragments:
                produced.append(fragment)
                yield fragment
        finally:
            if produced:
                await asyncio.shield(
                    self._persist_answer(document.id, owner_id, "".join(produced))
                )

    async def _retrieve(self, document: DocumentModel, question: str) -> list[str]:
        try:
            vector = await self._embedding_provider.embed_query(question)
            results = await self._vector_index.query(str(document.id), vector, self._top_k)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_retrieve - Retrieval degraded",
                e,
                document_id=str(document.id),
            )
            return [self._answer_builder.degraded(document.name, e)]

        logger.info(
            f"{__name__}:_retrieve - Found {len(results)} passages",
            extra={"document_id": str(document.id), "top_k": self._top_k},
        )
        return self._answer_builder.fragments(document.name, question, results)

    async def _persist_answer(self, document_id: UUID, owner_id: str, text: str) -> None:
        async with self._session_factory() as session:
            try:
                await message_crud.create(
                    session,
                    text=text,
                    is_user_message=False,
                    document_id=document_id,
                    owner_id=owner_id,
                )
                await session.commit()
            except Exception as e:
                logger.error(
                    f"{__name__}:_persist_answer - {type(e).__name__}: {e}",
                    extra={"document_id": str(document_id)},
                )
                await session.rollback()
                raise
