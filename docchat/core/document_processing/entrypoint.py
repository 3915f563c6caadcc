"""
Document ingestion pipeline orchestrator.

Coordinates idempotency check, record creation, fetch, extraction, quota
check, embedding + indexing, and finalization for one uploaded PDF.
Every run that creates a document ends with it in SUCCESS or FAILED.

Dependencies: All task modules, docchat.core.plans, status_tracker
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time
from uuid import UUID

from docchat.boundary.db.models.document_model import FailureReason, UploadStatus
from docchat.core.document_processing.models import IngestionOutcome, IngestionResult
from docchat.core.document_processing.status_tracker import DocumentStatusTracker
from docchat.core.document_processing.tasks import FetchTask, IndexingTask, ParsingTask
from docchat.core.exceptions import (
    DocumentFetchError,
    EmbeddingError,
    IngestionError,
    ParsingError,
    VectorStoreError,
)
from docchat.core.plans import PageQuota
from docchat.observability.log_utils import log_exception_with_context, safe_log_value

logger = logging.getLogger(__name__)


def failure_reason_for(error: BaseException) -> FailureReason:
    """Map a pipeline exception to the reason code stored on the document."""
    if isinstance(error, DocumentFetchError):
        return FailureReason.FETCH_FAILED
    if isinstance(error, ParsingError):
        return FailureReason.PARSING_FAILED
    if isinstance(error, (EmbeddingError, VectorStoreError)):
        return FailureReason.INDEXING_FAILED
    return FailureReason.UNEXPECTED_ERROR


class IngestionPipeline:
    """Orchestrate ingestion: fetch -> extract -> quota -> embed+index -> finalize."""

    def __init__(
        self,
        status_tracker: DocumentStatusTracker,
        fetch_task: FetchTask,
        parsing_task: ParsingTask,
        indexing_task: IndexingTask,
    ) -> None:
        """
        Initialize pipeline with its stages.

        Args:
            status_tracker: Document row persistence
            fetch_task: Upload download with storage fallback
            parsing_task: PDF page extraction
            indexing_task: Embedding and partition upsert
        """
        self._tracker = status_tracker
        self._fetch_task = fetch_task
        self._parsing_task = parsing_task
        self._indexing_task = indexing_task

    async def ingest(
        self,
        file_key: str,
        file_name: str,
        file_url: str,
        owner_id: str,
        page_quota: PageQuota,
    ) -> IngestionResult:
        """
        Ingest one uploaded file.

        Steps:
        1. Return early if a document already exists for file_key
        2. Create the document with status PROCESSING
        3. Fetch bytes (URL, then storage fallback)
        4. Extract page-level chunks and record the page count
        5. Apply the plan's file-size and page limits (policy outcomes, not errors)
        6. Embed chunks and upsert them under the document's partition
        7. Mark SUCCESS; any failure in 3-6 marks FAILED

        Args:
            file_key: Storage key from the upload transport
            file_name: Display name
            file_url: Retrievable URL from the upload transport
            owner_id: Authenticated uploader
            page_quota: Limits of the uploader's plan

        Returns:
            IngestionResult: Outcome, final status, and counts
        """
        start_time = time.perf_counter()

        existing = await self._tracker.find_by_key(file_key)
        if existing is not None:
            logger.info(
                f"{__name__}:ingest - Document already exists for key, skipping",
                extra={"file_key": file_key, "document_id": str(existing.id)},
            )
            return IngestionResult(
                document_id=existing.id,
                outcome=IngestionOutcome.ALREADY_EXISTS,
                status=existing.status,
                page_count=existing.page_count,
            )

        document = await self._tracker.create_processing(
            key=file_key,
            name=file_name,
            owner_id=owner_id,
            url=file_url,
        )
        if document is None:
            raced = await self._tracker.find_by_key(file_key)
            return IngestionResult(
                document_id=raced.id if raced else None,
                outcome=IngestionOutcome.ALREADY_EXISTS,
                status=raced.status if raced else None,
            )

        document_id = document.id
        logger.info(
            f"{__name__}:ingest - START",
            extra={
                "document_id": str(document_id),
                "file_key": file_key,
                "file_name": safe_log_value(file_name),
                "plan": page_quota.plan.value,
            },
        )

        try:
            return await self._process(document_id, file_key, file_name, file_url, page_quota, start_time)
        except asyncio.CancelledError:
            await asyncio.shield(
                self._tracker.mark_failed(document_id, FailureReason.UNEXPECTED_ERROR, "Ingestion cancelled")
            )
            raise
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:ingest - FAILED",
                e,
                document_id=str(document_id),
                file_key=file_key,
            )
            reason = failure_reason_for(e)
            await self._tracker.mark_failed(document_id, reason, str(e))
            return IngestionResult(
                document_id=document_id,
                outcome=IngestionOutcome.FAILED,
                status=UploadStatus.FAILED,
                processing_time_ms=self._elapsed_ms(start_time),
                error=str(e),
            )

    async def _process(
        self,
        document_id: UUID,
        file_key: str,
        file_name: str,
        file_url: str,
        page_quota: PageQuota,
        start_time: float,
    ) -> IngestionResult:
        fetched = await self._fetch_task.fetch(file_key, file_url)

        if page_quota.exceeds_file_size(fetched.size):
            return await self._reject(
                document_id,
                IngestionOutcome.FILE_TOO_LARGE,
                FailureReason.FILE_TOO_LARGE,
                f"File size {fetched.size} bytes exceeds the {page_quota.plan.value} plan limit "
                f"of {page_quota.max_file_size_bytes} bytes",
                start_time,
            )

        extracted = await asyncio.to_thread(
            self._parsing_task.parse_bytes,
            fetched.content,
            str(document_id),
            file_name,
            fetched.content_type,
        )
        await self._tracker.record_page_count(document_id, extracted.page_count)

        if page_quota.exceeds_pages(extracted.page_count):
            return await self._reject(
                document_id,
                IngestionOutcome.PAGE_LIMIT_EXCEEDED,
                FailureReason.PAGE_LIMIT_EXCEEDED,
                f"{extracted.page_count} pages exceeds the {page_quota.plan.value} plan limit "
                f"of {page_quota.max_pages} pages",
                start_time,
                page_count=extracted.page_count,
            )

        if not extracted.chunks:
            raise ParsingError(
                "PDF document contains no extractable text",
                document_id=str(document_id),
                file_name=file_name,
            )

        chunk_count = await self._indexing_task.index(str(document_id), extracted.chunks, file_name)

        if await self._tracker.mark_success(document_id) is None:
            raise IngestionError(
                "Document left PROCESSING before indexing finished",
                document_id=str(document_id),
            )

        elapsed_ms = self._elapsed_ms(start_time)
        logger.info(
            f"{__name__}:ingest - SUCCESS",
            extra={
                "document_id": str(document_id),
                "page_count": extracted.page_count,
                "chunk_count": chunk_count,
                "processing_time_ms": round(elapsed_ms, 2),
                "source": fetched.source,
            },
        )
        return IngestionResult(
            document_id=document_id,
            outcome=IngestionOutcome.SUCCESS,
            status=UploadStatus.SUCCESS,
            page_count=extracted.page_count,
            chunk_count=chunk_count,
            processing_time_ms=elapsed_ms,
        )

    async def _reject(
        self,
        document_id: UUID,
        outcome: IngestionOutcome,
        reason: FailureReason,
        message: str,
        start_time: float,
        page_count: int | None = None,
    ) -> IngestionResult:
        logger.info(
            f"{__name__}:ingest - Rejected by plan policy: {message}",
            extra={"document_id": str(document_id), "reason": reason.value},
        )
        await self._tracker.mark_failed(document_id, reason, message)
        return IngestionResult(
            document_id=document_id,
            outcome=outcome,
            status=UploadStatus.FAILED,
            page_count=page_count,
            processing_time_ms=self._elapsed_ms(start_time),
            error=message,
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return (time.perf_counter() - start_time) * 1000
