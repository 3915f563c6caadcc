"""
Upload completion API endpoints.

Routes:
- POST /uploads/complete - Schedule ingestion of a file stored by the upload transport
- GET /uploads/limits - Page and size limits of the caller's plan

Dependencies: docchat.core.document_processing, docchat.models
System role: Ingestion trigger HTTP API
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status

from docchat.api.deps import get_current_owner, get_ingestion_pipeline, get_page_quota
from docchat.core.document_processing import IngestionPipeline
from docchat.core.plans import PageQuota
from docchat.models.document import (
    PlanLimitsResponse,
    UploadAcceptedResponse,
    UploadCompleteRequest,
)
from docchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])


async def ingest_upload_background(
    pipeline: IngestionPipeline,
    request: UploadCompleteRequest,
    owner_id: str,
    page_quota: PageQuota,
) -> None:
    """
    Background task running one ingestion.

    The pipeline opens its own database sessions and always finalizes the
    document it creates; errors reaching this level happened before the
    document existed and are only logged.
    """
    try:
        result = await pipeline.ingest(
            file_key=request.key,
            file_name=request.name,
            file_url=request.url,
            owner_id=owner_id,
            page_quota=page_quota,
        )
    except Exception as e:
        log_exception_with_context(
            logger,
            f"{__name__}:ingest_upload_background - Ingestion aborted",
            e,
            file_key=request.key,
        )
        return

    logger.info(
        f"{__name__}:ingest_upload_background - Ingestion finished",
        extra={
            "file_key": request.key,
            "document_id": str(result.document_id) if result.document_id else None,
            "outcome": result.outcome.value,
        },
    )


@router.post(
    "/complete",
    response_model=UploadAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def complete_upload(
    request: UploadCompleteRequest,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_current_owner),
    page_quota: PageQuota = Depends(get_page_quota),
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
) -> UploadAcceptedResponse:
    """
    Accept a completed upload and ingest it in the background.

    Clients poll GET /documents/by-key/{key} until the document exists and
    reaches a terminal status.

    Args:
        request: Storage key, display name, and retrievable URL
        background_tasks: FastAPI background tasks
        owner_id: Authenticated uploader
        page_quota: Caller's plan limits
        pipeline: Injected ingestion pipeline

    Returns:
        UploadAcceptedResponse: Key to poll on
    """
    logger.info(
        f"{__name__}:complete_upload - Scheduling ingestion",
        extra={"file_key": request.key, "plan": page_quota.plan.value},
    )
    background_tasks.add_task(ingest_upload_background, pipeline, request, owner_id, page_quota)
    return UploadAcceptedResponse(key=request.key)


@router.get("/limits", response_model=PlanLimitsResponse)
async def get_upload_limits(
    owner_id: str = Depends(get_current_owner),
    page_quota: PageQuota = Depends(get_page_quota),
) -> PlanLimitsResponse:
    """Report the caller's plan limits."""
    return PlanLimitsResponse(
        plan=page_quota.plan,
        max_pages=page_quota.max_pages,
        max_file_size_bytes=page_quota.max_file_size_bytes,
    )
