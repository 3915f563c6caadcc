"""
Chat message API endpoint.

Routes: POST /message - Stream an answer about one document as text/plain

Dependencies: docchat.application.services.chat_service, docchat.models
System role: Streaming chat HTTP API
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from docchat.api.deps import get_chat_service, get_current_owner
from docchat.application.services.chat_service import ChatService
from docchat.core.exceptions import DocumentNotFoundError
from docchat.models.message import ChatRequest
from docchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["messages"])

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


@router.post("/message")
async def send_message(
    request: ChatRequest,
    owner_id: str = Depends(get_current_owner),
    chat_service: ChatService = Depends(get_chat_service),
):
    """
    Ask a question about a document and stream the answer.

    Not-ready documents and retrieval failures still produce a 200 text
    answer; only a missing document or an internal failure before
    streaming starts short-circuits.

    Args:
        request: Document ID and question
        owner_id: Authenticated requester
        chat_service: Injected chat service

    Returns:
        StreamingResponse: UTF-8 text fragments
        PlainTextResponse(404): "File not found"
        JSONResponse(500): Internal error payload
    """
    logger.info(
        f"{__name__}:send_message - Chat request received",
        extra={"document_id": str(request.document_id), "message_length": len(request.message)},
    )
    try:
        fragments = await chat_service.answer(request.document_id, request.message, owner_id)
    except DocumentNotFoundError:
        return PlainTextResponse("File not found", status_code=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        log_exception_with_context(
            logger,
            f"{__name__}:send_message - Failed to start answer",
            e,
            document_id=str(request.document_id),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "details": str(e)},
        )

    return StreamingResponse(
        fragments,
        media_type="text/plain; charset=utf-8",
        headers=STREAM_HEADERS,
    )
