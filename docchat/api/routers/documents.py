"""
Document API endpoints.

Routes:
- GET /documents - List the caller's documents
- GET /documents/by-key/{key} - Look up by storage key (upload polling)
- GET /documents/{id} - Get one document
- DELETE /documents/{id} - Delete document, partition, and messages
- GET /documents/{id}/messages - Page through chat history

Dependencies: docchat.application.services, docchat.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from docchat.api.deps import get_current_owner, get_document_service, get_settings_dependency
from docchat.application.services.document_service import DocumentService
from docchat.configs import Settings
from docchat.core.exceptions import DocumentNotFoundError, VectorStoreError
from docchat.models.document import DocumentListResponse, DocumentResponse
from docchat.models.message import MessagePage, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    owner_id: str = Depends(get_current_owner),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List the caller's documents, newest first."""
    documents = await document_service.list_for_owner(owner_id)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(doc) for doc in documents],
        total=len(documents),
    )


@router.get("/by-key/{key:path}", response_model=DocumentResponse)
async def get_document_by_key(
    key: str,
    owner_id: str = Depends(get_current_owner),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Look up a document by storage key.

    Returns 404 until background ingestion has created the record.

    Raises:
        HTTPException(404): No document for this key yet
    """
    try:
        document = await document_service.get_by_key_for_owner(key, owner_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return DocumentResponse.model_validate(document)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    owner_id: str = Depends(get_current_owner),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Get one of the caller's documents."""
    try:
        document = await document_service.get_for_owner(document_id, owner_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: UUID,
    owner_id: str = Depends(get_current_owner),
    document_service: DocumentService = Depends(get_document_service),
) -> Response:
    """
    Delete a document with its partition and chat history.

    Raises:
        HTTPException(404): Document not found
        HTTPException(502): Vector index refused the partition delete
    """
    try:
        await document_service.delete(document_id, owner_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    except VectorStoreError as e:
        logger.error(f"{__name__}:delete_document - {e}", extra={"document_id": str(document_id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not remove document vectors",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{document_id}/messages", response_model=MessagePage)
async def list_messages(
    document_id: UUID,
    cursor: UUID | None = Query(default=None, description="Oldest message id already loaded"),
    limit: int | None = Query(default=None, ge=1, le=100),
    owner_id: str = Depends(get_current_owner),
    document_service: DocumentService = Depends(get_document_service),
    settings: Settings = Depends(get_settings_dependency),
) -> MessagePage:
    """Page through a document's chat history, newest first."""
    page_size = limit or settings.chat.messages_page_size
    try:
        messages, next_cursor = await document_service.list_messages(
            document_id,
            owner_id,
            limit=page_size,
            cursor=cursor,
        )
    except DocumentNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return MessagePage(
        messages=[MessageResponse.model_validate(message) for message in messages],
        next_cursor=next_cursor,
    )
