"""
Document domain models and schemas.

Request/response schemas for document and upload operations. The status
and failure-reason enums are re-exported for API consumers.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docchat.boundary.db.models.document_model import FailureReason, UploadStatus
from docchat.core.plans import SubscriptionPlan

__all__ = [
    "DocumentListResponse",
    "DocumentResponse",
    "FailureReason",
    "PlanLimitsResponse",
    "UploadAcceptedResponse",
    "UploadCompleteRequest",
    "UploadStatus",
]


class DocumentResponse(BaseModel):
    """Response schema for document operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    key: str
    name: str
    url: str
    status: UploadStatus
    page_count: int | None = None
    failure_reason: FailureReason | None = None
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime


class DocumentListResponse(BaseModel):
    """Document list response."""

    documents: list[DocumentResponse]
    total: int


class UploadCompleteRequest(BaseModel):
    """Notification that the upload transport has stored a file."""

    key: str = Field(min_length=1, max_length=512, description="Storage key issued by the upload transport")
    name: str = Field(min_length=1, max_length=255, description="Original filename")
    url: str = Field(min_length=1, max_length=2048, description="Retrievable URL of the uploaded file")


class UploadAcceptedResponse(BaseModel):
    """Response after ingestion has been scheduled."""

    key: str
    status: str = Field(default="accepted", description="Ingestion runs in the background")
    message: str = Field(default="Poll /documents/by-key/{key} until the document appears")


class PlanLimitsResponse(BaseModel):
    """Upload limits of the caller's plan."""

    plan: SubscriptionPlan
    max_pages: int
    max_file_size_bytes: int
