"""API request and response schemas."""

from docchat.models.document import (
    DocumentListResponse,
    DocumentResponse,
    PlanLimitsResponse,
    UploadAcceptedResponse,
    UploadCompleteRequest,
)
from docchat.models.message import ChatRequest, MessagePage, MessageResponse

__all__ = [
    "ChatRequest",
    "DocumentListResponse",
    "DocumentResponse",
    "MessagePage",
    "MessageResponse",
    "PlanLimitsResponse",
    "UploadAcceptedResponse",
    "UploadCompleteRequest",
]
