"""
Ingestion result model.

Dependencies: pydantic, docchat.boundary.db.models
System role: Return type for IngestionPipeline.ingest()
"""

import enum
from uuid import UUID

from pydantic import BaseModel, Field

from docchat.boundary.db.models.document_model import UploadStatus


class IngestionOutcome(str, enum.Enum):
    """How an ingestion call ended."""

    SUCCESS = "SUCCESS"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    PAGE_LIMIT_EXCEEDED = "PAGE_LIMIT_EXCEEDED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    FAILED = "FAILED"

    @property
    def is_policy_rejection(self) -> bool:
        return self in (IngestionOutcome.PAGE_LIMIT_EXCEEDED, IngestionOutcome.FILE_TOO_LARGE)


class IngestionResult(BaseModel):
    """Result of a single ingest() call."""

    document_id: UUID | None = Field(default=None, description="Document created or found for the key")
    outcome: IngestionOutcome
    status: UploadStatus | None = Field(default=None, description="Document status after the call")
    page_count: int | None = None
    chunk_count: int = 0
    processing_time_ms: float = 0.0
    error: str | None = Field(default=None, description="Failure description when outcome is not SUCCESS")
