"""
Document ORM model.

Represents an uploaded PDF with its processing status. Status moves
forward only: PENDING -> PROCESSING -> SUCCESS | FAILED.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, TimestampMixin, UUIDMixin


class UploadStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    PENDING: Accepted, ingestion not started
    PROCESSING: Fetching, extracting, embedding, or indexing
    SUCCESS: Every chunk indexed in the document partition
    FAILED: Ingestion stopped; failure_reason says why
    """

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class FailureReason(str, enum.Enum):
    """Machine-readable cause stored alongside a FAILED status."""

    PAGE_LIMIT_EXCEEDED = "PAGE_LIMIT_EXCEEDED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    FETCH_FAILED = "FETCH_FAILED"
    PARSING_FAILED = "PARSING_FAILED"
    INDEXING_FAILED = "INDEXING_FAILED"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Attributes:
        id: UUID primary key, also the vector partition name
        key: Storage key from the upload transport (unique)
        name: Display file name
        owner_id: Owning user identifier
        url: Retrievable URL issued by the upload transport
        status: Current processing state
        page_count: Pages found during extraction
        failure_reason: FailureReason value when status is FAILED
        error_message: Human-readable error when status is FAILED
    """

    __tablename__ = "documents"

    key: Mapped[str] = mapped_column(String(512), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, doc="Display file name")
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(2048), nullable=False, doc="Upload URL")

    status: Mapped[UploadStatus] = mapped_column(
        Enum(UploadStatus, native_enum=False, length=16),
        nullable=False,
        default=UploadStatus.PENDING,
    )
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    failure_reason: Mapped[FailureReason | None] = mapped_column(
        Enum(FailureReason, native_enum=False, length=32),
        nullable=True,
    )
    error_message: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Error details if processing failed",
    )

    messages = relationship(
        "MessageModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
