"""
Exception hierarchy for the document chat application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.
Page-quota and file-size rejections are not exceptions; they are
reported as ingestion outcomes.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocChatException(Exception):
    """Base exception for all document chat application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DocumentNotFoundError(DocChatException):
    """Raised when a document does not exist or is not visible to the caller."""

    def __init__(self, identifier: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize document not found error.

        Args:
            identifier: Document ID or storage key that was looked up
            details: Additional context
        """
        details = details or {}
        details["identifier"] = identifier
        super().__init__(f"Document not found: {identifier}", details)


class DocumentFetchError(DocChatException):
    """Raised when every retrieval path for an uploaded file failed."""

    def __init__(
        self,
        message: str,
        file_key: str | None = None,
        attempts: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize fetch error.

        Args:
            message: Error message
            file_key: Storage key of the upload
            attempts: Description of each failed retrieval attempt
            details: Additional context
        """
        details = details or {}
        if file_key:
            details["file_key"] = file_key
        self.attempts = attempts or []
        if self.attempts:
            details["attempts"] = self.attempts
        super().__init__(message, details)


class IngestionError(DocChatException):
    """Base exception for failures while turning an upload into indexed chunks."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize ingestion error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ParsingError(IngestionError):
    """Raised when PDF extraction fails."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        file_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_name:
            details["file_name"] = file_name
        super().__init__(message, document_id, details)


class EmbeddingError(IngestionError):
    """Raised when the embedding provider fails or returns malformed vectors."""


class VectorStoreError(IngestionError):
    """Raised when vector index operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (upsert, query, delete, describe)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details=details)


class ChatTransportError(DocChatException):
    """Raised by the chat client when the server rejects a request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        self.status_code = status_code
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)


class DocumentPollingTimeout(DocChatException):
    """Raised when a document never appeared within the allowed polling attempts."""

    def __init__(self, key: str, attempts: int) -> None:
        self.key = key
        self.attempts = attempts
        super().__init__(
            f"Document for key {key} not available after {attempts} attempts",
            {"key": key, "attempts": attempts},
        )
