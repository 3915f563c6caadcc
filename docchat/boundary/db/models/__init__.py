"""ORM models."""

from docchat.boundary.db.models.document_model import DocumentModel, FailureReason, UploadStatus
from docchat.boundary.db.models.message_model import MessageModel

__all__ = ["DocumentModel", "FailureReason", "MessageModel", "UploadStatus"]
