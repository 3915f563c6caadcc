"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - DocumentModel, MessageModel: Domain entities
  - UploadStatus, FailureReason: Enum types for ingestion state
  - document_crud, message_crud: CRUD operation singletons

Dependencies: sqlalchemy, docchat.configs
System role: Database adapter for documents and chat history
"""

from docchat.boundary.db.base import Base, TimestampMixin, UUIDMixin
from docchat.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from docchat.boundary.db.models import (
    DocumentModel,
    FailureReason,
    MessageModel,
    UploadStatus,
)
from docchat.boundary.db.CRUD import (
    BaseCRUD,
    DocumentCRUD,
    MessageCRUD,
    document_crud,
    message_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "DocumentModel",
    "FailureReason",
    "MessageModel",
    "UploadStatus",
    "BaseCRUD",
    "DocumentCRUD",
    "MessageCRUD",
    "document_crud",
    "message_crud",
]
