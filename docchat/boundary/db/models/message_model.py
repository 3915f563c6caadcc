"""
Message ORM model.

Chat messages attached to a document: user questions and generated
answers. Rows are append-only.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Chat history persistence
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, UUIDMixin, utc_now


class MessageModel(Base, UUIDMixin):
    """
    Chat message ORM model.

    Attributes:
        id: UUID primary key
        text: Message body
        is_user_message: True for questions, False for generated answers
        document_id: Owning document (cascade delete)
        owner_id: Owning user identifier
        created_at: Creation timestamp (UTC), pagination key
    """

    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_document_created", "document_id", "created_at"),)

    text: Mapped[str] = mapped_column(Text, nullable=False)
    is_user_message: Mapped[bool] = mapped_column(Boolean, nullable=False)
    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    document = relationship("DocumentModel", back_populates="messages")
