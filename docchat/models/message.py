"""
Chat message schemas.

Dependencies: pydantic
System role: Message API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Question about one document."""

    document_id: uuid.UUID = Field(description="Document to ask about")
    message: str = Field(min_length=1, description="User question")


class MessageResponse(BaseModel):
    """Persisted chat message."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    text: str
    is_user_message: bool
    document_id: uuid.UUID
    created_at: datetime


class MessagePage(BaseModel):
    """One page of chat history, newest first."""

    messages: list[MessageResponse]
    next_cursor: uuid.UUID | None = Field(
        default=None,
        description="Pass back as ?cursor= to load older messages",
    )
