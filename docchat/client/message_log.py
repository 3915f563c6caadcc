"""
Local message projection for one document's chat.

Ordered newest first, like the server's message pages. Holds speculative
entries (a pending user message and the streaming "ai-response"
placeholder) until reconcile() swaps in the persisted records.

Dependencies: pydantic
System role: Optimistic client-side message cache
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from docchat.models.message import MessageResponse

PLACEHOLDER_ID = "ai-response"
PENDING_PREFIX = "pending-"


class ChatMessage(BaseModel):
    """Message as shown in the chat view."""

    id: str = Field(description="Server id, pending-<uuid>, or ai-response")
    text: str
    is_user_message: bool
    created_at: datetime

    @property
    def is_pending(self) -> bool:
        return self.id.startswith(PENDING_PREFIX) or self.id == PLACEHOLDER_ID

    @classmethod
    def from_response(cls, message: MessageResponse) -> "ChatMessage":
        return cls(
            id=str(message.id),
            text=message.text,
            is_user_message=message.is_user_message,
            created_at=message.created_at,
        )


class MessageLog:
    """Ordered, newest-first list of chat messages with rollback support."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []
        self._next_cursor: str | None = None

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    @property
    def next_cursor(self) -> str | None:
        return self._next_cursor

    @property
    def placeholder(self) -> ChatMessage | None:
        for message in self._messages:
            if message.id == PLACEHOLDER_ID:
                return message
        return None

    def __len__(self) -> int:
        return len(self._messages)

    def snapshot(self) -> tuple[list[ChatMessage], str | None]:
        """Deep copy of the current state, for restore()."""
        return [message.model_copy(deep=True) for message in self._messages], self._next_cursor

    def restore(self, snapshot: tuple[list[ChatMessage], str | None]) -> None:
        messages, next_cursor = snapshot
        self._messages = [message.model_copy(deep=True) for message in messages]
        self._next_cursor = next_cursor

    def add_pending_user(self, text: str) -> ChatMessage:
        """Show a user message before the server has stored it."""
        message = ChatMessage(
            id=f"{PENDING_PREFIX}{uuid.uuid4()}",
            text=text,
            is_user_message=True,
            created_at=datetime.now(timezone.utc),
        )
        self._messages.insert(0, message)
        return message

    def append_to_placeholder(self, fragment: str) -> ChatMessage:
        """
        Extend the streaming answer with one fragment.

        Creates the placeholder on the first fragment; later fragments are
        appended in call order.
        """
        placeholder = self.placeholder
        if placeholder is None:
            placeholder = ChatMessage(
                id=PLACEHOLDER_ID,
                text="",
                is_user_message=False,
                created_at=datetime.now(timezone.utc),
            )
            self._messages.insert(0, placeholder)
        placeholder.text += fragment
        return placeholder

    def reconcile(self, messages: list[ChatMessage], next_cursor: str | None) -> None:
        """Replace the projection with authoritative records, newest first."""
        self._messages = list(messages)
        self._next_cursor = next_cursor

    def extend_older(self, messages: list[ChatMessage], next_cursor: str | None) -> None:
        """Append an older page below the loaded messages."""
        known = {message.id for message in self._messages}
        self._messages.extend(message for message in messages if message.id not in known)
        self._next_cursor = next_cursor
