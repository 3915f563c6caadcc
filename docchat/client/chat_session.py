"""
Streaming chat session.

Client-side state machine for one document view:

    IDLE -> SENDING -> STREAMING_RESPONSE -> IDLE   (success)
    SENDING | STREAMING_RESPONSE -> IDLE            (rollback on failure)

A submission optimistically shows the user's message, streams the answer
into a placeholder message, then reconciles with the server's records.
Any failure restores the pre-submission messages and the unsent input.

Dependencies: docchat.client.api_client, docchat.client.message_log
System role: Chat interaction controller
"""

import asyncio
import enum
import logging
from uuid import UUID

from docchat.client.api_client import ChatApiClient
from docchat.client.message_log import ChatMessage, MessageLog
from docchat.client.notifications import LoggingNotifier, Notifier
from docchat.models.message import MessagePage

logger = logging.getLogger(__name__)

EMPTY_MESSAGE_NOTICE = "Please enter a message"
BUSY_NOTICE = "Please wait for the current message to complete"
FAILURE_NOTICE = "Something went wrong. Please try again."


class ChatState(str, enum.Enum):
    IDLE = "idle"
    SENDING = "sending"
    STREAMING_RESPONSE = "streaming_response"


class ChatSession:
    """Single-flight chat controller for one document."""

    def __init__(
        self,
        document_id: str | UUID,
        api_client: ChatApiClient,
        notifier: Notifier | None = None,
        page_size: int = 10,
        message_log: MessageLog | None = None,
    ) -> None:
        """
        Initialize session.

        Args:
            document_id: Document this view chats about
            api_client: Transport for questions and history
            notifier: Sink for user notices (logs if None)
            page_size: Messages per history page
            message_log: Local projection (a fresh one if None)
        """
        self.document_id = str(document_id)
        self._api = api_client
        self._notifier = notifier or LoggingNotifier()
        self._page_size = page_size
        self._log = message_log or MessageLog()
        self._state = ChatState.IDLE
        self._input_text = ""

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state != ChatState.IDLE

    @property
    def input_text(self) -> str:
        return self._input_text

    def set_input(self, text: str) -> None:
        self._input_text = text

    @property
    def messages(self) -> list[ChatMessage]:
        """Messages newest first, including speculative entries."""
        return self._log.messages

    @property
    def has_more(self) -> bool:
        return self._log.next_cursor is not None

    async def submit(self, question: str | None = None) -> bool:
        """
        Send a question and stream its answer into the message list.

        Args:
            question: Text to send; the current input text if None

        Returns:
            bool: True if the answer streamed to completion
        """
        text = self._input_text if question is None else question

        if not text.strip():
            self._notifier.error(EMPTY_MESSAGE_NOTICE)
            return False
        if self.is_busy:
            self._notifier.error(BUSY_NOTICE)
            return False

        snapshot = self._log.snapshot()
        self._log.add_pending_user(text)
        self._input_text = ""
        self._state = ChatState.SENDING

        try:
            await self._send(text)
        except asyncio.CancelledError:
            self._rollback(snapshot, text)
            raise
        except Exception as e:
            logger.warning(
                f"{__name__}:submit - Send failed, rolling back: {type(e).__name__}: {e}",
                extra={"document_id": self.document_id},
            )
            self._rollback(snapshot, text)
            self._notifier.error(FAILURE_NOTICE)
            return False

        self._state = ChatState.IDLE
        await self._refresh_after_stream()
        return True

    async def _send(self, text: str) -> None:
        async with self._api.stream_message(self.document_id, text) as fragments:
            self._state = ChatState.STREAMING_RESPONSE
            async for fragment in fragments:
                if fragment:
                    self._log.append_to_placeholder(fragment)

    def _rollback(self, snapshot, text: str) -> None:
        self._log.restore(snapshot)
        self._input_text = text
        self._state = ChatState.IDLE

    async def _refresh_after_stream(self) -> None:
        # The answer already streamed; a failed refresh keeps the placeholder
        try:
            await self.refresh()
        except Exception as e:
            logger.warning(
                f"{__name__}:_refresh_after_stream - Refresh failed: {type(e).__name__}: {e}",
                extra={"document_id": self.document_id},
            )

    async def refresh(self) -> None:
        """Replace the local view with the newest page from the server."""
        page = await self._api.list_messages(self.document_id, limit=self._page_size)
        self._log.reconcile(self._to_chat_messages(page), self._cursor_of(page))

    async def load_more(self) -> bool:
        """
        Load the next older page of history.

        Returns:
            bool: False if there was nothing older to load
        """
        cursor = self._log.next_cursor
        if cursor is None:
            return False
        page = await self._api.list_messages(self.document_id, cursor=cursor, limit=self._page_size)
        self._log.extend_older(self._to_chat_messages(page), self._cursor_of(page))
        return True

    @staticmethod
    def _to_chat_messages(page: MessagePage) -> list[ChatMessage]:
        return [ChatMessage.from_response(message) for message in page.messages]

    @staticmethod
    def _cursor_of(page: MessagePage) -> str | None:
        return str(page.next_cursor) if page.next_cursor is not None else None
