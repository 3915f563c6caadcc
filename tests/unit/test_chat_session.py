"""
Test suite for the ChatSession state machine.

Uses a scripted transport so stream timing, failures, and single-flight
behaviour can be driven deterministically.

System role: Verification of optimistic send, streaming, and rollback
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
import pytest

from docchat.client.chat_session import (
    BUSY_NOTICE,
    EMPTY_MESSAGE_NOTICE,
    FAILURE_NOTICE,
    ChatSession,
    ChatState,
)
from docchat.client.message_log import PLACEHOLDER_ID
from docchat.client.notifications import Notifier
from docchat.core.exceptions import ChatTransportError
from docchat.models.message import MessagePage, MessageResponse

DOCUMENT_ID = str(uuid.uuid4())


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.errors: list[str] = []

    def error(self, message: str) -> None:
        self.errors.append(message)

    def info(self, message: str) -> None:
        pass


def persisted(text: str, is_user: bool) -> MessageResponse:
    return MessageResponse(
        id=uuid.uuid4(),
        text=text,
        is_user_message=is_user,
        document_id=uuid.UUID(DOCUMENT_ID),
        created_at=datetime.now(timezone.utc),
    )


class ScriptedChatApi:
    """Stand-in for ChatApiClient with scripted stream behaviour."""

    def __init__(
        self,
        fragments: list[str] | None = None,
        reject_status: int | None = None,
        fail_after: int | None = None,
        pages: list[MessagePage] | None = None,
    ) -> None:
        self.fragments = fragments or []
        self.reject_status = reject_status
        self.fail_after = fail_after
        self.pages = list(pages or [])
        self.sent: list[str] = []
        self.list_calls: list[dict] = []
        self.release = asyncio.Event()
        self.release.set()
        self.seen_while_streaming: list[str] = []
        self.session: ChatSession | None = None

    @asynccontextmanager
    async def stream_message(self, document_id, message):
        self.sent.append(message)
        await self.release.wait()
        if self.reject_status is not None:
            raise ChatTransportError("Failed to send message", status_code=self.reject_status)

        async def fragments():
            for index, fragment in enumerate(self.fragments):
                if self.fail_after is not None and index == self.fail_after:
                    raise httpx.ReadError("connection reset")
                await asyncio.sleep(0)
                yield fragment
                if self.session is not None and self.session.messages[0].id == PLACEHOLDER_ID:
                    self.seen_while_streaming.append(self.session.messages[0].text)

        yield fragments()

    async def list_messages(self, document_id, cursor=None, limit=None):
        self.list_calls.append({"cursor": cursor, "limit": limit})
        if not self.pages:
            raise httpx.ConnectError("offline")
        return self.pages.pop(0)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


async def seeded_session(api: ScriptedChatApi, notifier: RecordingNotifier) -> ChatSession:
    history = MessagePage(messages=[persisted("earlier answer", False), persisted("earlier question", True)])
    api.pages.insert(0, history)
    session = ChatSession(DOCUMENT_ID, api, notifier, page_size=10)
    api.session = session
    await session.refresh()
    return session


class TestChatSessionSuccessPath:
    """Test suite for submit() when the answer streams to completion."""

    async def test_fragments_assemble_in_arrival_order(self, notifier: RecordingNotifier) -> None:
        # Arrange
        api = ScriptedChatApi(fragments=["Hel", "lo, ", "world"])
        session = await seeded_session(api, notifier)

        # Act
        ok = await session.submit("Say hello")

        # Assert
        assert ok is True
        assert api.seen_while_streaming == ["Hel", "Hello, ", "Hello, world"]
        assert session.state == ChatState.IDLE
        assert notifier.errors == []

    async def test_completion_reconciles_with_server_records(self, notifier: RecordingNotifier) -> None:
        # Arrange
        api = ScriptedChatApi(fragments=["Hello"])
        session = await seeded_session(api, notifier)
        refreshed = MessagePage(messages=[persisted("Hello", False), persisted("Say hello", True)])
        api.pages.append(refreshed)

        # Act
        await session.submit("Say hello")

        # Assert
        assert [m.text for m in session.messages] == ["Hello", "Say hello"]
        assert not any(m.is_pending for m in session.messages)

    async def test_refresh_failure_keeps_streamed_answer(self, notifier: RecordingNotifier) -> None:
        api = ScriptedChatApi(fragments=["partial ", "answer"])
        session = await seeded_session(api, notifier)

        ok = await session.submit("question")

        assert ok is True
        assert session.messages[0].id == PLACEHOLDER_ID
        assert session.messages[0].text == "partial answer"
        assert notifier.errors == []

    async def test_submit_uses_and_clears_input_text(self, notifier: RecordingNotifier) -> None:
        api = ScriptedChatApi(fragments=["ok"])
        session = await seeded_session(api, notifier)
        session.set_input("from the input box")

        await session.submit()

        assert api.sent == ["from the input box"]
        assert session.input_text == ""


class TestChatSessionGuards:
    """Test suite for rejected submissions."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_question_is_rejected(self, notifier: RecordingNotifier, text: str) -> None:
        api = ScriptedChatApi()
        session = ChatSession(DOCUMENT_ID, api, notifier)

        ok = await session.submit(text)

        assert ok is False
        assert api.sent == []
        assert notifier.errors == [EMPTY_MESSAGE_NOTICE]
        assert session.messages == []

    async def test_second_submit_while_sending_is_rejected(self, notifier: RecordingNotifier) -> None:
        # Arrange
        api = ScriptedChatApi(fragments=["done"])
        session = await seeded_session(api, notifier)
        api.release.clear()
        first = asyncio.create_task(session.submit("first question"))
        while session.state != ChatState.SENDING:
            await asyncio.sleep(0)
        in_flight_view = [m.text for m in session.messages]

        # Act
        ok = await session.submit("second question")

        # Assert
        assert ok is False
        assert notifier.errors == [BUSY_NOTICE]
        assert [m.text for m in session.messages] == in_flight_view
        assert api.sent == ["first question"]

        api.release.set()
        assert await first is True
        assert session.state == ChatState.IDLE


class TestChatSessionRollback:
    """Test suite for failure handling."""

    async def test_rejected_request_restores_snapshot_and_input(self, notifier: RecordingNotifier) -> None:
        # Arrange
        api = ScriptedChatApi(reject_status=500)
        session = await seeded_session(api, notifier)
        before = [(m.id, m.text) for m in session.messages]

        # Act
        ok = await session.submit("doomed question")

        # Assert
        assert ok is False
        assert [(m.id, m.text) for m in session.messages] == before
        assert session.input_text == "doomed question"
        assert session.state == ChatState.IDLE
        assert notifier.errors == [FAILURE_NOTICE]

    async def test_stream_error_midway_rolls_back(self, notifier: RecordingNotifier) -> None:
        api = ScriptedChatApi(fragments=["one", "two", "three"], fail_after=2)
        session = await seeded_session(api, notifier)
        before = [(m.id, m.text) for m in session.messages]

        ok = await session.submit("question")

        assert ok is False
        assert [(m.id, m.text) for m in session.messages] == before
        assert session.input_text == "question"
        assert session.state == ChatState.IDLE

    async def test_cancellation_rolls_back_and_propagates(self, notifier: RecordingNotifier) -> None:
        api = ScriptedChatApi(fragments=["x"])
        session = await seeded_session(api, notifier)
        before = [(m.id, m.text) for m in session.messages]
        api.release.clear()
        task = asyncio.create_task(session.submit("question"))
        while session.state != ChatState.SENDING:
            await asyncio.sleep(0)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert [(m.id, m.text) for m in session.messages] == before
        assert session.input_text == "question"
        assert session.state == ChatState.IDLE


class TestChatSessionHistory:
    """Test suite for load_more() paging."""

    async def test_load_more_uses_cursor_from_previous_page(self, notifier: RecordingNotifier) -> None:
        # Arrange
        newest = [persisted("n2", False), persisted("n1", True)]
        older = [persisted("o2", False), persisted("o1", True)]
        api = ScriptedChatApi(
            pages=[
                MessagePage(messages=newest, next_cursor=newest[-1].id),
                MessagePage(messages=older, next_cursor=None),
            ]
        )
        session = ChatSession(DOCUMENT_ID, api, notifier, page_size=2)
        await session.refresh()

        # Act
        loaded = await session.load_more()

        # Assert
        assert loaded is True
        assert api.list_calls[1] == {"cursor": str(newest[-1].id), "limit": 2}
        assert [m.text for m in session.messages] == ["n2", "n1", "o2", "o1"]
        assert session.has_more is False
        assert await session.load_more() is False
