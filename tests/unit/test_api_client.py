"""
Test suite for ChatApiClient over an httpx MockTransport.

System role: Verification of the client-side HTTP contract
"""

import json
import uuid
from datetime import datetime, timezone

import httpx
import pytest

from docchat.client.api_client import ChatApiClient
from docchat.core.exceptions import ChatTransportError, DocumentNotFoundError
from docchat.core.plans import SubscriptionPlan

BASE_URL = "http://testserver/api/v1"


def make_client(handler, plan: SubscriptionPlan = SubscriptionPlan.FREE) -> ChatApiClient:
    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return ChatApiClient(BASE_URL, owner_id="user_test_123", plan=plan, http_client=http_client)


def document_payload(key: str) -> dict:
    now = datetime.now(timezone.utc).isoformat()
    return {
        "id": str(uuid.uuid4()),
        "key": key,
        "name": "notes.pdf",
        "url": "https://files.example.com/f/abc",
        "status": "PROCESSING",
        "page_count": None,
        "failure_reason": None,
        "error_message": None,
        "created_at": now,
        "updated_at": now,
    }


class TestStreamMessage:
    """Test suite for ChatApiClient.stream_message()."""

    async def test_streams_text_and_sends_identity_headers(self) -> None:
        # Arrange
        seen: list[httpx.Request] = []
        document_id = uuid.uuid4()

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="Hello from the document", headers={"content-type": "text/plain"})

        client = make_client(handler, plan=SubscriptionPlan.PRO)

        # Act
        async with client.stream_message(document_id, "hi") as fragments:
            text = "".join([fragment async for fragment in fragments])
        await client.aclose()

        # Assert
        assert text == "Hello from the document"
        request = seen[0]
        assert request.url.path == "/api/v1/message"
        assert request.headers["X-User-Id"] == "user_test_123"
        assert request.headers["X-Subscription-Plan"] == "pro"
        assert json.loads(request.content) == {"document_id": str(document_id), "message": "hi"}

    async def test_rejected_request_raises_transport_error(self) -> None:
        client = make_client(lambda request: httpx.Response(404, text="File not found"))

        with pytest.raises(ChatTransportError) as exc_info:
            async with client.stream_message(uuid.uuid4(), "hi"):
                pass

        assert exc_info.value.status_code == 404
        assert "File not found" in exc_info.value.message


class TestDocumentCalls:
    """Test suite for JSON endpoints."""

    async def test_get_document_by_key_not_found(self) -> None:
        client = make_client(lambda request: httpx.Response(404, json={"detail": "Document not found"}))

        with pytest.raises(DocumentNotFoundError):
            await client.get_document_by_key("uploads/abc.pdf")

    async def test_get_document_by_key_returns_document(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json=document_payload("uploads/abc.pdf")))

        document = await client.get_document_by_key("uploads/abc.pdf")

        assert document.key == "uploads/abc.pdf"
        assert document.status.value == "PROCESSING"

    async def test_list_messages_passes_cursor_and_limit(self) -> None:
        # Arrange
        seen: list[httpx.Request] = []
        cursor = str(uuid.uuid4())

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"messages": [], "next_cursor": None})

        client = make_client(handler)

        # Act
        page = await client.list_messages("doc-1", cursor=cursor, limit=10)

        # Assert
        assert page.messages == []
        assert seen[0].url.params["cursor"] == cursor
        assert seen[0].url.params["limit"] == "10"

    async def test_server_error_raises_transport_error(self) -> None:
        client = make_client(lambda request: httpx.Response(500, json={"error": "Internal server error"}))

        with pytest.raises(ChatTransportError) as exc_info:
            await client.list_messages("doc-1")

        assert exc_info.value.status_code == 500

    async def test_complete_upload(self) -> None:
        client = make_client(lambda request: httpx.Response(202, json={"key": "uploads/abc.pdf", "status": "accepted"}))

        accepted = await client.complete_upload("uploads/abc.pdf", "notes.pdf", "https://files.example.com/f/abc")

        assert accepted.key == "uploads/abc.pdf"
