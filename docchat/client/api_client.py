"""
HTTP client for the DocChat API.

Wraps httpx.AsyncClient with the identity headers the API expects and
exposes the chat stream as decoded text fragments.

Dependencies: httpx, docchat.models
System role: Message transport for ChatSession and UploadWatcher
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

import httpx

from docchat.configs.client import ClientSettings
from docchat.core.exceptions import ChatTransportError, DocumentNotFoundError
from docchat.core.plans import SubscriptionPlan
from docchat.models.document import DocumentResponse, UploadAcceptedResponse
from docchat.models.message import MessagePage

logger = logging.getLogger(__name__)


class ChatApiClient:
    """Async client for uploads, documents, and streamed chat answers."""

    def __init__(
        self,
        base_url: str,
        owner_id: str,
        plan: SubscriptionPlan = SubscriptionPlan.FREE,
        timeout_seconds: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            base_url: API root, e.g. http://localhost:8082/api/v1
            owner_id: Identity sent as X-User-Id
            plan: Plan sent as X-Subscription-Plan
            timeout_seconds: Request timeout
            http_client: Pre-built client (tests pass one with a mock transport)
        """
        headers = {"X-User-Id": owner_id, "X-Subscription-Plan": plan.value}
        if http_client is None:
            http_client = httpx.AsyncClient(base_url=base_url, timeout=timeout_seconds)
        http_client.headers.update(headers)
        self._client = http_client

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        owner_id: str,
        plan: SubscriptionPlan = SubscriptionPlan.FREE,
    ) -> "ChatApiClient":
        return cls(
            base_url=settings.base_url,
            owner_id=owner_id,
            plan=plan,
            timeout_seconds=settings.timeout_seconds,
        )

    async def __aenter__(self) -> "ChatApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @asynccontextmanager
    async def stream_message(self, document_id: str | UUID, message: str) -> AsyncIterator[AsyncIterator[str]]:
        """
        Post a question and stream the answer.

        Usage:
            async with client.stream_message(doc_id, "What is this?") as fragments:
                async for fragment in fragments:
                    ...

        Args:
            document_id: Document to ask about
            message: Question text

        Yields:
            AsyncIterator[str]: Decoded text fragments in arrival order

        Raises:
            ChatTransportError: Non-2xx response
            httpx.HTTPError: Network failure
        """
        payload = {"document_id": str(document_id), "message": message}
        async with self._client.stream("POST", "/message", json=payload) as response:
            if not response.is_success:
                body = (await response.aread()).decode("utf-8", errors="replace")
                logger.warning(
                    f"{__name__}:stream_message - Request rejected",
                    extra={"status_code": response.status_code, "document_id": str(document_id)},
                )
                raise ChatTransportError(
                    f"Failed to send message: {response.status_code} {body[:200]}",
                    status_code=response.status_code,
                )
            yield response.aiter_text()

    async def list_messages(
        self,
        document_id: str | UUID,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> MessagePage:
        params: dict[str, str | int] = {}
        if cursor is not None:
            params["cursor"] = cursor
        if limit is not None:
            params["limit"] = limit
        response = await self._client.get(f"/documents/{document_id}/messages", params=params)
        self._raise_for_status(response, document_id)
        return MessagePage.model_validate(response.json())

    async def get_document_by_key(self, key: str) -> DocumentResponse:
        """
        Look up a document by storage key.

        Raises:
            DocumentNotFoundError: Not created yet (expected while ingestion starts)
            ChatTransportError: Any other non-2xx response
        """
        response = await self._client.get(f"/documents/by-key/{key}")
        self._raise_for_status(response, key)
        return DocumentResponse.model_validate(response.json())

    async def complete_upload(self, key: str, name: str, url: str) -> UploadAcceptedResponse:
        response = await self._client.post(
            "/uploads/complete",
            json={"key": key, "name": name, "url": url},
        )
        self._raise_for_status(response, key)
        return UploadAcceptedResponse.model_validate(response.json())

    @staticmethod
    def _raise_for_status(response: httpx.Response, identifier: str | UUID) -> None:
        if response.status_code == 404:
            raise DocumentNotFoundError(str(identifier))
        if not response.is_success:
            raise ChatTransportError(
                f"Request to {response.request.url.path} failed: {response.status_code}",
                status_code=response.status_code,
            )
