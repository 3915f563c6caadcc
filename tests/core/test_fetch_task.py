"""
Test suite for FetchTask.

HTTP is served by httpx.MockTransport; the storage fallback is a
MagicMock S3DocumentClient.

System role: Verification of upload download with fallback
"""

from unittest.mock import MagicMock

import httpx
import pytest
from botocore.exceptions import ClientError

from docchat.boundary.aws.s3_client import StoredObject
from docchat.core.document_processing.tasks.fetch_task import (
    FetchTask,
    is_recognized_document_type,
    normalize_content_type,
)
from docchat.core.exceptions import DocumentFetchError

FILE_URL = "https://files.example.com/f/abc123"
FILE_KEY = "abc123"


def http_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def storage() -> MagicMock:
    client = MagicMock()
    client.bucket = "docchat-documents"
    client.get_object.return_value = StoredObject(content=b"%PDF-from-s3", content_type="application/pdf")
    return client


class TestFetchTaskPrimaryPath:
    """Test suite for the direct URL fetch."""

    async def test_downloads_from_url_with_headers(self, storage: MagicMock) -> None:
        # Arrange
        seen_headers = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen_headers.update(request.headers)
            return httpx.Response(200, content=b"%PDF-1.4", headers={"content-type": "application/pdf; charset=binary"})

        task = FetchTask(storage, http_client=http_client(handler), user_agent="docchat-test/1.0")

        # Act
        fetched = await task.fetch(FILE_KEY, FILE_URL)

        # Assert
        assert fetched.content == b"%PDF-1.4"
        assert fetched.content_type == "application/pdf"
        assert fetched.source == "url"
        assert fetched.size == 8
        assert seen_headers["user-agent"] == "docchat-test/1.0"
        assert "application/pdf" in seen_headers["accept"]
        storage.get_object.assert_not_called()


class TestFetchTaskFallback:
    """Test suite for the storage fallback."""

    async def test_non_2xx_falls_back_to_storage(self, storage: MagicMock) -> None:
        # Arrange
        task = FetchTask(storage, http_client=http_client(lambda request: httpx.Response(403)))

        # Act
        fetched = await task.fetch(FILE_KEY, FILE_URL)

        # Assert
        assert fetched.source == "storage"
        assert fetched.content == b"%PDF-from-s3"
        storage.get_object.assert_called_once_with(FILE_KEY)

    async def test_network_error_falls_back_to_storage(self, storage: MagicMock) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        task = FetchTask(storage, http_client=http_client(handler))

        fetched = await task.fetch(FILE_KEY, FILE_URL)

        assert fetched.source == "storage"

    async def test_missing_url_goes_straight_to_storage(self, storage: MagicMock) -> None:
        task = FetchTask(storage, http_client=http_client(lambda request: httpx.Response(500)))

        fetched = await task.fetch(FILE_KEY, None)

        assert fetched.source == "storage"

    async def test_all_sources_failing_raises_fetch_error(self, storage: MagicMock) -> None:
        # Arrange
        storage.get_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "missing"}},
            "GetObject",
        )
        task = FetchTask(storage, http_client=http_client(lambda request: httpx.Response(502)))

        # Act
        with pytest.raises(DocumentFetchError) as exc_info:
            await task.fetch(FILE_KEY, FILE_URL)

        # Assert
        assert FILE_KEY in str(exc_info.value)
        assert len(exc_info.value.details["attempts"]) == 2


class TestContentTypeHelpers:
    """Test suite for content type helpers."""

    def test_normalize_strips_parameters(self) -> None:
        assert normalize_content_type("Application/PDF; charset=binary") == "application/pdf"
        assert normalize_content_type("") is None
        assert normalize_content_type(None) is None

    @pytest.mark.parametrize(
        "content_type,expected",
        [
            ("application/pdf", True),
            ("application/x-pdf", True),
            ("application/octet-stream", True),
            (None, True),
            ("text/html", False),
        ],
    )
    def test_recognized_types(self, content_type, expected) -> None:
        assert is_recognized_document_type(content_type) is expected
