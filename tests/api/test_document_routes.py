"""
Test suite for document API endpoints.

Tests /api/v1/documents routes with FastAPI TestClient and a mocked
DocumentService.

System role: Verification of document HTTP contract
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from docchat.api.deps.dependencies import get_document_service
from docchat.api.main import create_app
from docchat.boundary.db.models.document_model import FailureReason, UploadStatus
from docchat.core.exceptions import DocumentNotFoundError, VectorStoreError

OWNER_HEADERS = {"X-User-Id": "user_test_123"}


def document_row(**overrides) -> SimpleNamespace:
    now = datetime.now(timezone.utc)
    fields = {
        "id": uuid.uuid4(),
        "key": "uploads/abc.pdf",
        "name": "notes.pdf",
        "url": "https://files.example.com/f/abc",
        "status": UploadStatus.SUCCESS,
        "page_count": 3,
        "failure_reason": None,
        "error_message": None,
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def message_row(document_id: uuid.UUID, text: str, is_user_message: bool) -> SimpleNamespace:
    return SimpleNamespace(
        id=uuid.uuid4(),
        text=text,
        is_user_message=is_user_message,
        document_id=document_id,
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def mock_document_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(mock_document_service: AsyncMock) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_document_service] = lambda: mock_document_service
    return TestClient(app)


class TestDocumentReads:
    """Test suite for document lookups."""

    def test_list_documents(self, client: TestClient, mock_document_service: AsyncMock) -> None:
        # Arrange
        mock_document_service.list_for_owner.return_value = [document_row(), document_row(key="uploads/b.pdf")]

        # Act
        response = client.get("/api/v1/documents", headers=OWNER_HEADERS)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["documents"][0]["status"] == "SUCCESS"
        mock_document_service.list_for_owner.assert_awaited_once_with("user_test_123")

    def test_get_by_key_accepts_slashes(self, client: TestClient, mock_document_service: AsyncMock) -> None:
        # Arrange
        row = document_row(
            status=UploadStatus.FAILED,
            failure_reason=FailureReason.PAGE_LIMIT_EXCEEDED,
            error_message="6 pages exceeds the free plan limit of 5 pages",
        )
        mock_document_service.get_by_key_for_owner.return_value = row

        # Act
        response = client.get("/api/v1/documents/by-key/uploads/abc.pdf", headers=OWNER_HEADERS)

        # Assert
        assert response.status_code == 200
        assert response.json()["failure_reason"] == "PAGE_LIMIT_EXCEEDED"
        mock_document_service.get_by_key_for_owner.assert_awaited_once_with("uploads/abc.pdf", "user_test_123")

    def test_get_by_key_not_yet_created_is_404(self, client: TestClient, mock_document_service: AsyncMock) -> None:
        mock_document_service.get_by_key_for_owner.side_effect = DocumentNotFoundError("uploads/abc.pdf")

        response = client.get("/api/v1/documents/by-key/uploads/abc.pdf", headers=OWNER_HEADERS)

        assert response.status_code == 404
        assert response.json()["detail"] == "Document not found"

    def test_get_document(self, client: TestClient, mock_document_service: AsyncMock) -> None:
        row = document_row()
        mock_document_service.get_for_owner.return_value = row

        response = client.get(f"/api/v1/documents/{row.id}", headers=OWNER_HEADERS)

        assert response.status_code == 200
        assert response.json()["id"] == str(row.id)

    def test_get_document_without_user_is_401(self, client: TestClient) -> None:
        response = client.get(f"/api/v1/documents/{uuid.uuid4()}")

        assert response.status_code == 401


class TestDocumentDelete:
    """Test suite for DELETE /documents/{id}."""

    def test_delete_returns_204(self, client: TestClient, mock_document_service: AsyncMock) -> None:
        document_id = uuid.uuid4()
        mock_document_service.delete.return_value = None

        response = client.delete(f"/api/v1/documents/{document_id}", headers=OWNER_HEADERS)

        assert response.status_code == 204
        mock_document_service.delete.assert_awaited_once_with(document_id, "user_test_123")

    def test_delete_unknown_document_is_404(self, client: TestClient, mock_document_service: AsyncMock) -> None:
        mock_document_service.delete.side_effect = DocumentNotFoundError("x")

        response = client.delete(f"/api/v1/documents/{uuid.uuid4()}", headers=OWNER_HEADERS)

        assert response.status_code == 404

    def test_delete_index_failure_is_502(self, client: TestClient, mock_document_service: AsyncMock) -> None:
        mock_document_service.delete.side_effect = VectorStoreError("unreachable", operation="delete")

        response = client.delete(f"/api/v1/documents/{uuid.uuid4()}", headers=OWNER_HEADERS)

        assert response.status_code == 502


class TestDocumentMessages:
    """Test suite for GET /documents/{id}/messages."""

    def test_messages_page_with_cursor(self, client: TestClient, mock_document_service: AsyncMock) -> None:
        # Arrange
        document_id = uuid.uuid4()
        rows = [message_row(document_id, "answer", False), message_row(document_id, "question", True)]
        mock_document_service.list_messages.return_value = (rows, rows[-1].id)
        cursor = uuid.uuid4()

        # Act
        response = client.get(
            f"/api/v1/documents/{document_id}/messages",
            params={"cursor": str(cursor), "limit": 2},
            headers=OWNER_HEADERS,
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert [m["text"] for m in data["messages"]] == ["answer", "question"]
        assert data["next_cursor"] == str(rows[-1].id)
        mock_document_service.list_messages.assert_awaited_once_with(
            document_id,
            "user_test_123",
            limit=2,
            cursor=cursor,
        )

    def test_default_page_size_is_ten(self, client: TestClient, mock_document_service: AsyncMock) -> None:
        mock_document_service.list_messages.return_value = ([], None)

        client.get(f"/api/v1/documents/{uuid.uuid4()}/messages", headers=OWNER_HEADERS)

        assert mock_document_service.list_messages.call_args.kwargs["limit"] == 10

    def test_limit_out_of_range_is_422(self, client: TestClient) -> None:
        response = client.get(
            f"/api/v1/documents/{uuid.uuid4()}/messages",
            params={"limit": 0},
            headers=OWNER_HEADERS,
        )

        assert response.status_code == 422
