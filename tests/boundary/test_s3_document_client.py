"""
Test suite for S3DocumentClient reads.

System role: Verification of storage fallback reads
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from docchat.boundary.aws.s3_client import S3DocumentClient


class TestS3DocumentClientGetObject:
    def test_get_object_returns_body_and_content_type(self) -> None:
        # Arrange
        body = MagicMock()
        body.read.return_value = b"%PDF-1.4"
        s3 = MagicMock()
        s3.get_object.return_value = {"Body": body, "ContentType": "application/pdf"}
        client = S3DocumentClient(bucket="docs", client=s3)

        # Act
        stored = client.get_object("uploads/a.pdf")

        # Assert
        s3.get_object.assert_called_once_with(Bucket="docs", Key="uploads/a.pdf")
        assert stored.content == b"%PDF-1.4"
        assert stored.content_type == "application/pdf"
        body.close.assert_called_once()

    def test_get_object_propagates_client_error(self) -> None:
        s3 = MagicMock()
        s3.get_object.side_effect = ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject")
        client = S3DocumentClient(bucket="docs", client=s3)

        with pytest.raises(ClientError):
            client.get_object("uploads/missing.pdf")
