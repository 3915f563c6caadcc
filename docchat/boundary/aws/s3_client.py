"""
S3 client for the uploaded documents bucket.

Reads uploaded PDFs directly by storage key. Used as the fallback path
when the upload transport's URL cannot be fetched.

Dependencies: boto3
System role: Direct object storage access for ingestion
"""

import logging
from dataclasses import dataclass
from typing import Any

import boto3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredObject:
    """Object body plus the content type S3 recorded for it."""

    content: bytes
    content_type: str | None


class S3DocumentClient:
    """S3 client for document bucket reads."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-west-2",
        client: Any | None = None,
    ) -> None:
        """
        Initialize S3 client for document bucket.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            client: Pre-built boto3 S3 client (created if None)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or boto3.client("s3", region_name=region)

    @property
    def bucket(self) -> str:
        return self._bucket

    def get_object(self, key: str) -> StoredObject:
        """
        Read an object body by key.

        Args:
            key: S3 object key (the upload storage key)

        Returns:
            StoredObject: Body bytes and content type

        Raises:
            ClientError: If the object is missing or unreadable
        """
        response = self._s3_client.get_object(Bucket=self._bucket, Key=key)
        body = response["Body"]
        try:
            content = body.read()
        finally:
            body.close()

        logger.info(
            f"{__name__}:get_object - Read {len(content)} bytes",
            extra={"bucket": self._bucket, "key": key},
        )
        return StoredObject(content=content, content_type=response.get("ContentType"))

