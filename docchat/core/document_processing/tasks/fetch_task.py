"""
Upload fetch task.

Downloads the uploaded PDF from the transport's URL over HTTP and falls
back to reading the object from the documents bucket by storage key.

Dependencies: httpx, boto3 (via S3DocumentClient)
System role: First stage of the ingestion pipeline
"""

import asyncio
import logging
from dataclasses import dataclass

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from docchat.boundary.aws.s3_client import S3DocumentClient
from docchat.core.exceptions import DocumentFetchError
from docchat.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


@dataclass(frozen=True)
class FetchedFile:
    """Downloaded bytes with their declared content type."""

    content: bytes
    content_type: str | None
    source: str

    @property
    def size(self) -> int:
        return len(self.content)


def normalize_content_type(value: str | None) -> str | None:
    if not value:
        return None
    return value.split(";", 1)[0].strip().lower() or None


def is_recognized_document_type(content_type: str | None) -> bool:
    """True for PDF types and the generic binary type; unknown types are not rejected."""
    if content_type is None:
        return True
    return "pdf" in content_type or content_type == OCTET_STREAM


class FetchTask:
    """Fetch uploaded bytes with a storage fallback."""

    def __init__(
        self,
        storage_client: S3DocumentClient,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
        user_agent: str = "Mozilla/5.0 (compatible; PDF-Processor/1.0)",
        accept: str = "application/pdf,*/*",
    ) -> None:
        """
        Initialize fetch task.

        Args:
            storage_client: Documents bucket client used as fallback
            http_client: Shared httpx client (a short-lived one is created per fetch if None)
            timeout_seconds: Timeout for the HTTP fetch
            user_agent: User-Agent header for the HTTP fetch
            accept: Accept header for the HTTP fetch
        """
        self._storage = storage_client
        self._http_client = http_client
        self._timeout = timeout_seconds
        self._headers = {"User-Agent": user_agent, "Accept": accept}

    async def fetch(self, file_key: str, file_url: str | None) -> FetchedFile:
        """
        Download an uploaded file.

        Args:
            file_key: Storage key of the upload
            file_url: Retrievable URL issued by the upload transport

        Returns:
            FetchedFile: Bytes, content type, and which source served them

        Raises:
            DocumentFetchError: Both the URL and the storage fallback failed
        """
        attempts: list[str] = []

        if file_url:
            try:
                return await self._fetch_url(file_url)
            except (httpx.HTTPError, DocumentFetchError) as e:
                attempts.append(f"url: {type(e).__name__}: {e}")
                logger.warning(
                    f"{__name__}:fetch - Direct fetch failed, trying storage fallback",
                    extra={"file_key": file_key, "url": safe_log_value(file_url), "error": str(e)},
                )

        try:
            stored = await asyncio.to_thread(self._storage.get_object, file_key)
        except (ClientError, BotoCoreError) as e:
            attempts.append(f"storage: {type(e).__name__}: {e}")
            logger.error(
                f"{__name__}:fetch - Storage fallback failed",
                extra={"file_key": file_key, "bucket": self._storage.bucket, "error": str(e)},
            )
            raise DocumentFetchError(
                f"Unable to fetch upload {file_key} from any source",
                file_key=file_key,
                attempts=attempts,
            ) from e

        logger.info(
            f"{__name__}:fetch - Downloaded {len(stored.content)} bytes from storage",
            extra={"file_key": file_key},
        )
        return FetchedFile(
            content=stored.content,
            content_type=normalize_content_type(stored.content_type),
            source="storage",
        )

    async def _fetch_url(self, url: str) -> FetchedFile:
        if self._http_client is not None:
            response = await self._http_client.get(url, headers=self._headers, follow_redirects=True)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, headers=self._headers, follow_redirects=True)

        if not response.is_success:
            raise DocumentFetchError(f"HTTP {response.status_code}: {response.reason_phrase}")

        logger.info(
            f"{__name__}:_fetch_url - Downloaded {len(response.content)} bytes",
            extra={"status_code": response.status_code},
        )
        return FetchedFile(
            content=response.content,
            content_type=normalize_content_type(response.headers.get("content-type")),
            source="url",
        )
