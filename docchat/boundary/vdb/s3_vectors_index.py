"""
Amazon S3 Vectors index adapter.

Partitions are expressed as the filterable `document_id` metadata key,
which is applied to every query. Vector keys are prefixed with the
partition name so chunk IDs from different documents never collide.

Metadata keys (matching the S3 Vectors index definition):
- Filterable: document_id, page, chunk_id, file_name
- Non-filterable: text_content

Dependencies: boto3, tenacity
System role: Production vector index
"""

import asyncio
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from docchat.boundary.vdb.base import VectorIndex
from docchat.boundary.vdb.vector_schemas import (
    ChunkProvenance,
    IndexedChunk,
    IndexStats,
    VectorSearchResult,
)
from docchat.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)

PARTITION_KEY = "document_id"
TEXT_KEY = "text_content"
MAX_BATCH_SIZE = 500

_provider_retry = retry(
    retry=retry_if_exception_type((ClientError, BotoCoreError)),
    stop=stop_after_attempt(5),
    wait=wait_exponential_jitter(initial=1, max=30, jitter=5),
    before_sleep=lambda retry_state: logger.warning(
        f"{__name__}:{retry_state.fn.__name__} - Retry {retry_state.attempt_number}/5 after "
        f"{type(retry_state.outcome.exception()).__name__}"
    ),
    reraise=True,
)


def vector_key(namespace: str, chunk_id: str) -> str:
    return f"{namespace}#{chunk_id}"


def distance_to_score(distance: float, metric: str | None) -> float:
    """Convert an S3 Vectors distance into a higher-is-better score."""
    if (metric or "cosine").lower() == "cosine":
        return 1.0 - distance
    return 1.0 / (1.0 + distance)


class S3VectorsIndex(VectorIndex):
    """VectorIndex backed by an S3 Vectors bucket index."""

    def __init__(
        self,
        vectors_bucket: str,
        index_name: str,
        dimension: int,
        region: str = "us-west-2",
        batch_size: int = MAX_BATCH_SIZE,
        client: Any | None = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            vectors_bucket: S3 Vectors bucket name
            index_name: Index name within the bucket
            dimension: Pinned embedding dimension of the index
            region: AWS region for S3 Vectors
            batch_size: Vectors per put/delete request (capped at 500)
            client: Pre-built boto3 s3vectors client (created if None)
        """
        self._vectors_bucket = vectors_bucket
        self._index_name = index_name
        self._dimension = dimension
        self._batch_size = min(batch_size, MAX_BATCH_SIZE)
        self._client = client or boto3.client("s3vectors", region_name=region)

    @property
    def dimension(self) -> int:
        return self._dimension

    @_provider_retry
    def _put_vectors(self, vectors: list[dict]) -> None:
        self._client.put_vectors(
            vectorBucketName=self._vectors_bucket,
            indexName=self._index_name,
            vectors=vectors,
        )

    @_provider_retry
    def _query_vectors(self, vector: list[float], top_k: int, namespace: str) -> dict:
        return self._client.query_vectors(
            vectorBucketName=self._vectors_bucket,
            indexName=self._index_name,
            queryVector={"float32": vector},
            topK=top_k,
            filter={PARTITION_KEY: {"$eq": namespace}},
            returnMetadata=True,
            returnDistance=True,
        )

    @_provider_retry
    def _delete_vectors(self, keys: list[str]) -> None:
        self._client.delete_vectors(
            vectorBucketName=self._vectors_bucket,
            indexName=self._index_name,
            keys=keys,
        )

    def _list_partition_keys(self, namespace: str) -> list[str]:
        keys: list[str] = []
        request: dict[str, Any] = {
            "vectorBucketName": self._vectors_bucket,
            "indexName": self._index_name,
            "returnMetadata": True,
        }
        while True:
            response = self._client.list_vectors(**request)
            for item in response.get("vectors", []):
                metadata = item.get("metadata") or {}
                if metadata.get(PARTITION_KEY) == namespace:
                    keys.append(item["key"])
            next_token = response.get("nextToken")
            if not next_token:
                return keys
            request["nextToken"] = next_token

    def _to_record(self, namespace: str, item: IndexedChunk) -> dict:
        return {
            "key": vector_key(namespace, item.id),
            "data": {"float32": item.vector},
            "metadata": {
                PARTITION_KEY: namespace,
                "chunk_id": item.id,
                "page": item.provenance.page,
                "file_name": item.provenance.file_name or "",
                TEXT_KEY: item.text,
            },
        }

    async def upsert(self, namespace: str, items: list[IndexedChunk]) -> int:
        for item in items:
            self.check_dimension(item.vector, "upsert")

        records = [self._to_record(namespace, item) for item in items]
        try:
            for start in range(0, len(records), self._batch_size):
                await asyncio.to_thread(self._put_vectors, records[start:start + self._batch_size])
        except (ClientError, BotoCoreError) as e:
            raise VectorStoreError(
                f"Failed to upsert vectors: {e}",
                operation="upsert",
                details={"namespace": namespace, "written_before_failure": start},
            ) from e

        logger.info(
            f"{__name__}:upsert - Wrote {len(records)} vectors",
            extra={"namespace": namespace, "index": self._index_name},
        )
        return len(records)

    async def query(
        self,
        namespace: str,
        vector: list[float],
        top_k: int,
    ) -> list[VectorSearchResult]:
        self.check_dimension(vector, "query")
        try:
            response = await asyncio.to_thread(self._query_vectors, vector, top_k, namespace)
        except (ClientError, BotoCoreError) as e:
            raise VectorStoreError(
                f"Failed to query vectors: {e}",
                operation="query",
                details={"namespace": namespace},
            ) from e

        metric = response.get("distanceMetric")
        results = []
        for item in response.get("vectors", []):
            metadata = item.get("metadata") or {}
            # Server-side filter scopes the query; re-checked here
            if metadata.get(PARTITION_KEY) != namespace:
                continue
            results.append(
                VectorSearchResult(
                    chunk_id=str(metadata.get("chunk_id", item.get("key", ""))),
                    text=str(metadata.get(TEXT_KEY, "")),
                    provenance=ChunkProvenance(
                        document_id=namespace,
                        page=int(metadata.get("page", 0)),
                        file_name=metadata.get("file_name") or None,
                    ),
                    score=distance_to_score(float(item.get("distance", 0.0)), metric),
                )
            )

        results.sort(key=lambda r: r.score, reverse=True)
        logger.info(
            f"{__name__}:query - Found {len(results)} results",
            extra={"namespace": namespace, "top_k": top_k},
        )
        return results[:top_k]

    async def delete_namespace(self, namespace: str) -> int:
        try:
            keys = await asyncio.to_thread(self._list_partition_keys, namespace)
            for start in range(0, len(keys), self._batch_size):
                await asyncio.to_thread(self._delete_vectors, keys[start:start + self._batch_size])
        except (ClientError, BotoCoreError) as e:
            raise VectorStoreError(
                f"Failed to delete partition: {e}",
                operation="delete",
                details={"namespace": namespace},
            ) from e

        logger.info(
            f"{__name__}:delete_namespace - Removed {len(keys)} vectors",
            extra={"namespace": namespace},
        )
        return len(keys)

    async def describe(self) -> IndexStats:
        try:
            response = await asyncio.to_thread(
                self._client.get_index,
                vectorBucketName=self._vectors_bucket,
                indexName=self._index_name,
            )
        except (ClientError, BotoCoreError) as e:
            raise VectorStoreError(f"Failed to describe index: {e}", operation="describe") from e

        index = response.get("index", {})
        return IndexStats(
            provider="s3vectors",
            dimension=int(index.get("dimension", self._dimension)),
            details={
                "bucket": self._vectors_bucket,
                "index": self._index_name,
                "distance_metric": index.get("distanceMetric"),
                "configured_dimension": self._dimension,
            },
        )
