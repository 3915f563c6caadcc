"""
Embedding and indexing task.

Embeds page chunks and writes them to the document's partition. A failed
write removes whatever part of the partition was written so it is never
half-populated.

Dependencies: docchat.boundary.vdb
System role: Final stage of the ingestion pipeline
"""

import logging

from docchat.boundary.vdb.base import VectorIndex
from docchat.boundary.vdb.embedding_provider import EmbeddingProvider
from docchat.boundary.vdb.vector_schemas import ChunkProvenance, IndexedChunk
from docchat.core.document_processing.models import Chunk
from docchat.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)


class IndexingTask:
    """Embed chunks and upsert them into a per-document partition."""

    def __init__(self, embedding_provider: EmbeddingProvider, vector_index: VectorIndex) -> None:
        """
        Initialize indexing task.

        Args:
            embedding_provider: Shared embedding provider
            vector_index: Namespaced vector index

        Raises:
            ValueError: Provider and index disagree on vector dimension
        """
        if embedding_provider.dimension != vector_index.dimension:
            raise ValueError(
                f"Embedding dimension {embedding_provider.dimension} does not match "
                f"index dimension {vector_index.dimension}"
            )
        self._embedding_provider = embedding_provider
        self._vector_index = vector_index

    async def index(
        self,
        document_id: str,
        chunks: list[Chunk],
        file_name: str | None = None,
    ) -> int:
        """
        Embed and upsert chunks under the document's partition.

        Args:
            document_id: Document ID, used as the partition name
            chunks: Page chunks to index
            file_name: Display name stored as provenance

        Returns:
            int: Number of vectors written

        Raises:
            EmbeddingError: Embedding failed (nothing written)
            VectorStoreError: Upsert failed (partition cleared)
        """
        vectors = await self._embedding_provider.embed_documents([chunk.content for chunk in chunks])
        for chunk, vector in zip(chunks, vectors):
            chunk.embedding = vector

        items = [
            IndexedChunk(
                id=chunk.id,
                vector=chunk.embedding,
                text=chunk.content,
                provenance=ChunkProvenance(
                    document_id=document_id,
                    page=chunk.page,
                    file_name=file_name,
                ),
            )
            for chunk in chunks
        ]

        try:
            written = await self._vector_index.upsert(document_id, items)
        except VectorStoreError:
            await self._discard_partition(document_id)
            raise

        logger.info(
            f"{__name__}:index - Indexed {written} chunks",
            extra={"document_id": document_id},
        )
        return written

    async def _discard_partition(self, document_id: str) -> None:
        try:
            await self._vector_index.delete_namespace(document_id)
        except VectorStoreError as e:
            logger.error(
                f"{__name__}:_discard_partition - Cleanup after failed upsert failed: {e}",
                extra={"document_id": document_id},
            )
