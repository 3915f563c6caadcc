"""
Vector index capability interface.

Every adapter stores chunks in namespaced partitions, one per document,
and must never return chunks from a partition other than the one queried.

Dependencies: docchat.boundary.vdb.vector_schemas
System role: Provider-agnostic vector index contract
"""

from abc import ABC, abstractmethod

from docchat.boundary.vdb.vector_schemas import IndexedChunk, IndexStats, VectorSearchResult
from docchat.core.exceptions import VectorStoreError


class VectorIndex(ABC):
    """Namespaced vector index."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Vector length accepted by this index."""

    @abstractmethod
    async def upsert(self, namespace: str, items: list[IndexedChunk]) -> int:
        """
        Insert or replace chunks in a partition.

        Args:
            namespace: Partition name (document ID)
            items: Chunks with vectors and provenance

        Returns:
            int: Number of vectors written

        Raises:
            VectorStoreError: On dimension mismatch or provider failure
        """

    @abstractmethod
    async def query(
        self,
        namespace: str,
        vector: list[float],
        top_k: int,
    ) -> list[VectorSearchResult]:
        """
        Return the top_k nearest chunks of one partition, best first.

        Raises:
            VectorStoreError: On dimension mismatch or provider failure
        """

    @abstractmethod
    async def delete_namespace(self, namespace: str) -> int:
        """Remove every vector of a partition; returns the number removed."""

    @abstractmethod
    async def describe(self) -> IndexStats:
        """Report provider, dimension, and partition statistics."""

    def check_dimension(self, vector: list[float], operation: str) -> None:
        """
        Reject vectors whose length differs from the index dimension.

        Raises:
            VectorStoreError: If the lengths differ
        """
        if len(vector) != self.dimension:
            raise VectorStoreError(
                f"Vector dimension {len(vector)} does not match index dimension {self.dimension}",
                operation=operation,
                details={"expected": self.dimension, "actual": len(vector)},
            )
