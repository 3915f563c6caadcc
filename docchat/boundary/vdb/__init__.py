"""
Vector boundary: embedding provider and namespaced vector index adapters.
"""

from docchat.boundary.vdb.base import VectorIndex
from docchat.boundary.vdb.vector_schemas import (
    ChunkProvenance,
    IndexedChunk,
    IndexStats,
    VectorSearchResult,
)

__all__ = [
    "ChunkProvenance",
    "IndexedChunk",
    "IndexStats",
    "VectorIndex",
    "VectorSearchResult",
]
