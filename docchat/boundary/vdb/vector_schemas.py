"""
Vector index schemas.

Pydantic models exchanged with vector index adapters: chunks to upsert,
search results, and index statistics.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any

from pydantic import BaseModel, Field


class ChunkProvenance(BaseModel):
    """Where an indexed chunk came from."""

    document_id: str = Field(description="Owning document ID, equal to the partition name")
    page: int = Field(description="1-based page number in the source PDF")
    file_name: str | None = Field(default=None, description="Display name of the source file")


class IndexedChunk(BaseModel):
    """A chunk ready to be written to a partition."""

    id: str = Field(description="Deterministic chunk identifier")
    vector: list[float] = Field(description="Embedding vector")
    text: str = Field(description="Chunk text content")
    provenance: ChunkProvenance


class VectorSearchResult(BaseModel):
    """Single result from a partition query."""

    chunk_id: str = Field(description="Chunk identifier")
    text: str = Field(description="Chunk text content")
    provenance: ChunkProvenance
    score: float = Field(description="Relevance score, higher is closer")


class IndexStats(BaseModel):
    """Summary returned by VectorIndex.describe()."""

    provider: str
    dimension: int
    namespaces: dict[str, int] = Field(default_factory=dict, description="Vector count per partition, when known")
    details: dict[str, Any] = Field(default_factory=dict)
