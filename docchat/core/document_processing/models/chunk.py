"""
Chunk domain model for the ingestion pipeline.

One chunk per extracted PDF page, with a deterministic ID and optional
embedding.

Dependencies: pydantic
System role: Data structure for page-level chunks in ingestion
"""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """Page-level text chunk with optional embedding vector."""

    id: str = Field(description="Deterministic chunk identifier (content hash)")
    content: str = Field(description="Page text")
    page: int = Field(description="1-based page number")
    metadata: dict = Field(default_factory=dict, description="Loader metadata (source, labels)")
    embedding: list[float] | None = Field(default=None, description="Embedding vector")
