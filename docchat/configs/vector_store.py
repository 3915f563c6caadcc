"""
Vector store configuration settings.

Manages S3 Vectors and local FAISS configuration for document partitions.
Pins the embedding model and output dimensionality shared by ingestion
and retrieval.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (FAISS for dev, S3 Vectors for prod)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="s3",
        description="Vector store type: 'faiss' for local dev, 's3' for production",
    )
    aws_region: str = Field(default="us-west-2", description="AWS region for S3 Vectors")
    vectors_bucket: str = Field(default="docchat-vectors", description="S3 Vectors bucket name")
    index_name: str = Field(default="documents", description="S3 Vectors index name")
    faiss_directory: str | None = Field(
        default="/tmp/.docchat_faiss",
        description="Directory for persisted FAISS partitions (None keeps them in memory)",
    )

    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID (gemini-embedding-001 supports 1024-dim)",
    )
    embedding_dimension: int = Field(
        default=1024,
        description="Embedding vector dimension, identical at ingestion and query time",
    )
    embedding_batch_size: int = Field(
        default=100,
        description="Texts sent per embedding request",
    )
    upsert_batch_size: int = Field(
        default=500,
        description="Vectors written per index request (S3 Vectors accepts at most 500)",
    )
