"""
Vector index factory selecting between FAISS (dev) and S3 Vectors (prod).

Depends on VECTOR_STORE_STORE_TYPE.

Dependencies: docchat.boundary.vdb, docchat.configs
System role: Vector index instantiation and selection
"""

import logging

from docchat.boundary.vdb.base import VectorIndex
from docchat.boundary.vdb.embedding_provider import GoogleEmbeddingProvider
from docchat.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def get_vector_index(
    settings: VectorStoreSettings,
    embedding_provider: GoogleEmbeddingProvider,
) -> VectorIndex:
    """
    Build the configured vector index.

    Args:
        settings: Vector store settings
        embedding_provider: Shared provider; FAISS needs its LangChain embeddings

    Returns:
        VectorIndex: FaissIndex or S3VectorsIndex

    Raises:
        ValueError: If store_type is not 'faiss' or 's3'
    """
    store_type = settings.store_type.lower()

    if store_type == "faiss":
        from docchat.boundary.vdb.faiss_index import FaissIndex

        logger.info(f"{__name__}:get_vector_index - Creating FAISS index (local dev mode)")
        return FaissIndex(
            embeddings=embedding_provider.langchain_embeddings,
            dimension=settings.embedding_dimension,
            persist_directory=settings.faiss_directory,
        )

    if store_type == "s3":
        from docchat.boundary.vdb.s3_vectors_index import S3VectorsIndex

        logger.info(f"{__name__}:get_vector_index - Creating S3 Vectors index (production mode)")
        return S3VectorsIndex(
            vectors_bucket=settings.vectors_bucket,
            index_name=settings.index_name,
            dimension=settings.embedding_dimension,
            region=settings.aws_region,
            batch_size=settings.upsert_batch_size,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
        f"Must be 'faiss' (dev) or 's3' (production)."
    )
