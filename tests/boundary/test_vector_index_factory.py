"""
Test suite for get_vector_index().

System role: Verification of vector index selection
"""

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from docchat.boundary.vdb.embedding_provider import GoogleEmbeddingProvider
from docchat.boundary.vdb.faiss_index import FaissIndex
from docchat.boundary.vdb.vector_index_factory import get_vector_index
from docchat.configs.vector_store import VectorStoreSettings


@pytest.fixture
def provider() -> GoogleEmbeddingProvider:
    return GoogleEmbeddingProvider(model="fake", dimension=8, embeddings=DeterministicFakeEmbedding(size=8))


class TestGetVectorIndex:
    def test_faiss_store_type_builds_faiss_index(self, provider: GoogleEmbeddingProvider, tmp_path) -> None:
        settings = VectorStoreSettings(store_type="FAISS", embedding_dimension=8, faiss_directory=str(tmp_path))

        index = get_vector_index(settings, provider)

        assert isinstance(index, FaissIndex)
        assert index.dimension == 8

    def test_unknown_store_type_raises_value_error(self, provider: GoogleEmbeddingProvider) -> None:
        settings = VectorStoreSettings(store_type="pinecone")

        with pytest.raises(ValueError, match="Invalid VECTOR_STORE_STORE_TYPE"):
            get_vector_index(settings, provider)
