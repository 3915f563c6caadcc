"""
Embedding provider interface and Google Generative AI adapter.

Ingestion and retrieval share one provider instance so the model and
output dimensionality are identical on both paths.

Dependencies: langchain_google_genai, langchain_core, tenacity, python-dotenv
System role: Text-to-vector conversion for indexing and querying
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from dotenv import load_dotenv
from langchain_core.embeddings import Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from docchat.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)

# GOOGLE_API_KEY is read from the environment by the Google client
load_dotenv()

_embedding_retry = retry(
    retry=retry_if_not_exception_type(EmbeddingError),
    stop=stop_after_attempt(3),
    wait=wait_exponential_jitter(initial=1, max=10, jitter=2),
    before_sleep=lambda retry_state: logger.warning(
        f"{__name__}:{retry_state.fn.__name__} - Retry {retry_state.attempt_number}/3 after "
        f"{type(retry_state.outcome.exception()).__name__}"
    ),
    reraise=True,
)


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    Google embeddings that always request the configured output dimensionality.

    The base class ignores output_dimensionality passed to the constructor,
    so every embed call forwards it explicitly.
    """

    _output_dimensionality: int = 1024

    def __init__(self, model: str, output_dimensionality: int, **kwargs) -> None:
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality

    def embed_documents(self, texts: list[str], **kwargs) -> list[list[float]]:
        kwargs["output_dimensionality"] = kwargs.get("output_dimensionality") or self._output_dimensionality
        return super().embed_documents(texts, **kwargs)

    def embed_query(self, text: str, **kwargs) -> list[float]:
        kwargs["output_dimensionality"] = kwargs.get("output_dimensionality") or self._output_dimensionality
        return super().embed_query(text, **kwargs)


class EmbeddingProvider(ABC):
    """Converts text into fixed-length vectors."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Provider model identifier."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Length of every returned vector."""

    @abstractmethod
    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Embed many texts; one vector per input, in input order."""

    @abstractmethod
    async def embed_query(self, text: str) -> list[float]:
        """Embed a single query text."""

    def validate_vectors(self, vectors: list[list[float]], expected_count: int) -> list[list[float]]:
        """
        Check the provider honoured the request.

        Raises:
            EmbeddingError: Wrong number of vectors or wrong dimension
        """
        if len(vectors) != expected_count:
            raise EmbeddingError(
                f"Embedding provider returned {len(vectors)} vectors for {expected_count} inputs",
                details={"model": self.model},
            )
        for vector in vectors:
            if len(vector) != self.dimension:
                raise EmbeddingError(
                    f"Embedding dimension {len(vector)} does not match pinned dimension {self.dimension}",
                    details={"model": self.model, "expected": self.dimension, "actual": len(vector)},
                )
        return vectors


class GoogleEmbeddingProvider(EmbeddingProvider):
    """
    EmbeddingProvider backed by a LangChain Embeddings object.

    Defaults to FixedDimensionEmbeddings; any LangChain Embeddings can be
    injected (tests use langchain_core FakeEmbeddings).
    """

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        dimension: int = 1024,
        batch_size: int = 100,
        embeddings: Embeddings | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            model: Google embedding model ID
            dimension: Pinned output dimensionality
            batch_size: Texts per embedding request
            embeddings: Pre-built LangChain Embeddings (created if None)
        """
        self._model = model
        self._dimension = dimension
        self._batch_size = batch_size
        self._embeddings = embeddings or FixedDimensionEmbeddings(
            model=model,
            output_dimensionality=dimension,
        )
        logger.info(
            f"{__name__}:__init__ - Embedding provider ready",
            extra={"model": model, "dimension": dimension},
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def langchain_embeddings(self) -> Embeddings:
        """Underlying LangChain Embeddings, needed by LangChain vector stores."""
        return self._embeddings

    @_embedding_retry
    def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        return self._embeddings.embed_documents(texts)

    @_embedding_retry
    def _embed_query(self, text: str) -> list[float]:
        return self._embeddings.embed_query(text)

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """
        Embed texts in batches.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per text

        Raises:
            EmbeddingError: Provider failure after retries or malformed output
        """
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self._batch_size):
            batch = texts[start:start + self._batch_size]
            try:
                batch_vectors = await asyncio.to_thread(self._embed_batch, batch)
            except EmbeddingError:
                raise
            except Exception as e:
                raise EmbeddingError(
                    f"Embedding request failed: {e}",
                    details={"model": self._model, "batch_start": start},
                ) from e
            vectors.extend(self.validate_vectors(batch_vectors, len(batch)))

        logger.info(
            f"{__name__}:embed_documents - Embedded {len(vectors)} texts",
            extra={"model": self._model, "dimension": self._dimension},
        )
        return vectors

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a question with the same model and dimension as ingestion.

        Raises:
            EmbeddingError: Provider failure after retries or malformed output
        """
        try:
            vector = await asyncio.to_thread(self._embed_query, text)
        except Exception as e:
            raise EmbeddingError(
                f"Query embedding failed: {e}",
                details={"model": self._model},
            ) from e
        return self.validate_vectors([vector], 1)[0]
