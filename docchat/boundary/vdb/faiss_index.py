"""
FAISS vector index for local development.

Keeps one LangChain FAISS store per partition, so partitions are
physically separate. Stores are optionally persisted under a directory,
one `<namespace>.faiss`/`<namespace>.pkl` pair each.

Dependencies: faiss-cpu, langchain_community.vectorstores
System role: Local vector index for development and tests
"""

import asyncio
import logging
import re
from pathlib import Path

from langchain_community.vectorstores import FAISS
from langchain_core.embeddings import Embeddings

from docchat.boundary.vdb.base import VectorIndex
from docchat.boundary.vdb.vector_schemas import (
    ChunkProvenance,
    IndexedChunk,
    IndexStats,
    VectorSearchResult,
)
from docchat.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)

_NAMESPACE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class FaissIndex(VectorIndex):
    """VectorIndex backed by per-partition FAISS stores."""

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int,
        persist_directory: str | None = None,
    ) -> None:
        """
        Initialize the local index.

        Args:
            embeddings: LangChain Embeddings required by the FAISS wrapper
            dimension: Pinned embedding dimension
            persist_directory: Directory for saved partitions (None keeps them in memory)
        """
        self._embeddings = embeddings
        self._dimension = dimension
        self._directory = Path(persist_directory) if persist_directory else None
        self._stores: dict[str, FAISS] = {}
        self._lock = asyncio.Lock()

        if self._directory is not None:
            self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def dimension(self) -> int:
        return self._dimension

    def _check_namespace(self, namespace: str) -> None:
        if not _NAMESPACE_PATTERN.match(namespace):
            raise VectorStoreError(
                f"Invalid partition name: {namespace}",
                details={"namespace": namespace},
            )

    def _load(self, namespace: str) -> FAISS | None:
        if namespace in self._stores:
            return self._stores[namespace]
        if self._directory is None or not (self._directory / f"{namespace}.faiss").exists():
            return None

        store = FAISS.load_local(
            str(self._directory),
            self._embeddings,
            index_name=namespace,
            allow_dangerous_deserialization=True,
        )
        self._stores[namespace] = store
        return store

    def _save(self, namespace: str, store: FAISS) -> None:
        if self._directory is not None:
            store.save_local(str(self._directory), index_name=namespace)

    async def upsert(self, namespace: str, items: list[IndexedChunk]) -> int:
        self._check_namespace(namespace)
        for item in items:
            self.check_dimension(item.vector, "upsert")
        if not items:
            return 0

        text_embeddings = [(item.text, item.vector) for item in items]
        metadatas = [{**item.provenance.model_dump(), "chunk_id": item.id} for item in items]
        ids = [item.id for item in items]

        async with self._lock:
            try:
                store = self._load(namespace)
                if store is None:
                    store = FAISS.from_embeddings(
                        text_embeddings,
                        self._embeddings,
                        metadatas=metadatas,
                        ids=ids,
                    )
                    self._stores[namespace] = store
                else:
                    existing = set(store.index_to_docstore_id.values())
                    replaced = [chunk_id for chunk_id in ids if chunk_id in existing]
                    if replaced:
                        store.delete(replaced)
                    store.add_embeddings(text_embeddings, metadatas=metadatas, ids=ids)
                self._save(namespace, store)
            except Exception as e:
                raise VectorStoreError(
                    f"Failed to upsert vectors: {e}",
                    operation="upsert",
                    details={"namespace": namespace},
                ) from e

        logger.info(
            f"{__name__}:upsert - Wrote {len(items)} vectors",
            extra={"namespace": namespace},
        )
        return len(items)

    async def query(
        self,
        namespace: str,
        vector: list[float],
        top_k: int,
    ) -> list[VectorSearchResult]:
        self._check_namespace(namespace)
        self.check_dimension(vector, "query")

        async with self._lock:
            try:
                store = self._load(namespace)
                if store is None:
                    return []
                hits = store.similarity_search_with_score_by_vector(vector, k=top_k)
            except Exception as e:
                raise VectorStoreError(
                    f"Failed to query vectors: {e}",
                    operation="query",
                    details={"namespace": namespace},
                ) from e

        results = []
        for doc, distance in hits:
            metadata = doc.metadata or {}
            if metadata.get("document_id") != namespace:
                continue
            results.append(
                VectorSearchResult(
                    chunk_id=str(metadata.get("chunk_id", "")),
                    text=doc.page_content,
                    provenance=ChunkProvenance(
                        document_id=namespace,
                        page=int(metadata.get("page", 0)),
                        file_name=metadata.get("file_name"),
                    ),
                    # L2 distance, smaller is closer
                    score=1.0 / (1.0 + float(distance)),
                )
            )
        return results

    async def delete_namespace(self, namespace: str) -> int:
        self._check_namespace(namespace)
        async with self._lock:
            store = self._load(namespace)
            removed = store.index.ntotal if store is not None else 0
            self._stores.pop(namespace, None)
            if self._directory is not None:
                for suffix in (".faiss", ".pkl"):
                    (self._directory / f"{namespace}{suffix}").unlink(missing_ok=True)

        logger.info(
            f"{__name__}:delete_namespace - Removed {removed} vectors",
            extra={"namespace": namespace},
        )
        return removed

    async def describe(self) -> IndexStats:
        async with self._lock:
            namespaces = {name: store.index.ntotal for name, store in self._stores.items()}
        return IndexStats(
            provider="faiss",
            dimension=self._dimension,
            namespaces=namespaces,
            details={"persist_directory": str(self._directory) if self._directory else None},
        )
