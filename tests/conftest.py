"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory SQLite sessions, PDF byte builder, deterministic
embedding provider, in-memory vector index
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import hashlib
import math
import uuid

import pytest

from docchat.boundary.vdb.base import VectorIndex
from docchat.boundary.vdb.embedding_provider import EmbeddingProvider
from docchat.boundary.vdb.vector_schemas import IndexedChunk, IndexStats, VectorSearchResult
from docchat.core.exceptions import VectorStoreError

TEST_DIMENSION = 8


def build_pdf(page_texts: list[str]) -> bytes:
    """
    Build a minimal valid PDF with one text line per page.

    An empty string produces a page with no text.
    """
    page_count = len(page_texts)
    page_ids = [4 + 2 * i for i in range(page_count)]
    objects: dict[int, bytes] = {
        1: b"<< /Type /Catalog /Pages 2 0 R >>",
        2: (
            "<< /Type /Pages /Kids ["
            + " ".join(f"{pid} 0 R" for pid in page_ids)
            + f"] /Count {page_count} >>"
        ).encode(),
        3: b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    }
    for pid, text in zip(page_ids, page_texts):
        objects[pid] = (
            "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {pid + 1} 0 R >>"
        ).encode()
        if text:
            escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
            stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
        else:
            stream = b""
        objects[pid + 1] = b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"

    out = bytearray(b"%PDF-1.4\n")
    offsets: dict[int, int] = {}
    for number in sorted(objects):
        offsets[number] = len(out)
        out += f"{number} 0 obj\n".encode() + objects[number] + b"\nendobj\n"

    xref_position = len(out)
    total = len(objects) + 1
    out += f"xref\n0 {total}\n".encode()
    out += b"0000000000 65535 f \n"
    for number in sorted(objects):
        out += f"{offsets[number]:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {total} /Root 1 0 R >>\nstartxref\n{xref_position}\n%%EOF\n".encode()
    return bytes(out)


def hash_vector(text: str, dimension: int = TEST_DIMENSION) -> list[float]:
    """Deterministic bag-of-words vector, unit length."""
    vector = [0.0] * dimension
    for word in text.lower().split():
        bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % dimension
        vector[bucket] += 1.0
    norm = math.sqrt(sum(v * v for v in vector)) or 1.0
    return [v / norm for v in vector]


class FakeEmbeddingProvider(EmbeddingProvider):
    """EmbeddingProvider with hash-based vectors and call recording."""

    def __init__(self, dimension: int = TEST_DIMENSION) -> None:
        self._dimension = dimension
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []
        self.fail_with: Exception | None = None

    @property
    def model(self) -> str:
        return "fake-embedding"

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if self.fail_with is not None:
            raise self.fail_with
        self.document_calls.append(list(texts))
        return [hash_vector(text, self._dimension) for text in texts]

    async def embed_query(self, text: str) -> list[float]:
        if self.fail_with is not None:
            raise self.fail_with
        self.query_calls.append(text)
        return hash_vector(text, self._dimension)


class InMemoryVectorIndex(VectorIndex):
    """VectorIndex keeping partitions in dictionaries."""

    def __init__(self, dimension: int = TEST_DIMENSION) -> None:
        self._dimension = dimension
        self.partitions: dict[str, dict[str, IndexedChunk]] = {}
        self.upsert_calls = 0
        self.fail_on_upsert = False
        self.fail_on_query = False

    @property
    def dimension(self) -> int:
        return self._dimension

    async def upsert(self, namespace: str, items: list[IndexedChunk]) -> int:
        self.upsert_calls += 1
        for item in items:
            self.check_dimension(item.vector, "upsert")
        partition = self.partitions.setdefault(namespace, {})
        if self.fail_on_upsert:
            # Simulate a batch that landed before the provider failed
            if items:
                partition[items[0].id] = items[0]
            raise VectorStoreError("index unreachable", operation="upsert")
        for item in items:
            partition[item.id] = item
        return len(items)

    async def query(self, namespace: str, vector: list[float], top_k: int) -> list[VectorSearchResult]:
        if self.fail_on_query:
            raise VectorStoreError("index unreachable", operation="query")
        self.check_dimension(vector, "query")
        scored = [
            VectorSearchResult(
                chunk_id=item.id,
                text=item.text,
                provenance=item.provenance,
                score=sum(a * b for a, b in zip(vector, item.vector)),
            )
            for item in self.partitions.get(namespace, {}).values()
        ]
        scored.sort(key=lambda r: r.score, reverse=True)
        return scored[:top_k]

    async def delete_namespace(self, namespace: str) -> int:
        return len(self.partitions.pop(namespace, {}))

    async def describe(self) -> IndexStats:
        return IndexStats(
            provider="memory",
            dimension=self._dimension,
            namespaces={ns: len(items) for ns, items in self.partitions.items()},
        )


@pytest.fixture
async def async_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine shared by every session of the test
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from docchat.boundary.db import models  # noqa: F401
    from docchat.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine):
    """Session factory bound to the test engine."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_async_db(session_factory):
    """
    Create a test database session.

    Yields:
        AsyncSession: Test database session with rollback on exit
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_embedding_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def in_memory_index() -> InMemoryVectorIndex:
    return InMemoryVectorIndex()


@pytest.fixture
def make_pdf():
    """Factory fixture: make_pdf(["page one", "page two"]) -> PDF bytes."""
    return build_pdf


@pytest.fixture
def owner_id() -> str:
    """Authenticated test user."""
    return "user_test_123"


@pytest.fixture
def other_owner_id() -> str:
    return "user_other_456"


@pytest.fixture
def document_key() -> str:
    return f"uploads/{uuid.uuid4()}.pdf"


@pytest.fixture
def make_vector_index():
    """Factory fixture: make_vector_index(dimension=8) -> InMemoryVectorIndex."""
    return InMemoryVectorIndex


@pytest.fixture
def make_embedding_provider():
    """Factory fixture: make_embedding_provider(dimension=8) -> FakeEmbeddingProvider."""
    return FakeEmbeddingProvider
