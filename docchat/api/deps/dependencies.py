"""
Dependency injection container.

Factory functions for FastAPI dependencies. Heavy collaborators (embedding
provider, vector index, pipeline) are built once and cached.

Identity and plan come from request headers set by the fronting auth and
billing layers.

Dependencies: docchat.configs, docchat.application, docchat.boundary, docchat.core
System role: DI container for service injection
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.application.services import ChatService, DocumentService
from docchat.boundary.db import get_async_db
from docchat.boundary.vdb.base import VectorIndex
from docchat.configs import Settings, get_settings
from docchat.core.document_processing import IngestionPipeline
from docchat.core.plans import PageQuota, SubscriptionPlan


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._embedding_provider = None
        self._vector_index = None
        self._storage_client = None
        self._ingestion_pipeline = None
        self._chat_service = None

    @property
    def embedding_provider(self):
        """Get cached embedding provider."""
        if self._embedding_provider is None:
            from docchat.boundary.vdb.embedding_provider import GoogleEmbeddingProvider

            vector_settings = get_settings().vector_store
            self._embedding_provider = GoogleEmbeddingProvider(
                model=vector_settings.embedding_model,
                dimension=vector_settings.embedding_dimension,
                batch_size=vector_settings.embedding_batch_size,
            )
        return self._embedding_provider

    @property
    def vector_index(self) -> VectorIndex:
        """Get cached vector index."""
        if self._vector_index is None:
            from docchat.boundary.vdb.vector_index_factory import get_vector_index

            self._vector_index = get_vector_index(get_settings().vector_store, self.embedding_provider)
        return self._vector_index

    @property
    def storage_client(self):
        """Get cached documents bucket client."""
        if self._storage_client is None:
            from docchat.boundary.aws.s3_client import S3DocumentClient

            storage = get_settings().storage
            self._storage_client = S3DocumentClient(bucket=storage.documents_bucket, region=storage.region)
        return self._storage_client

    @property
    def ingestion_pipeline(self) -> IngestionPipeline:
        """Get cached ingestion pipeline."""
        if self._ingestion_pipeline is None:
            from docchat.boundary.db import get_async_session_factory
            from docchat.core.document_processing.status_tracker import DocumentStatusTracker
            from docchat.core.document_processing.tasks import FetchTask, IndexingTask, ParsingTask

            storage = get_settings().storage
            self._ingestion_pipeline = IngestionPipeline(
                status_tracker=DocumentStatusTracker(get_async_session_factory()),
                fetch_task=FetchTask(
                    storage_client=self.storage_client,
                    timeout_seconds=storage.fetch_timeout_seconds,
                    user_agent=storage.user_agent,
                    accept=storage.accept,
                ),
                parsing_task=ParsingTask(),
                indexing_task=IndexingTask(self.embedding_provider, self.vector_index),
            )
        return self._ingestion_pipeline

    @property
    def chat_service(self) -> ChatService:
        """Get cached chat service."""
        if self._chat_service is None:
            from docchat.boundary.db import get_async_session_factory
            from docchat.core.answer_builder import AnswerBuilder

            chat = get_settings().chat
            self._chat_service = ChatService(
                session_factory=get_async_session_factory(),
                embedding_provider=self.embedding_provider,
                vector_index=self.vector_index,
                top_k=chat.top_k,
                answer_builder=AnswerBuilder(snippet_length=chat.snippet_length),
            )
        return self._chat_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._embedding_provider = None
        self._vector_index = None
        self._storage_client = None
        self._ingestion_pipeline = None
        self._chat_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_current_owner(x_user_id: str | None = Header(default=None)) -> str:
    """
    Resolve the authenticated user from the X-User-Id header.

    Raises:
        HTTPException(401): Header missing or blank
    """
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return x_user_id.strip()


def get_subscription_plan(
    x_subscription_plan: str | None = Header(default=None),
) -> SubscriptionPlan:
    """Resolve the caller's plan from X-Subscription-Plan; unknown values mean free."""
    if x_subscription_plan and x_subscription_plan.strip().lower() == SubscriptionPlan.PRO.value:
        return SubscriptionPlan.PRO
    return SubscriptionPlan.FREE


def get_page_quota(
    plan: SubscriptionPlan = Depends(get_subscription_plan),
    settings: Settings = Depends(get_settings_dependency),
) -> PageQuota:
    """Limits applying to the caller's uploads."""
    return PageQuota.for_plan(plan, settings.plans)


def get_vector_index() -> VectorIndex:
    return get_service_cache().vector_index


def get_ingestion_pipeline() -> IngestionPipeline:
    return get_service_cache().ingestion_pipeline


def get_chat_service() -> ChatService:
    """
    Get chat service instance.

    The service opens its own sessions because answers stream after the
    request-scoped session has closed.

    Returns:
        ChatService: Shared chat service
    """
    return get_service_cache().chat_service


def get_document_service(
    db: AsyncSession = Depends(get_async_db),
    vector_index: VectorIndex = Depends(get_vector_index),
) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)
        vector_index: Shared vector index (injected via Depends)

    Returns:
        DocumentService: Document service instance
    """
    return DocumentService(db=db, vector_index=vector_index)
