"""API-specific dependencies."""

from .dependencies import (
    get_chat_service,
    get_current_owner,
    get_document_service,
    get_ingestion_pipeline,
    get_page_quota,
    get_service_cache,
    get_settings_dependency,
    get_subscription_plan,
    get_vector_index,
)

__all__ = [
    "get_chat_service",
    "get_current_owner",
    "get_document_service",
    "get_ingestion_pipeline",
    "get_page_quota",
    "get_service_cache",
    "get_settings_dependency",
    "get_subscription_plan",
    "get_vector_index",
]
