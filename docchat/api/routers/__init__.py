"""API routers."""

from .documents import router as documents_router
from .health import router as health_router
from .messages import router as messages_router
from .uploads import router as uploads_router

__all__ = [
    "documents_router",
    "health_router",
    "messages_router",
    "uploads_router",
]
