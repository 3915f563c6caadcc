"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, docchat.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docchat.api.deps.dependencies import get_service_cache
from docchat.boundary.db.connection import dispose_engine, init_models
from docchat.configs import get_settings
from docchat.observability.logger import configure_logging
from docchat.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import (
    documents_router,
    health_router,
    messages_router,
    uploads_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    if not settings.database.uses_connection_pool:
        await init_models()
        logger.info("SQLite schema created")

    yield

    # Shutdown
    get_service_cache().clear()
    await dispose_engine()
    logger.info("Service cache cleared, engine disposed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="DocChat API",
        description="Chat with uploaded PDF documents via semantic retrieval",
        version="0.1.0",
        lifespan=lifespan,
    )

    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(uploads_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(messages_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "docchat.api.main:app",
        host=get_settings().api_host,
        port=get_settings().api_port,
    )
