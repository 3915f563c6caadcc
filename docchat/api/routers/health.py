"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/vector-index

Dependencies: docchat.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.api.deps import get_vector_index
from docchat.boundary.db import get_async_db
from docchat.boundary.vdb.base import VectorIndex
from docchat.boundary.vdb.vector_schemas import IndexStats

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)) -> HealthResponse:
    """Database health check."""
    await db.execute(text("SELECT 1"))
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/vector-index", response_model=IndexStats)
async def health_check_vector_index(vector_index: VectorIndex = Depends(get_vector_index)):
    """Vector index health check; reports partition statistics."""
    try:
        return await vector_index.describe()
    except Exception as e:
        logger.error(f"{__name__}:health_check_vector_index - {type(e).__name__}: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "message": str(e)},
        )
