"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    ai: str


async def _database_status(db: AsyncSession) -> str:
    # Links cannot be stored or searched without the vector extension
    try:
        installed = await db.scalar(
            text("SELECT 1 FROM pg_extension WHERE extname = 'vector'"),
        )
    except Exception:
        logger.exception("Database health check failed")
        return "unhealthy"
    if installed is None:
        logger.error("Database health check failed: pgvector extension is not installed")
        return "unhealthy"
    return "healthy"


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """
    Check application and database health.

    `ai` reports whether a Gemini key is configured; without one, links are
    saved with fallback summaries and search uses text matching.
    """
    db_status = await _database_status(db)
    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        database=db_status,
        ai="configured" if settings.gemini_api_key else "unconfigured",
    )
