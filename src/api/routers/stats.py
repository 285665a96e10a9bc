"""Dashboard statistics endpoint."""
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from models.user import User
from schemas.link import LinkStatsResponse
from services import link_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=LinkStatsResponse)
async def get_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> LinkStatsResponse:
    """Get link counts for the current user's dashboard."""
    try:
        stats = await link_service.get_link_stats(db, current_user)
    except Exception:
        logger.exception("Error fetching stats")
        raise HTTPException(status_code=500, detail="Failed to fetch stats")
    return LinkStatsResponse(**asdict(stats))
