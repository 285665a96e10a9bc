"""Semantic link search endpoint."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from models.user import User
from schemas.link import LinkResponse
from services import search_service
from services.exceptions import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


@router.get("/search", response_model=list[LinkResponse])
async def search_links(
    q: str = Query(min_length=1, description="Natural-language search query"),
    limit: int = Query(
        default=search_service.DEFAULT_SEARCH_LIMIT,
        ge=1,
        le=search_service.MAX_SEARCH_LIMIT,
        description="Maximum number of results",
    ),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[LinkResponse]:
    """
    Search the current user's links.

    Results are ranked by embedding similarity. When embeddings are unavailable
    the search falls back to case-insensitive matching on title, summary,
    content and domain.
    """
    try:
        links = await search_service.search_links(db, current_user.id, q, limit)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error searching links")
        raise HTTPException(status_code=500, detail="Failed to search links")
    return [LinkResponse.model_validate(link) for link in links]
