"""Link ingestion and CRUD endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user, get_settings
from core.config import Settings
from models.user import User
from schemas.link import LinkCreate, LinkCreateResponse, LinkDeleteResponse, LinkResponse
from services import link_service
from services.exceptions import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/links", tags=["links"])


@router.post("", response_model=LinkCreateResponse, status_code=201)
async def create_link(
    data: LinkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> LinkCreateResponse:
    """
    Save a URL.

    The page is scraped, categorized, summarized and embedded. Scraping or AI
    failures still store a link; `aiAvailable` reports whether AI processing
    succeeded.
    """
    try:
        result = await link_service.create_link(
            db, current_user.id, data.url, timeout=settings.scrape_timeout,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error creating link")
        raise HTTPException(status_code=500, detail="Failed to process URL")

    response = LinkResponse.model_validate(result.link)
    return LinkCreateResponse(**response.model_dump(), ai_available=result.ai_available)


@router.get("", response_model=list[LinkResponse])
async def list_links(
    limit: int = Query(default=20, ge=1, le=100, description="Pagination limit"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[LinkResponse]:
    """List the current user's links, newest first."""
    try:
        links = await link_service.list_links(db, current_user.id, limit=limit, offset=offset)
    except Exception:
        logger.exception("Error fetching links")
        raise HTTPException(status_code=500, detail="Failed to fetch links")
    return [LinkResponse.model_validate(link) for link in links]


@router.get("/{link_id}", response_model=LinkResponse)
async def get_link(
    link_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> LinkResponse:
    """Get a single link by ID."""
    link = await link_service.get_link(db, current_user.id, link_id)
    if link is None:
        raise HTTPException(status_code=404, detail="Link not found")
    return LinkResponse.model_validate(link)


@router.delete("/{link_id}", response_model=LinkDeleteResponse)
async def delete_link(
    link_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> LinkDeleteResponse:
    """
    Delete a link.

    Deletion is scoped to the current user; IDs of other users' links are a no-op.
    """
    try:
        await link_service.delete_link(db, current_user.id, link_id)
    except Exception:
        logger.exception("Error deleting link")
        raise HTTPException(status_code=500, detail="Failed to delete link")
    return LinkDeleteResponse(message="Link deleted successfully")
