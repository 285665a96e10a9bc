"""
Natural-language search over a user's saved links.

Links are ranked by L2 distance between their content embedding and the query
embedding. When the query cannot be embedded (AI unavailable), a plain
case-insensitive substring filter over recent links is used instead.
"""
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.link import Link
from models.user import User
from services.ai_service import generate_embedding
from services.exceptions import AIError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20
MAX_SEARCH_LIMIT = 50
# Number of most recent links scanned by the text fallback
TEXT_FALLBACK_SCAN_LIMIT = 100


def link_matches_text(link: Link, query: str) -> bool:
    """True if the query occurs (case-insensitively) in the link's title, summary, content or domain."""
    needle = query.lower()
    fields = (link.title, link.summary, link.content, link.domain)
    return any(field and needle in field.lower() for field in fields)


async def vector_search(
    db: AsyncSession,
    user_id: int,
    embedding: list[float],
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[Link]:
    """Return the user's links nearest to the embedding, closest first."""
    result = await db.execute(
        select(Link)
        .where(Link.user_id == user_id)
        .order_by(Link.content_embedding.l2_distance(embedding))
        .limit(limit),
    )
    return list(result.scalars().all())


async def text_search(
    db: AsyncSession,
    user_id: int,
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[Link]:
    """Filter the user's most recent links by substring match."""
    result = await db.execute(
        select(Link)
        .where(Link.user_id == user_id)
        .order_by(Link.created_at.desc(), Link.id.desc())
        .limit(TEXT_FALLBACK_SCAN_LIMIT),
    )
    matches = [link for link in result.scalars().all() if link_matches_text(link, query)]
    return matches[:limit]


async def search_links(
    db: AsyncSession,
    user_id: int,
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[Link]:
    """
    Search a user's links.

    Args:
        db: Database session.
        user_id: Owner whose links are searched.
        query: Natural-language query.
        limit: Maximum number of results (1-50).

    Returns:
        Matching links, best match first.

    Raises:
        ValidationError: If the query is empty or the limit is out of range.
    """
    if not query:
        raise ValidationError("Search query is required")
    if not 1 <= limit <= MAX_SEARCH_LIMIT:
        raise ValidationError(f"Limit must be between 1 and {MAX_SEARCH_LIMIT}")

    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(search_count=User.search_count + 1),
    )

    try:
        embedding = await generate_embedding(query)
    except AIError as e:
        logger.warning("AI search failed, falling back to text search: %s", e)
        return await text_search(db, user_id, query, limit)

    return await vector_search(db, user_id, embedding, limit)
