"""
Service layer for link ingestion and link CRUD operations.

Ingestion runs two independent stages, each allowed to fail:

1. scrape + categorize the page (falls back to a degraded placeholder record)
2. summarize + embed the content (falls back to a canned summary and a zero vector)

Only URL syntax is a hard precondition; a record is always stored otherwise.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Generic, TypeVar
from urllib.parse import urlparse

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.link import Link
from models.user import User
from services.ai_service import generate_embedding, generate_summary, zero_embedding
from services.categorizer import DEFAULT_CATEGORY, categorize_content
from services.exceptions import AIError, ScrapeError, ValidationError
from services.url_scraper import (
    DEFAULT_TIMEOUT,
    ScrapedContent,
    fallback_favicon_url,
    get_domain,
    scrape_url,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALLOWED_SCHEMES = ("http", "https")
UNKNOWN_READ_TIME = "Unknown"


@dataclass
class StageOutcome(Generic[T]):
    """Result of one ingestion stage: either a value or the recoverable error it raised."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """True when the stage produced a value."""
        return self.error is None

    def value_or(self, fallback: Callable[[Exception], T]) -> T:
        """Return the stage value, or the fallback computed from the error."""
        if self.error is None:
            return self.value
        return fallback(self.error)


async def run_stage(stage: Awaitable[T], *recoverable: type[Exception]) -> StageOutcome[T]:
    """
    Await a stage, capturing the listed exception types as a failed outcome.

    Exceptions not listed in `recoverable` propagate.
    """
    try:
        return StageOutcome(value=await stage)
    except recoverable as e:
        return StageOutcome(error=e)


@dataclass
class IngestionResult:
    """A stored link plus whether AI summarization/embedding succeeded for it."""

    link: Link
    ai_available: bool


@dataclass
class LinkStats:
    """Per-user dashboard counters."""

    total_links: int
    this_week: int
    categories: int
    searches: int


def validate_url(url: str | None) -> str:
    """
    Check that a submitted URL is an absolute http(s) URL with a host.

    Returns:
        The URL with surrounding whitespace removed.

    Raises:
        ValidationError: If the URL is missing or malformed.
    """
    if not url or not url.strip():
        raise ValidationError("URL is required")
    url = url.strip()
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        # Raises for non-numeric or out-of-range ports
        parsed.port  # noqa: B018
    except ValueError as e:
        raise ValidationError("Invalid URL format") from e
    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not hostname:
        raise ValidationError("Invalid URL format")
    return url


def degraded_content(url: str) -> ScrapedContent:
    """Placeholder content for a URL that could not be scraped."""
    domain = get_domain(url)
    return ScrapedContent(
        title=f"Link from {domain}",
        content=(
            f"Content could not be extracted from {url}. "
            "This link has been saved for manual review."
        ),
        favicon=fallback_favicon_url(domain),
        domain=domain,
        read_time=UNKNOWN_READ_TIME,
    )


def fallback_summary(domain: str) -> str:
    """Summary stored when AI summarization is unavailable."""
    return (
        f"Link saved from {domain}. AI summarization is currently unavailable - "
        "please check your Gemini API key configuration."
    )


async def _scrape_and_categorize(url: str, timeout: float) -> tuple[ScrapedContent, str]:  # noqa: ASYNC109
    scraped = await scrape_url(url, timeout)
    return scraped, categorize_content(scraped.title, scraped.content)


async def _summarize_and_embed(scraped: ScrapedContent) -> tuple[str, list[float]]:
    # Independent calls; either failing fails the stage as a unit.
    summary, embedding = await asyncio.gather(
        generate_summary(scraped.content, scraped.title),
        generate_embedding(scraped.content),
        return_exceptions=True,
    )
    for result in (summary, embedding):
        if isinstance(result, BaseException):
            raise result
    return summary, embedding


async def create_link(
    db: AsyncSession,
    user_id: int,
    url: str | None,
    timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
) -> IngestionResult:
    """
    Ingest a URL for a user and store the resulting link.

    Scraping and AI failures degrade the record instead of failing the call.

    Args:
        db: Database session.
        user_id: Owner of the new link.
        url: The submitted URL.
        timeout: Page fetch timeout in seconds.

    Returns:
        IngestionResult with the stored link and the AI availability flag.

    Raises:
        ValidationError: If the URL is missing or malformed (nothing is stored).

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    url = validate_url(url)

    scrape = await run_stage(_scrape_and_categorize(url, timeout), ScrapeError)
    if not scrape.ok:
        logger.warning("Scraping failed for %s, saving degraded record: %s", url, scrape.error)
    scraped, category = scrape.value_or(lambda _: (degraded_content(url), DEFAULT_CATEGORY))

    ai = await run_stage(_summarize_and_embed(scraped), AIError)
    if not ai.ok:
        logger.warning("AI processing failed for %s: %s", url, ai.error)
    summary, embedding = ai.value_or(
        lambda _: (fallback_summary(scraped.domain), zero_embedding()),
    )

    link = Link(
        user_id=user_id,
        url=url,
        title=scraped.title,
        summary=summary,
        content=scraped.content,
        favicon=scraped.favicon,
        domain=scraped.domain,
        category=category,
        read_time=scraped.read_time,
        content_embedding=embedding,
    )
    db.add(link)
    await db.flush()
    await db.refresh(link)
    return IngestionResult(link=link, ai_available=ai.ok)


async def list_links(
    db: AsyncSession,
    user_id: int,
    limit: int = 20,
    offset: int = 0,
) -> list[Link]:
    """Return a user's links, newest first."""
    result = await db.execute(
        select(Link)
        .where(Link.user_id == user_id)
        .order_by(Link.created_at.desc(), Link.id.desc())
        .limit(limit)
        .offset(offset),
    )
    return list(result.scalars().all())


async def get_link(db: AsyncSession, user_id: int, link_id: int) -> Link | None:
    """Get a link by ID if it belongs to the user."""
    result = await db.execute(
        select(Link).where(Link.id == link_id, Link.user_id == user_id),
    )
    return result.scalar_one_or_none()


async def delete_link(db: AsyncSession, user_id: int, link_id: int) -> bool:
    """
    Delete a link owned by the user.

    Links owned by other users are left untouched.

    Returns:
        True if a link was deleted, False if none matched.
    """
    result = await db.execute(
        delete(Link).where(Link.id == link_id, Link.user_id == user_id),
    )
    return result.rowcount > 0


async def get_link_stats(
    db: AsyncSession,
    user: User,
    now: datetime | None = None,
) -> LinkStats:
    """
    Compute dashboard counters for a user.

    Args:
        db: Database session.
        user: The user whose links are counted.
        now: Reference time for the 7-day window (defaults to current UTC time).
    """
    now = now or datetime.now(UTC)
    week_ago = now - timedelta(days=7)

    total = await db.scalar(
        select(func.count()).select_from(Link).where(Link.user_id == user.id),
    )
    this_week = await db.scalar(
        select(func.count())
        .select_from(Link)
        .where(Link.user_id == user.id, Link.created_at >= week_ago),
    )
    categories = await db.scalar(
        select(func.count(func.distinct(Link.category)))
        .where(Link.user_id == user.id, Link.category.is_not(None)),
    )

    return LinkStats(
        total_links=total or 0,
        this_week=this_week or 0,
        categories=categories or 0,
        searches=user.search_count,
    )
