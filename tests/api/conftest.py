"""Shared fixtures for API tests."""
from collections.abc import AsyncGenerator, Generator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from models.link import EMBEDDING_DIMENSIONS
from models.user import User
from services.exceptions import AIError, ScrapeError
from services.url_scraper import ScrapedContent


@pytest.fixture(autouse=True)
def mock_ingestion() -> Generator[dict[str, AsyncMock]]:
    """
    Auto-mock scraping and Gemini calls for all API tests.

    Scraping returns a small development article and AI calls succeed by
    default. Tests that need failures set `side_effect` on the mocks.
    """
    scraped = ScrapedContent(
        title='Foo',
        content='Notes on programming with FastAPI.',
        favicon='https://example.com/favicon.ico',
        domain='example.com',
        read_time='1 min read',
    )
    embedding = [0.1] * EMBEDDING_DIMENSIONS
    with (
        patch('services.link_service.scrape_url', new_callable=AsyncMock, return_value=scraped) as scrape,  # noqa: E501
        patch('services.link_service.generate_summary', new_callable=AsyncMock, return_value='AI summary.') as summary,  # noqa: E501
        patch('services.link_service.generate_embedding', new_callable=AsyncMock, return_value=embedding) as embed,  # noqa: E501
        patch('services.search_service.generate_embedding', new_callable=AsyncMock, return_value=embedding) as search_embed,  # noqa: E501
    ):
        yield {
            'scrape': scrape,
            'summary': summary,
            'embedding': embed,
            'search_embedding': search_embed,
        }


@pytest.fixture
def scrape_fails(mock_ingestion: dict[str, AsyncMock]) -> None:
    """Make page scraping fail."""
    mock_ingestion['scrape'].side_effect = ScrapeError('https://example.com', 'Request timed out')


@pytest.fixture
def ai_fails(mock_ingestion: dict[str, AsyncMock]) -> None:
    """Make every Gemini call fail."""
    for key in ('summary', 'embedding', 'search_embedding'):
        mock_ingestion[key].side_effect = AIError('GEMINI_API_KEY is not configured')


@asynccontextmanager
async def create_user2_client(
    db_session: AsyncSession,
    auth0_id: str = 'user2-auth0-id',
    email: str = 'user2@example.com',
) -> AsyncGenerator[AsyncClient]:
    """
    Create an AsyncClient acting as a second user.

    Overrides the current-user dependency so requests resolve to a freshly
    created user, sharing the test session. Restores the dev-mode user on exit.
    """
    from api.main import app
    from core.auth import get_current_user
    from db.session import get_async_session

    user2 = User(auth0_id=auth0_id, email=email)
    db_session.add(user2)
    await db_session.flush()

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    async def override_get_current_user() -> User:
        return user2

    previous = dict(app.dependency_overrides)
    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_current_user] = override_get_current_user

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as user2_client:
            yield user2_client
    finally:
        app.dependency_overrides.clear()
        app.dependency_overrides.update(previous)
