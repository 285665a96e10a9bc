"""Pydantic schemas for link, search, and stats endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for response schemas serialized with camelCase keys.

    The web client reads camelCase (readTime, createdAt, aiAvailable);
    snake_case names are still accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class LinkCreate(BaseModel):
    """
    Schema for submitting a URL.

    The URL is a plain string here; syntax is checked by the ingestion service
    so that malformed URLs answer 400 rather than being coerced.
    """

    url: str


class LinkResponse(CamelModel):
    """
    Schema for link responses.

    The content embedding is never serialized.
    """

    id: int
    url: str
    title: str
    summary: str
    content: str | None
    favicon: str | None
    domain: str | None
    category: str | None
    read_time: str | None
    created_at: datetime
    updated_at: datetime


class LinkCreateResponse(LinkResponse):
    """Response for POST /links: the stored link plus whether AI processing succeeded."""

    ai_available: bool


class LinkDeleteResponse(BaseModel):
    """Confirmation returned by DELETE /links/{id}."""

    message: str


class LinkStatsResponse(CamelModel):
    """Dashboard counters for the current user."""

    total_links: int
    this_week: int
    categories: int
    searches: int
