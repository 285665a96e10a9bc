"""Gemini-backed summaries and embeddings for saved links."""
import logging
from functools import lru_cache

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from core.config import get_settings
from models.link import EMBEDDING_DIMENSIONS
from services.exceptions import AIError

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = """Please provide a concise summary of this article titled "{title}":

{content}

Focus on the key points, main arguments, and practical insights. Keep it under 200 words \
and make it informative for someone building a knowledge base."""


@lru_cache
def get_genai_client(api_key: str) -> genai.Client:
    """Get or create a cached Gemini client for the given API key."""
    return genai.Client(api_key=api_key)


def _client() -> genai.Client:
    api_key = get_settings().gemini_api_key
    if not api_key:
        raise AIError("GEMINI_API_KEY is not configured")
    return get_genai_client(api_key)


def zero_embedding() -> list[float]:
    """Placeholder embedding stored when AI is unavailable; keeps vector dimensions uniform."""
    return [0.0] * EMBEDDING_DIMENSIONS


async def generate_summary(content: str, title: str) -> str:
    """
    Summarize page content with the configured Gemini model.

    Raises:
        AIError: If the API key is missing, the provider call fails, or the
            model returns no text.
    """
    client = _client()
    prompt = SUMMARY_PROMPT.format(title=title, content=content)
    try:
        response = await client.aio.models.generate_content(
            model=get_settings().summary_model,
            contents=prompt,
        )
    except (genai_errors.APIError, httpx.HTTPError) as e:
        logger.error("Error generating summary: %s", e)
        raise AIError(f"Summary generation failed: {e}") from e

    summary = (response.text or "").strip()
    if not summary:
        raise AIError("Summary generation returned no text")
    return summary


async def generate_embedding(text: str) -> list[float]:
    """
    Embed text as a vector of EMBEDDING_DIMENSIONS floats.

    Used for both link content and search queries.

    Raises:
        AIError: If the API key is missing, the provider call fails, or the
            returned vector has the wrong dimensionality.
    """
    client = _client()
    try:
        response = await client.aio.models.embed_content(
            model=get_settings().embedding_model,
            contents=text,
            config=types.EmbedContentConfig(output_dimensionality=EMBEDDING_DIMENSIONS),
        )
    except (genai_errors.APIError, httpx.HTTPError) as e:
        logger.error("Error generating embedding: %s", e)
        raise AIError(f"Embedding generation failed: {e}") from e

    values = response.embeddings[0].values if response.embeddings else None
    if not values or len(values) != EMBEDDING_DIMENSIONS:
        raise AIError(
            f"Embedding has {len(values or [])} dimensions, expected {EMBEDDING_DIMENSIONS}",
        )
    return list(values)
