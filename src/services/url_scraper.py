"""URL scraping service for fetching pages and extracting link metadata."""
import ipaddress
import logging
import math
import re
import socket
from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from services.exceptions import FetchError, ScrapeError

logger = logging.getLogger(__name__)

USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
BROWSER_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
    'DNT': '1',
    'Upgrade-Insecure-Requests': '1',
    'Sec-Fetch-Dest': 'document',
    'Sec-Fetch-Mode': 'navigate',
    'Sec-Fetch-Site': 'none',
    'Cache-Control': 'max-age=0',
}
DEFAULT_TIMEOUT = 10.0

MAX_CONTENT_LENGTH = 10_000
WORDS_PER_MINUTE = 200

# Tried in order; the first selector whose matches contain text wins
CONTENT_SELECTORS = (
    'article',
    '.content',
    '.post-content',
    '.entry-content',
    '.article-content',
    'main',
    '.main-content',
)
# Stripped before falling back to whole-document text
BOILERPLATE_SELECTORS = 'script, style, nav, footer, header, .sidebar, .menu'
FAVICON_SELECTORS = (
    'link[rel="icon"]',
    'link[rel="shortcut icon"]',
    'link[rel="apple-touch-icon"]',
)

_WHITESPACE_RE = re.compile(r'\s+')


class SSRFBlockedError(Exception):
    """Raised when a URL targets a private/internal network address."""

    pass


@dataclass
class ScrapedContent:
    """Metadata extracted from a page (or synthesized when scraping fails)."""

    title: str
    content: str
    favicon: str | None
    domain: str
    read_time: str | None


def is_private_ip(ip_str: str) -> bool:
    """
    Check if an IP address is private, loopback, or otherwise internal.

    Args:
        ip_str: IP address string (IPv4 or IPv6).

    Returns:
        True if the IP is private/internal, False if public.
    """
    try:
        ip = ipaddress.ip_address(ip_str)
        return (
            ip.is_private
            or ip.is_loopback
            or ip.is_link_local
            or ip.is_multicast
            or ip.is_reserved
            or ip.is_unspecified
        )
    except ValueError:
        # Unparseable addresses are treated as internal
        return True


def validate_url_not_private(url: str) -> None:
    """
    Validate that a URL does not target a private/internal network.

    Resolves the hostname to check the actual IP address, preventing
    DNS rebinding attacks where a hostname resolves to an internal IP.

    Raises:
        SSRFBlockedError: If the URL targets a private network.
        ValueError: If the URL is malformed or the hostname does not resolve.
    """
    hostname = urlparse(url).hostname

    if not hostname:
        raise ValueError(f"Invalid URL (no hostname): {url}")

    if hostname.lower() in ('localhost', 'localhost.localdomain'):
        raise SSRFBlockedError(f"Blocked request to localhost: {url}")

    try:
        addrinfo = socket.getaddrinfo(hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except socket.gaierror as e:
        raise ValueError(f"Could not resolve hostname: {hostname}") from e

    for _, _, _, _, sockaddr in addrinfo:
        ip_str = sockaddr[0]
        if is_private_ip(ip_str):
            raise SSRFBlockedError(
                f"Blocked request to private/internal address: {url} resolves to {ip_str}",
            )


def get_domain(url: str) -> str:
    """Return the host component of a URL ('' if it has none)."""
    return urlparse(url).hostname or ''


def fallback_favicon_url(domain: str) -> str:
    """Favicon-service URL used when a page declares no icon."""
    return f"https://www.google.com/s2/favicons?domain={domain}&sz=32"


def normalize_content(text: str) -> str:
    """Collapse whitespace runs and cap the length at MAX_CONTENT_LENGTH (plus an ellipsis)."""
    text = _WHITESPACE_RE.sub(' ', text).strip()
    if len(text) > MAX_CONTENT_LENGTH:
        text = text[:MAX_CONTENT_LENGTH] + '...'
    return text


def estimate_read_time(content: str) -> str:
    """
    Estimate read time at 200 words per minute.

    Always at least one minute, e.g. '3 min read'.
    """
    word_count = len(content.split())
    # Half-minutes round up
    minutes = max(1, math.floor(word_count / WORDS_PER_MINUTE + 0.5))
    return f"{minutes} min read"


async def fetch_url(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:  # noqa: ASYNC109
    """
    Fetch the HTML of a URL with browser-like request headers.

    Follows redirects. Both the requested and the final URL must resolve to
    public addresses.

    Args:
        url:
            The URL to fetch.
        timeout:
            Request timeout in seconds.

    Returns:
        The response body as text.

    Raises:
        FetchError: On blocked/unresolvable hosts, network failures, timeouts,
            or non-2xx responses (status_code is set for the latter).
    """
    try:
        validate_url_not_private(url)
    except (SSRFBlockedError, ValueError) as e:
        raise FetchError(str(e)) from e

    try:
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=timeout,
            headers=BROWSER_HEADERS,
            http2=True,
        ) as client:
            response = await client.get(url)
    except httpx.TimeoutException as e:
        raise FetchError("Request timed out") from e
    except httpx.RequestError as e:
        raise FetchError(f"Request failed: {e}") from e
    except (httpx.InvalidURL, OSError, OverflowError) as e:
        # Malformed ports and socket-level failures outside httpx's own errors
        raise FetchError(f"Request failed: {e}") from e

    final_url = str(response.url)
    if final_url != url:
        try:
            validate_url_not_private(final_url)
        except (SSRFBlockedError, ValueError) as e:
            raise FetchError(f"Redirect blocked: {e}", status_code=response.status_code) from e

    if not response.is_success:
        raise FetchError(
            f"HTTP {response.status_code}: {response.reason_phrase}",
            status_code=response.status_code,
        )

    return response.text


def _first_text(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str:
    # Text of every element matched by the first selector that yields any
    for selector in selectors:
        text = ' '.join(element.get_text(' ') for element in soup.select(selector))
        if text.strip():
            return text
    return ''


def extract_title(soup: BeautifulSoup) -> str:
    """
    Extract the page title.

    Priority:
    1. <title> tag
    2. <meta property="og:title">
    3. first <h1>
    4. 'Untitled'
    """
    title_tag = soup.find('title')
    if title_tag and title_tag.get_text().strip():
        return title_tag.get_text().strip()
    og_title = soup.find('meta', property='og:title')
    if og_title and og_title.get('content', '').strip():
        return og_title['content'].strip()
    heading = soup.find('h1')
    if heading and heading.get_text().strip():
        return heading.get_text().strip()
    return 'Untitled'


def extract_main_content(soup: BeautifulSoup) -> str:
    """
    Extract normalized main-body text.

    Uses the first content-region selector that yields text; otherwise strips
    navigation, scripts, styles and similar chrome and takes the document text.
    Note: the fallback mutates the soup.
    """
    content = _first_text(soup, CONTENT_SELECTORS)
    if not content:
        for element in soup.select(BOILERPLATE_SELECTORS):
            element.decompose()
        root = soup.body or soup
        content = root.get_text(' ')
    return normalize_content(content)


def extract_favicon(soup: BeautifulSoup, url: str, domain: str) -> str:
    """Return the declared icon (resolved against the page URL) or the favicon-service URL."""
    for selector in FAVICON_SELECTORS:
        link = soup.select_one(selector)
        if link and link.get('href', '').strip():
            return urljoin(url, link['href'].strip())
    return fallback_favicon_url(domain)


def extract_page(html: str, url: str) -> ScrapedContent:
    """
    Derive link metadata from raw HTML.

    Pure function with no I/O. Always returns best-effort values.

    Args:
        html:
            Raw HTML string to parse.
        url:
            The source URL, used for the domain and for resolving relative icons.
    """
    soup = BeautifulSoup(html, 'lxml')
    domain = get_domain(url)

    # Title and favicon come first; content extraction may strip elements
    title = extract_title(soup)
    favicon = extract_favicon(soup, url, domain)
    content = extract_main_content(soup)

    return ScrapedContent(
        title=title,
        content=content,
        favicon=favicon,
        domain=domain,
        read_time=estimate_read_time(content),
    )


async def scrape_url(url: str, timeout: float = DEFAULT_TIMEOUT) -> ScrapedContent:  # noqa: ASYNC109
    """
    Fetch a URL and extract its metadata.

    This is the scraping entry point for link ingestion.

    Raises:
        ScrapeError: If the page cannot be fetched or parsed.
    """
    try:
        html = await fetch_url(url, timeout)
        scraped = extract_page(html, url)
    except FetchError as e:
        raise ScrapeError(url, str(e)) from e
    except (ValueError, TypeError) as e:
        # Parser failures on malformed documents
        raise ScrapeError(url, f"Could not parse page: {e}") from e

    logger.debug("Scraped %s: %d characters of content", url, len(scraped.content))
    return scraped
