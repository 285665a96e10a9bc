"""Shared exceptions for service layer operations."""


class ValidationError(Exception):
    """
    Raised when caller-supplied input is malformed.

    Covers invalid or missing URLs, empty search queries, and similar input
    problems the client can fix. Routers translate it into HTTP 400.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class FetchError(Exception):
    """Raised when a page cannot be retrieved (network failure or non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ScrapeError(Exception):
    """Raised when fetching or parsing a page fails as a whole."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to scrape URL: {reason}")


class AIError(Exception):
    """Raised when the AI provider cannot produce a summary or embedding."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
