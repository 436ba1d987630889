"""Exception hierarchy shared by the crawler components."""
from __future__ import annotations

from typing import Optional

__all__ = (
    "CrawlError",
    "MalformedAddressError",
    "FetchError",
    "HTTPStatusError",
    "UnsupportedContentError",
    "CrawlCancelledError",
)


class CrawlError(Exception):
    """Base class for every error raised by SiteCrawl."""


class MalformedAddressError(CrawlError, ValueError):
    """The address cannot be parsed, so no dedup key can be computed for it."""

    def __init__(self, url: str, reason: str = "malformed address") -> None:
        super().__init__(f"{reason}: {url!r}")
        self.url = url
        self.reason = reason


class FetchError(CrawlError):
    """Retrieval of a page failed (transport error, bad status or content)."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url


class HTTPStatusError(FetchError):
    """Server answered with a 4xx/5xx status."""

    def __init__(self, url: str, status: int) -> None:
        super().__init__(url, f"HTTP {status}")
        self.status = status


class UnsupportedContentError(FetchError):
    """Response is not markup/text, or declares no content type at all."""

    def __init__(self, url: str, content_type: Optional[str]) -> None:
        super().__init__(url, f"unsupported content type {content_type or '<missing>'}")
        self.content_type = content_type


class CrawlCancelledError(CrawlError):
    """The crawl-wide cancellation signal fired before the fetch completed.

    Expected during shutdown: callers treat it as a quiet end of the branch.
    """

    def __init__(self, url: str) -> None:
        super().__init__(f"fetch cancelled: {url}")
        self.url = url
