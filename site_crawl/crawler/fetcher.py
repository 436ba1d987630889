# site_crawl/crawler/fetcher.py
"""
Fetcher module: one GET per call with status and content-type checks.

No retries happen here; the caller decides what a failure means.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession

from site_crawl.errors import (
    CrawlCancelledError,
    FetchError,
    HTTPStatusError,
    UnsupportedContentError,
)

__all__ = ("Fetcher", "is_markup")

_MARKUP_TYPES = ("application/xhtml+xml", "application/xml")


def is_markup(content_type: Optional[str]) -> bool:
    """True for ``text/*`` and XHTML/XML media types; False when missing."""
    if not content_type:
        return False
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime.startswith("text/") or mime in _MARKUP_TYPES


class Fetcher:
    """Fetches page markup through a shared aiohttp session."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str, cancel: Optional[asyncio.Event] = None) -> str:
        """
        Return the body of *url* as text.

        Raises HTTPStatusError for 4xx/5xx, UnsupportedContentError for
        non-markup responses, FetchError for transport failures and
        CrawlCancelledError once *cancel* is set.
        """
        if cancel is not None and cancel.is_set():
            raise CrawlCancelledError(url)
        request = asyncio.ensure_future(self._get(url))
        if cancel is None:
            return await request

        waiter = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait({request, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not request.done():
                request.cancel()
        if request in done:
            return request.result()
        await asyncio.gather(request, return_exceptions=True)
        raise CrawlCancelledError(url)

    async def _get(self, url: str) -> str:
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                if resp.status >= 400:
                    raise HTTPStatusError(url, resp.status)
                ctype = resp.headers.get("Content-Type")
                if not is_markup(ctype):
                    raise UnsupportedContentError(url, ctype)
                return await resp.text(errors="replace")
        except (ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc
