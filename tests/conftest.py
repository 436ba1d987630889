# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Dict, List, Optional, Union

import pytest
import pytest_asyncio
from aiohttp import web

from site_crawl.config import CrawlerConfig
from site_crawl.errors import CrawlCancelledError, HTTPStatusError

BASE = "https://example.com/"


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


def html_page(*links: str, h1: str = "", paragraph: str = "", images: tuple[str, ...] = ()) -> str:
    """Build a small HTML document with the given links and images."""
    body = ""
    if h1:
        body += f"<h1>{h1}</h1>"
    if paragraph:
        body += f"<p>{paragraph}</p>"
    body += "".join(f'<a href="{href}">link</a>' for href in links)
    body += "".join(f'<img src="{src}">' for src in images)
    return f"<html><body>{body}</body></html>"


class FakeFetcher:
    """
    In-memory stand-in for :class:`site_crawl.crawler.fetcher.Fetcher`.

    ``pages`` maps absolute URL → HTML (or an int status to fail with);
    unknown URLs fail with 404. Records calls, peak concurrency and
    fetches aborted by the cancel signal.
    """

    def __init__(
        self,
        pages: Dict[str, Union[str, int]],
        delay: float = 0.0,
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.pages = pages
        self.delay = delay
        self.delays = delays or {}
        self.calls: List[str] = []
        self.cancelled: List[str] = []
        self.in_flight = 0
        self.peak = 0

    async def fetch(self, url: str, cancel: Optional[asyncio.Event] = None) -> str:
        if cancel is not None and cancel.is_set():
            raise CrawlCancelledError(url)
        self.calls.append(url)
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            delay = self.delays.get(url, self.delay)
            if cancel is None:
                await asyncio.sleep(delay)
            else:
                try:
                    await asyncio.wait_for(cancel.wait(), timeout=delay)
                except asyncio.TimeoutError:
                    pass
                else:
                    self.cancelled.append(url)
                    raise CrawlCancelledError(url)
        finally:
            self.in_flight -= 1

        body = self.pages.get(url, 404)
        if isinstance(body, int):
            raise HTTPStatusError(url, body)
        return body


@pytest.fixture()
def make_config() -> Callable[..., CrawlerConfig]:
    """Return a factory for CrawlerConfig rooted at ``BASE``."""

    def _make(**overrides) -> CrawlerConfig:
        data = {"base_url": BASE, "max_concurrency": 5, "max_pages": 20}
        data.update(overrides)
        return CrawlerConfig(**data)

    return _make


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@pytest_asyncio.fixture
async def serve_routes(unused_tcp_port_factory) -> AsyncIterator[Callable[[Dict[str, Handler]], Awaitable[str]]]:
    """Start throwaway aiohttp apps; yield a starter returning the base URL."""
    runners: list[web.AppRunner] = []

    async def _serve(routes: Dict[str, Handler]) -> str:
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_get(path, handler)
        runner = web.AppRunner(app)
        await runner.setup()
        runners.append(runner)
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        return f"http://127.0.0.1:{port}"

    try:
        yield _serve
    finally:
        for runner in runners:
            await runner.cleanup()
