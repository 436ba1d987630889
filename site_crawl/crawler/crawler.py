from __future__ import annotations

import asyncio
import time
from typing import Callable, Dict, Optional

from aiohttp import ClientSession, ClientTimeout

from site_crawl.config import CrawlerConfig
from site_crawl.crawler.extractor import extract_page_data
from site_crawl.crawler.fetcher import Fetcher
from site_crawl.crawler.models import PageRecord
from site_crawl.crawler.normalizer import host_key, normalize_url
from site_crawl.crawler.state import Admission, CrawlState
from site_crawl.errors import CrawlCancelledError, FetchError, MalformedAddressError
from site_crawl.logger import get_logger

__all__ = ("AsyncCrawler",)

Extractor = Callable[[str, str], PageRecord]


class AsyncCrawler:
    """
    Асинхронный краулер в пределах одного хоста.

    Each discovered link becomes its own task in a single TaskGroup, so
    ``crawl()`` returns only once every transitively spawned branch is done.
    Only the fetch itself is throttled by the semaphore in :class:`CrawlState`.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: Optional[Fetcher] = None,
        extractor: Extractor = extract_page_data,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.extract = extractor
        self.session: Optional[ClientSession] = None
        self.state: Optional[CrawlState] = None
        self.logger = get_logger("crawler")
        self._seed_host = ""

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
            )
            self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> Dict[str, PageRecord]:
        """Crawl from ``config.base_url``; return pages keyed by normalized URL."""
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized; use 'async with AsyncCrawler(...)'")
        seed = str(self.config.base_url)
        self._seed_host = host_key(seed)
        state = CrawlState(
            self.config.max_pages,
            self.config.max_concurrency,
            abort_on_limit=self.config.abort_on_limit,
        )
        self.state = state

        self.logger.info(
            "Старт обхода: %s (concurrency=%d, max_pages=%d)",
            seed, state.max_concurrency, state.max_pages,
        )
        start = time.monotonic()
        async with asyncio.TaskGroup() as group:
            group.create_task(self._visit(seed, state, group))
        pages = state.snapshot()

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с (%.2f стр/с)",
            len(pages), duration, len(pages) / duration if duration else 0,
        )
        failures = state.failures
        if failures:
            self.logger.info("С ошибками: %d", len(failures))
        return pages

    async def _visit(self, url: str, state: CrawlState, group: asyncio.TaskGroup) -> None:
        if state.cancel.is_set():
            return
        try:
            key = normalize_url(url)
            host = host_key(url)
        except MalformedAddressError as exc:
            self.logger.warning("Skipping %s", exc)
            return
        if host != self._seed_host:
            self.logger.debug("Out of scope: %s", url)
            return

        admission = await state.admit(key)
        if admission is not Admission.ADMITTED:
            self.logger.debug("Rejected (%s): %s", admission.value, url)
            return

        try:
            record = await self._process(url, state)
        except CrawlCancelledError:
            self.logger.debug("Cancelled: %s", url)
            return
        except FetchError as exc:
            self.logger.warning("Failed %s", exc)
            await state.fail(key, str(exc))
            return
        except Exception as exc:
            self.logger.exception("Unexpected error while crawling %s", url)
            await state.fail(key, repr(exc))
            return

        await state.record(key, record)
        self.logger.debug("Visited %s (%d links)", url, len(record.outgoing_links))
        if state.limit_reached or state.cancel.is_set():
            return
        for link in record.outgoing_links:
            group.create_task(self._visit(link, state, group))

    async def _process(self, url: str, state: CrawlState) -> PageRecord:
        async with state.fetch_gate:
            html = await self.fetcher.fetch(url, state.cancel)
        return self.extract(html, url)
