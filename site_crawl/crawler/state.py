"""
Shared state of a single crawl: visited keys, page budget, fetch gate, cancel signal.
"""
from __future__ import annotations

import asyncio
import enum
from typing import Dict, Set

from site_crawl.crawler.models import PageRecord

__all__ = ("Admission", "CrawlState")


class Admission(enum.Enum):
    """Outcome of trying to claim a normalized key."""

    ADMITTED = "admitted"
    DUPLICATE = "duplicate"
    OVER_BUDGET = "over_budget"


class CrawlState:
    """
    State shared by every branch of one crawl.

    All reads and writes of the claimed keys, the admitted counter and the
    limit flag go through ``_lock``; a key is claimed at most once and a
    record is stored at most once per key.
    """

    def __init__(self, max_pages: int, max_concurrency: int, *, abort_on_limit: bool = False) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.max_pages = max(1, max_pages)
        self.max_concurrency = max_concurrency
        self.abort_on_limit = abort_on_limit
        self.cancel = asyncio.Event()
        self.fetch_gate = asyncio.Semaphore(max_concurrency)
        self._lock = asyncio.Lock()
        self._claimed: Set[str] = set()
        self._pages: Dict[str, PageRecord] = {}
        self._failures: Dict[str, str] = {}
        self._limit_reached = False

    @property
    def admitted(self) -> int:
        return len(self._claimed)

    @property
    def limit_reached(self) -> bool:
        return self._limit_reached

    @property
    def failures(self) -> Dict[str, str]:
        return dict(self._failures)

    async def admit(self, key: str) -> Admission:
        """Atomically claim *key* if it is new and the budget allows it."""
        async with self._lock:
            if key in self._claimed:
                return Admission.DUPLICATE
            if self._limit_reached:
                if self.abort_on_limit:
                    self.cancel.set()
                return Admission.OVER_BUDGET
            self._claimed.add(key)
            if len(self._claimed) >= self.max_pages:
                self._limit_reached = True
            return Admission.ADMITTED

    async def record(self, key: str, page: PageRecord) -> None:
        async with self._lock:
            if key not in self._claimed:
                raise KeyError(f"record for unclaimed key {key!r}")
            if key in self._pages:
                raise KeyError(f"duplicate record for {key!r}")
            self._pages[key] = page

    async def fail(self, key: str, reason: str) -> None:
        async with self._lock:
            self._failures.setdefault(key, reason)

    def snapshot(self) -> Dict[str, PageRecord]:
        """Copy of the visited pages, in completion order."""
        return dict(self._pages)
