"""
Data models for the SiteCrawl crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class PageRecord:
    """Structured data extracted from one page; immutable once built."""

    url: str
    h1: str = ""
    first_paragraph: str = ""
    outgoing_links: Tuple[str, ...] = ()
    image_urls: Tuple[str, ...] = ()
