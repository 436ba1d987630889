"""
Page data extraction for SiteCrawl: title, lead paragraph, links and images.
"""
from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from site_crawl.crawler.models import PageRecord
from site_crawl.crawler.normalizer import resolve_url
from site_crawl.logger import get_logger

__all__ = (
    "get_h1",
    "get_first_paragraph",
    "get_urls",
    "get_images",
    "extract_page_data",
)

log = get_logger("extractor")


def _soup(html: str) -> Optional[BeautifulSoup]:
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        log.warning("Unparseable markup: %s", exc)
        return None


def _text(tag: Optional[Tag]) -> str:
    return tag.get_text().strip() if tag is not None else ""


def _base_url(soup: BeautifulSoup, page_url: str) -> str:
    """Page address, or the declared ``<base href>`` resolved against it."""
    base = soup.find("base", href=True)
    if isinstance(base, Tag):
        resolved = resolve_url(page_url, str(base["href"]))
        if resolved:
            return resolved
    return page_url


def _collect(soup: BeautifulSoup, page_url: str, tag_name: str, attr: str) -> List[str]:
    base = _base_url(soup, page_url)
    found: List[str] = []
    for tag in soup.find_all(tag_name, attrs={attr: True}):
        if not isinstance(tag, Tag):
            continue
        value = tag.get(attr)
        if not isinstance(value, str):
            continue
        absolute = resolve_url(base, value)
        if absolute is not None:
            found.append(absolute)
    return found


def get_h1(html: str) -> str:
    """Text of the first ``<h1>`` or ``""``."""
    soup = _soup(html)
    return _text(soup.find("h1")) if soup else ""


def get_first_paragraph(html: str) -> str:
    """First ``<p>`` inside ``<main>``, else the first ``<p>`` anywhere."""
    soup = _soup(html)
    return _first_paragraph(soup) if soup else ""


def _first_paragraph(soup: BeautifulSoup) -> str:
    main = soup.find("main")
    paragraph = main.find("p") if isinstance(main, Tag) else None
    if paragraph is None:
        paragraph = soup.find("p")
    return _text(paragraph)


def get_urls(html: str, page_url: str) -> List[str]:
    """Absolute targets of every ``<a href>`` in document order."""
    soup = _soup(html)
    return _collect(soup, page_url, "a", "href") if soup else []


def get_images(html: str, page_url: str) -> List[str]:
    """Absolute sources of every ``<img src>`` in document order."""
    soup = _soup(html)
    return _collect(soup, page_url, "img", "src") if soup else []


def extract_page_data(html: str, page_url: str) -> PageRecord:
    """
    Build a :class:`PageRecord` from raw markup.

    Never raises on bad markup: whatever cannot be parsed is left empty.
    """
    soup = _soup(html)
    if soup is None:
        return PageRecord(url=page_url)
    return PageRecord(
        url=page_url,
        h1=_text(soup.find("h1")),
        first_paragraph=_first_paragraph(soup),
        outgoing_links=tuple(_collect(soup, page_url, "a", "href")),
        image_urls=tuple(_collect(soup, page_url, "img", "src")),
    )
