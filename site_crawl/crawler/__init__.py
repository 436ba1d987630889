"""site_crawl.crawler: обход сайта, загрузка и разбор страниц."""

from .crawler import AsyncCrawler
from .extractor import extract_page_data
from .fetcher import Fetcher
from .models import PageRecord
from .normalizer import host_key, normalize_url, resolve_url
from .state import Admission, CrawlState

__all__ = [
    "AsyncCrawler",
    "Admission",
    "CrawlState",
    "Fetcher",
    "PageRecord",
    "extract_page_data",
    "host_key",
    "normalize_url",
    "resolve_url",
]
