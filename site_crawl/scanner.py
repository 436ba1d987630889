"""
Модуль-обёртка для функции запуска обхода.
"""
from typing import Dict

from site_crawl.config import CrawlerConfig
from site_crawl.crawler.crawler import AsyncCrawler
from site_crawl.crawler.models import PageRecord


async def start_crawl(cfg: CrawlerConfig) -> Dict[str, PageRecord]:
    """
    Запускает асинхронный краулер в контексте и возвращает найденные страницы.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.

    Returns
    -------
    Dict[str, PageRecord]
        Страницы по нормализованному URL, в порядке завершения.
    """
    async with AsyncCrawler(cfg) as crawler:
        pages = await crawler.crawl()
    return pages

__all__ = ["start_crawl"]
