# site_crawl/report/csv_report.py

"""
Генерация CSV-отчёта для проекта SiteCrawl.

Одна строка на страницу; списки ссылок и изображений склеиваются через "; ".
"""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from site_crawl.config import DEFAULT_REPORT_NAME
from site_crawl.crawler.models import PageRecord
from site_crawl.logger import get_logger

__all__ = ("HEADERS", "LIST_SEPARATOR", "write_csv_report")

HEADERS = ("page_url", "h1", "first_paragraph", "outgoing_link_urls", "image_urls")
LIST_SEPARATOR = "; "

log = get_logger("report")


def _cell(text: str) -> str:
    # csv quotes only the terminator "\n"; a bare "\r" would go out unquoted
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _row(page: PageRecord) -> list[str]:
    return [
        _cell(page.url),
        _cell(page.h1),
        _cell(page.first_paragraph),
        _cell(LIST_SEPARATOR.join(page.outgoing_links)),
        _cell(LIST_SEPARATOR.join(page.image_urls)),
    ]


def write_csv_report(
    pages: Union[Mapping[str, PageRecord], Iterable[PageRecord]],
    output_path: Union[Path, str] = DEFAULT_REPORT_NAME,
) -> Optional[Path]:
    """
    Сохраняет страницы в CSV по указанному пути.

    :param pages: результат обхода (mapping ключ -> PageRecord) или просто PageRecord'ы
    :param output_path: путь к CSV-файлу (по умолчанию report.csv в текущей папке)
    :return: Path сохранённого файла или None, если данных нет

    Ошибки записи (OSError) пробрасываются вызывающему коду.
    """
    records = list(pages.values() if isinstance(pages, Mapping) else pages)
    if not records:
        log.info("No data to write to CSV")
        return None

    output = Path(output_path).resolve()
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
        writer.writerow(HEADERS)
        writer.writerows(_row(page) for page in records)

    log.info("CSV report written to %s (%d rows)", output, len(records))
    return output
