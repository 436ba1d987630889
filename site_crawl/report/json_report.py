# site_crawl/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteCrawl.

Сериализация результата обхода в файл.
"""
import json
from pathlib import Path
from typing import Iterable, Mapping, Union

from site_crawl.crawler.models import PageRecord
from site_crawl.report.csv_report import HEADERS


def render_json(
    pages: Union[Mapping[str, PageRecord], Iterable[PageRecord]],
    output_path: Union[Path, str],
) -> Path:
    """
    Сохраняет страницы в формате JSON по указанному пути.

    Пустой результат сохраняется как ``[]``.

    Пример:
    ```python
    from site_crawl.report.json_report import render_json
    report_path = render_json(pages, 'reports/report.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    records = pages.values() if isinstance(pages, Mapping) else pages
    data = [
        dict(zip(HEADERS, (p.url, p.h1, p.first_paragraph, list(p.outgoing_links), list(p.image_urls))))
        for p in records
    ]

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
