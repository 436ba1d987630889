"""site_crawl.report: Утилиты для сохранения результатов обхода (CSV и JSON)."""

from __future__ import annotations

from .csv_report import HEADERS, write_csv_report
from .json_report import render_json

__all__ = ["HEADERS", "write_csv_report", "render_json"]
