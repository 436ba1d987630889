"""
Модуль для загрузки и валидации конфигурации краулера SiteCrawl.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
)

__all__ = ("CrawlerConfig", "load_config", "DEFAULT_REPORT_NAME")

DEFAULT_REPORT_NAME = "report.csv"


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: HttpUrl = Field(..., description="Стартовый URL обхода.")
    max_concurrency: int = Field(5, ge=1, description="Максимум одновременных запросов.")
    max_pages: int = Field(20, description="Максимум различных страниц за обход (минимум 1).")
    timeout: Optional[float] = Field(None, gt=0, description="Таймаут сессии aiohttp (секунд).")
    user_agent: str = Field("SiteCrawl/0.1", min_length=1, description="Заголовок User-Agent.")
    abort_on_limit: bool = Field(
        False, description="Прерывать запросы в полёте при исчерпании лимита страниц."
    )
    report_path: Path = Field(Path(DEFAULT_REPORT_NAME), description="Путь к CSV-отчёту.")

    @field_validator("max_pages", mode="after")
    @classmethod
    def _clamp_max_pages(cls, v: int) -> int:
        return max(1, v)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlerConfig:
    """
    Читает YAML или JSON (если путь задан), накладывает overrides со значением
    не None и возвращает проверенный объект CrawlerConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    data: dict[str, Any] = {}
    if path is not None:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

        suffix = path_obj.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = _read_yaml(path_obj)
        elif suffix == ".json":
            data = _read_json(path_obj)
        else:
            raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlerConfig(**data)
