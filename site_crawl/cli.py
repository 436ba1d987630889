#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteCrawl через командную строку.

Использование:
  crawl [OPTIONS] SEED_URL [MAX_CONCURRENCY] [MAX_PAGES]

Аргументы:
  SEED_URL            Стартовый URL (обходятся только страницы того же хоста)
  MAX_CONCURRENCY     Макс. число одновременных запросов (default: 5)
  MAX_PAGES           Макс. число различных страниц (default: 20, минимум 1)

Опции:
  --config PATH       YAML/JSON-конфиг со значениями по умолчанию
  --output PATH       Путь к CSV-отчёту (default: report.csv)
  --json PATH         Дополнительно сохранить JSON-отчёт
  --abort-on-limit    Прерывать запросы в полёте при исчерпании лимита
  --crawl-timeout SEC Таймаут всего обхода (секунд)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --version, -v       Показать версию SiteCrawl

Пример:
  crawl https://example.com 3 50 --output reports/example.csv
"""
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

import click
from pydantic import ValidationError

from site_crawl import __version__
from site_crawl.config import load_config
from site_crawl.logger import init_logging
from site_crawl.report.csv_report import write_csv_report
from site_crawl.report.json_report import render_json
from site_crawl.scanner import start_crawl

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
USAGE = "Usage: crawl <seed_url> [max_concurrency=5] [max_pages=20]"


def print_error(message: str, *, usage: bool = False):
    click.secho(message, fg='red', err=True)
    if usage:
        click.echo(USAGE, err=True)
    sys.exit(1)


def _parse_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        print_error(f'{name} должно быть целым числом, получено {value!r}', usage=True)


@click.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteCrawl, version %(version)s')
@click.argument('args', nargs=-1, metavar='SEED_URL [MAX_CONCURRENCY] [MAX_PAGES]')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML/JSON-конфиг со значениями по умолчанию.'
)
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к CSV-отчёту (default: report.csv)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Дополнительно сохранить JSON-отчёт в файл'
)
@click.option(
    '--abort-on-limit', 'abort_on_limit',
    is_flag=True,
    help='Прерывать запросы в полёте, когда лимит страниц исчерпан'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
def cli(args, config_path, output, json_output, abort_on_limit, crawl_timeout, log_level, log_file):
    """Обойти сайт начиная с SEED_URL и сохранить CSV-отчёт."""
    if not 1 <= len(args) <= 3:
        print_error(f'Ожидается от 1 до 3 аргументов, получено {len(args)}', usage=True)

    seed = args[0]
    max_concurrency = _parse_int(args[1], 'max_concurrency') if len(args) > 1 else None
    max_pages = _parse_int(args[2], 'max_pages') if len(args) > 2 else None

    init_logging(level=log_level, log_file=str(log_file) if log_file else None)
    try:
        cfg = load_config(
            config_path,
            base_url=seed,
            max_concurrency=max_concurrency,
            max_pages=max_pages,
            abort_on_limit=abort_on_limit or None,
            report_path=output,
        )
    except ValidationError as e:
        print_error(f'Неверные аргументы: {e}', usage=True)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    click.echo(f'Starting crawl of {cfg.base_url}...')
    try:
        if crawl_timeout:
            pages = asyncio.run(
                asyncio.wait_for(start_crawl(cfg), timeout=crawl_timeout)
            )
        else:
            pages = asyncio.run(start_crawl(cfg))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    click.echo(f'Crawled {len(pages)} page(s)')

    try:
        saved = write_csv_report(pages, cfg.report_path)
    except OSError as e:
        click.secho(f'Ошибка при сохранении CSV: {e}', fg='red', err=True)
    else:
        click.echo(f'CSV report: {saved}' if saved else 'No data to write to CSV')

    if json_output:
        try:
            saved_json = render_json(pages, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            click.secho(f'Ошибка при сохранении JSON: {e}', fg='red', err=True)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Console entry point: click usage errors exit with status 1, not 2."""
    try:
        code = cli.main(args=list(argv) if argv is not None else None, prog_name='crawl', standalone_mode=False)
    except click.UsageError as e:
        e.show()
        sys.exit(1)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        click.echo('Aborted!', err=True)
        sys.exit(1)
    sys.exit(code or 0)


if __name__ == "__main__":
    main()
