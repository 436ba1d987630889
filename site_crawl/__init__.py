# site_crawl/__init__.py
"""
SiteCrawl package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

from .cli import cli, main  # noqa: E402

__all__ = ["__version__", "cli", "main"]
