"""
AddressScout package initializer.
Defines package version and exposes the scraper API and CLI.
"""
__version__ = "0.1.0"

from address_scout.crawler.models import AddressInfo, ContentType
from address_scout.crawler.scraper import AddressScraper
from address_scout.engine import Engine, start_scrape

# Expose CLI entry point
from .cli import cli  # экспорт для pytest

__all__ = ["AddressInfo", "AddressScraper", "ContentType", "Engine", "cli", "start_scrape", "__version__"]
