# File: address_scout/engine.py
"""address_scout.engine: Orchestration layer для запуска скрейпинга из CLI и HTTP API."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from address_scout.aggregator import ScrapeReport
from address_scout.cache import FixedSizeCache
from address_scout.config import ScraperConfig
from address_scout.crawler.models import AddressInfo
from address_scout.crawler.scraper import AddressScraper
from address_scout.logger import logger

__all__ = ["Engine", "start_scrape"]


class Engine:
    """Фасад для CLI и тестов: конфиг, общие кэши и запуск скрейпинга.

    Кэши живут столько же, сколько Engine, и переиспользуются между вызовами.
    """

    def __init__(self, config: Optional[ScraperConfig] = None) -> None:
        self.config = config or ScraperConfig()
        self.target_cache = FixedSizeCache(self.config.cache_size)
        self.script_cache = FixedSizeCache(self.config.cache_size)

    def scraper(self) -> AddressScraper:
        """Новый AddressScraper поверх общих кэшей Engine."""
        return AddressScraper(
            self.config,
            target_cache=self.target_cache,
            script_cache=self.script_cache,
        )

    async def scrape(self, targets: Sequence[str]) -> List[AddressInfo]:
        async with self.scraper() as scraper:
            return await scraper.scrape(targets)

    def start_scrape(self, targets: Sequence[str], timeout: Optional[float] = None) -> ScrapeReport:
        """Синхронный запуск с необязательным общим таймаутом; возвращает ScrapeReport."""
        logger.info("Starting scrape of %d target(s)…", len(targets))
        try:
            if timeout:
                results = asyncio.run(asyncio.wait_for(self.scrape(targets), timeout=timeout))
            else:
                results = asyncio.run(self.scrape(targets))
        except asyncio.TimeoutError:
            logger.error("Scraping did not finish within %s seconds", timeout)
            raise
        return ScrapeReport(targets=list(targets), results=results)


async def start_scrape(cfg: ScraperConfig, targets: Sequence[str]) -> List[AddressInfo]:
    """Запускает скрейпер в контексте и возвращает список AddressInfo."""
    return await Engine(cfg).scrape(targets)
