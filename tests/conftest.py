# File: tests/conftest.py
import asyncio
from collections.abc import AsyncIterator
from typing import Dict, List, Mapping, Optional, Union

import pytest
from aiohttp import web

from address_scout.cache import FixedSizeCache
from address_scout.config import ScraperConfig
from address_scout.crawler.scraper import AddressScraper
from address_scout.errors import FetchFailed

ADDR_1 = "0x1111111111111111111111111111111111111111"
ADDR_2 = "0x2222222222222222222222222222222222222222"
ADDR_3 = "0x3333333333333333333333333333333333333333"

_Response = Union[str, bytes, Exception]


class FakeFetcher:
    """In-memory stand-in for Fetcher: URL -> body (or exception to raise)."""

    def __init__(
        self,
        responses: Mapping[str, _Response],
        delays: Optional[Mapping[str, float]] = None,
        default_delay: float = 0.0,
    ) -> None:
        self.responses = dict(responses)
        self.delays = dict(delays or {})
        self.default_delay = default_delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(url, self.default_delay)
            if delay:
                await asyncio.sleep(delay)
            value = self.responses.get(url)
            if value is None:
                raise FetchFailed(url, "connection refused")
            if isinstance(value, Exception):
                raise value
            return value.encode("utf-8") if isinstance(value, str) else value
        finally:
            self.in_flight -= 1


@pytest.fixture()
def config() -> ScraperConfig:
    """Basic valid ScraperConfig for tests."""
    return ScraperConfig(timeout=2.0, cache_size=10, concurrency=4, user_agent="TestAgent/1.0")


@pytest.fixture()
def make_scraper(config):
    """Factory building an AddressScraper over a FakeFetcher and fresh caches."""

    def _make(responses: Dict[str, _Response], cfg: Optional[ScraperConfig] = None, **kwargs):
        fetcher = kwargs.pop("fetcher", None) or FakeFetcher(responses, **kwargs.pop("fetcher_kwargs", {}))
        cfg = cfg or config
        scraper = AddressScraper(
            cfg,
            fetcher=fetcher,
            target_cache=FixedSizeCache(cfg.cache_size),
            script_cache=FixedSizeCache(cfg.cache_size),
            **kwargs,
        )
        return scraper, fetcher

    return _make


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()
