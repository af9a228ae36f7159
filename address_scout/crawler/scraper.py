# === FILE: address_scout/crawler/scraper.py ===
from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from aiohttp import ClientSession

from address_scout.aggregator import dedup
from address_scout.cache import FixedSizeCache
from address_scout.config import ScraperConfig
from address_scout.crawler.domain import DomainFilter
from address_scout.crawler.fetcher import ContentFetcher, Fetcher, open_session
from address_scout.crawler.models import AddressInfo, ContentType
from address_scout.errors import ScrapeError
from address_scout.parser.address_extractor import decode_body, extract_addresses
from address_scout.parser.html_parser import extract_scripts
from address_scout.utils import hostname_of, remove_duplicates, resolve_url

__all__ = ("AddressScraper",)


class AddressScraper:
    """Scrapes targets and their same-site scripts for addresses.

    Targets are processed one after another; the scripts of a single target go
    through a bounded pool of ``config.concurrency`` workers. A failing script
    only drops its own contribution, a failing target only its own results.

    Caches and the fetcher may be injected; otherwise fresh caches are created
    and the fetcher is built on an aiohttp session opened by ``__aenter__``.
    """

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        *,
        fetcher: Optional[ContentFetcher] = None,
        target_cache: Optional[FixedSizeCache] = None,
        script_cache: Optional[FixedSizeCache] = None,
        domain_filter: Optional[DomainFilter] = None,
    ) -> None:
        self.config = config or ScraperConfig()
        self.fetcher = fetcher
        self.target_cache = target_cache if target_cache is not None else FixedSizeCache(self.config.cache_size)
        self.script_cache = script_cache if script_cache is not None else FixedSizeCache(self.config.cache_size)
        self.domain_filter = domain_filter or DomainFilter(self.config.blacklist)
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger("AddressScout.scraper")

    async def __aenter__(self) -> AddressScraper:
        if self.fetcher is None:
            self.session = open_session(self.config)
            self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
            self.fetcher = None
        self.session = None

    async def scrape(self, targets: Sequence[str]) -> List[AddressInfo]:
        """Scrape every target and return the deduplicated findings."""
        start = time.monotonic()
        collected: List[AddressInfo] = []
        for target in targets:
            try:
                if self.config.target_timeout:
                    infos = await asyncio.wait_for(self.scrape_target(target), timeout=self.config.target_timeout)
                else:
                    infos = await self.scrape_target(target)
            except ScrapeError as exc:
                self.logger.warning("Error scraping target %s: %s", target, exc)
                continue
            except asyncio.TimeoutError:
                self.logger.warning("Target %s not finished within %s s", target, self.config.target_timeout)
                continue
            collected.extend(infos)
        results = dedup(collected)
        self.logger.info(
            "Scraped %d target(s): %d address record(s) in %.2f s",
            len(targets), len(results), time.monotonic() - start,
        )
        return results

    async def scrape_target(self, target: str) -> List[AddressInfo]:
        """Results for one target, from cache or freshly scraped (then cached)."""
        cached, found = self.target_cache.get(target)
        if found:
            self.logger.debug("Target cache hit: %s", target)
            return list(cached)

        body = await self._fetch(target)
        html = decode_body(body)
        infos = extract_addresses(html, target, ContentType.HTML, target)
        scripts = remove_duplicates(extract_scripts(html))
        self.logger.debug("Found %d script(s) on %s", len(scripts), target)

        target_domain = self.domain_filter.target_domain(target)
        infos.extend(await self._process_scripts(target, scripts, target_domain))

        self.target_cache.set(target, infos)
        return list(infos)

    async def _process_scripts(self, target: str, scripts: Sequence[str], target_domain: str) -> List[AddressInfo]:
        if not scripts:
            return []
        queue: asyncio.Queue[str] = asyncio.Queue()
        for script in scripts:
            queue.put_nowait(script)
        results: List[AddressInfo] = []
        workers = [
            asyncio.create_task(self._worker(queue, results, target, target_domain))
            for _ in range(min(self.config.concurrency, len(scripts)))
        ]
        try:
            await queue.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
        return results

    async def _worker(
        self,
        queue: asyncio.Queue[str],
        results: List[AddressInfo],
        target: str,
        target_domain: str,
    ) -> None:
        while True:
            try:
                script = await queue.get()
            except asyncio.CancelledError:
                break
            try:
                results.extend(await self._process_script(target, script, target_domain))
            except ScrapeError as exc:
                self.logger.warning("Error processing script %s: %s", script, exc)
            except Exception:
                self.logger.exception("Unexpected error processing script %s", script)
            finally:
                queue.task_done()

    async def _process_script(self, target: str, script: str, target_domain: str) -> List[AddressInfo]:
        full_url = resolve_url(target, script)
        host = hostname_of(full_url)
        if self.domain_filter.is_blacklisted(host):
            self.logger.debug("Skipping blacklisted script %s", full_url)
            return []
        if not self.domain_filter.in_domain(host, target_domain):
            self.logger.debug("Skipping foreign script %s", full_url)
            return []
        content = await self._script_content(full_url)
        return extract_addresses(content, full_url, ContentType.SCRIPT, target)

    async def _script_content(self, url: str) -> bytes:
        cached, found = self.script_cache.get(url)
        if found:
            return cached
        content = await self._fetch(url)
        self.script_cache.set(url, content)
        return content

    async def _fetch(self, url: str) -> bytes:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        return await self.fetcher.fetch(url)
