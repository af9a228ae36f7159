# address_scout/crawler/fetcher.py
"""
Fetcher module: bounded, timed HTTP GET for pages and scripts.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout

from address_scout.config import ScraperConfig
from address_scout.errors import ContentTooLarge, FetchFailed

__all__ = ("Fetcher", "ContentFetcher", "open_session")

_CHUNK_SIZE = 64 * 1024

logger = logging.getLogger("AddressScout.fetcher")


class ContentFetcher(Protocol):
    """Anything that can turn a URL into a response body."""

    async def fetch(self, url: str) -> bytes:
        ...


def open_session(config: ScraperConfig) -> ClientSession:
    """Create a ClientSession carrying the configured timeout and User-Agent."""
    return ClientSession(
        timeout=ClientTimeout(total=config.timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Handles HTTP fetching with a per-request timeout and a body size cap."""

    def __init__(self, session: ClientSession, config: ScraperConfig) -> None:
        self.session = session
        self.config = config

    async def fetch(self, url: str) -> bytes:
        """
        Fetch *url* and return its raw body.

        Raises FetchFailed on transport errors and ContentTooLarge once the body
        reaches ``config.max_content_size``. Status codes are not inspected and
        nothing is retried.
        """
        limit = self.config.max_content_size
        body = bytearray()
        try:
            async with self.session.get(url, headers={"User-Agent": self.config.user_agent}) as resp:
                logger.debug("GET %s -> HTTP %s", url, resp.status)
                async for chunk in resp.content.iter_chunked(_CHUNK_SIZE):
                    body.extend(chunk)
                    if len(body) >= limit:
                        raise ContentTooLarge(url, limit)
        except (ClientError, asyncio.TimeoutError) as exc:
            raise FetchFailed(url, str(exc) or type(exc).__name__) from exc
        return bytes(body)
