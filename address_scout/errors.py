"""
Exception hierarchy for the AddressScout scraping pipeline.

Every error raised while scraping a target or one of its scripts derives from
:class:`ScrapeError`, so the orchestrator can absorb per-target and per-script
failures with a single ``except`` clause.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "ScrapeError",
    "FetchFailed",
    "ContentTooLarge",
    "InvalidURL",
    "TargetBlacklisted",
    "TLDResolutionFailed",
)


class ScrapeError(Exception):
    """Base class for all scraping failures."""


class FetchFailed(ScrapeError):
    """Transport-level failure (DNS, refused connection, timeout)."""

    def __init__(self, url: str, cause: object) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"failed to fetch {url}: {cause}")


class ContentTooLarge(ScrapeError):
    """Response body reached the configured size cap."""

    def __init__(self, url: str, limit: int) -> None:
        self.url = url
        self.limit = limit
        super().__init__(f"content of {url} exceeds maximum size of {limit} bytes")


class InvalidURL(ScrapeError):
    """Base URL or reference could not be parsed."""

    def __init__(self, url: str, cause: Optional[object] = None) -> None:
        self.url = url
        self.cause = cause
        message = f"invalid URL {url!r}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class TargetBlacklisted(ScrapeError):
    """Target hostname must never be scraped."""

    def __init__(self, hostname: str) -> None:
        self.hostname = hostname
        super().__init__(f"target hostname {hostname} is blacklisted")


class TLDResolutionFailed(ScrapeError):
    """Public-suffix lookup produced no registrable domain."""

    def __init__(self, hostname: str, cause: Optional[object] = None) -> None:
        self.hostname = hostname
        self.cause = cause
        message = f"failed to get registrable domain for {hostname!r}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
