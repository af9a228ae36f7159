# address_scout/crawler/domain.py
"""
Registrable-domain (eTLD+1) resolution and hostname blacklist.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

import tldextract

from address_scout.config import DEFAULT_BLACKLIST
from address_scout.errors import TargetBlacklisted, TLDResolutionFailed
from address_scout.utils import hostname_of

__all__ = ("DomainFilter", "registrable_domain")

logger = logging.getLogger("AddressScout.domain")

# Bundled public suffix snapshot only: no network fetch, no disk cache.
# Private rules such as github.io count as suffixes: every tenant of such a
# platform is its own registrable domain.
_EXTRACT = tldextract.TLDExtract(
    suffix_list_urls=(),
    cache_dir=None,
    include_psl_private_domains=True,
)


def registrable_domain(hostname: str, extract: Optional[tldextract.TLDExtract] = None) -> str:
    """Return ``domain.suffix`` for *hostname* or raise TLDResolutionFailed."""
    host = hostname.strip().lower().rstrip(".")
    if not host:
        raise TLDResolutionFailed(hostname, "empty hostname")
    parts = (extract or _EXTRACT)(host)
    if not parts.domain or not parts.suffix:
        raise TLDResolutionFailed(hostname, "no registrable domain under a public suffix")
    return f"{parts.domain}.{parts.suffix}"


class DomainFilter:
    """Decides which hosts may be scraped and which scripts belong to a target."""

    def __init__(
        self,
        blacklist: Iterable[str] = DEFAULT_BLACKLIST,
        extract: Optional[tldextract.TLDExtract] = None,
    ) -> None:
        self.blacklist = frozenset(h.strip().lower() for h in blacklist)
        self._extract = extract or _EXTRACT

    def is_blacklisted(self, hostname: str) -> bool:
        return hostname.lower() in self.blacklist

    def registrable_domain(self, hostname: str) -> str:
        return registrable_domain(hostname, self._extract)

    def in_domain(self, hostname: str, domain: str) -> bool:
        """True when *hostname* resolves to the registrable *domain*.

        Hosts without a registrable domain (IPs, bare suffixes) belong to none.
        """
        try:
            return self.registrable_domain(hostname) == domain
        except TLDResolutionFailed:
            return False

    def target_domain(self, target_url: str) -> str:
        """Registrable domain of a target page; blacklisted hosts are refused."""
        host = hostname_of(target_url)
        if self.is_blacklisted(host):
            raise TargetBlacklisted(host)
        domain = self.registrable_domain(host)
        logger.debug("Target %s -> registrable domain %s", target_url, domain)
        return domain
