# address_scout/crawler/models.py
"""
Data models for the AddressScout scraper.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class ContentType(str, Enum):
    """Kind of document an address was found in."""

    HTML = "html"
    SCRIPT = "script"


@dataclass(slots=True)
class AddressInfo:
    """One extracted address together with its provenance."""

    address: str
    src: str
    type: ContentType
    targets: List[str] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str, ContentType]:
        return (self.address, self.src, self.type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "src": self.src,
            "type": self.type.value,
            "targets": list(self.targets),
        }
