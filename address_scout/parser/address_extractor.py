# address_scout/parser/address_extractor.py
"""
Pattern matching of blockchain addresses (``0x`` + 40 hex digits) in raw text.
"""
from __future__ import annotations

import re
from typing import List, Union

from address_scout.crawler.models import AddressInfo, ContentType

__all__ = ("ADDRESS_RE", "extract_addresses", "decode_body")

ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")


def decode_body(content: Union[str, bytes]) -> str:
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def extract_addresses(
    content: Union[str, bytes],
    src: str,
    kind: ContentType,
    target: str,
) -> List[AddressInfo]:
    """
    Return one AddressInfo per match, left to right, without deduplication.

    Addresses are lower-cased; *src* is the document the text came from and
    *target* the user-supplied URL that led to it.
    """
    text = decode_body(content)
    return [
        AddressInfo(address=match.lower(), src=src, type=ContentType(kind), targets=[target])
        for match in ADDRESS_RE.findall(text)
    ]
