# === FILE: address_scout/parser/html_parser.py ===
"""HTML parsing utilities for AddressScout.

Only one thing is needed from page markup: the ``src`` attribute of every
``<script>`` element, in document order and unresolved (values may be
relative, protocol-relative or absolute).  Resolution and filtering happen in
the scraper, so this module stays a pure function of its input.

Parsing is best-effort: markup the parser rejects yields an empty list rather
than an exception.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Union

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag

__all__: Sequence[str] = ("extract_scripts",)

logger = logging.getLogger("AddressScout.parser")


def extract_scripts(html: Union[str, bytes]) -> list[str]:
    """Return raw ``src`` values of all ``<script>`` tags in document order."""
    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        logger.warning("Error parsing HTML: %s", exc)
        return []

    scripts: list[str] = []
    for tag in soup.find_all("script"):
        if not isinstance(tag, Tag):
            continue
        src = tag.get("src")
        if isinstance(src, str):
            scripts.append(src)
    return scripts
