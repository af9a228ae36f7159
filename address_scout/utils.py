# File: address_scout/utils.py
"""address_scout.utils: Утилитарные функции для обработки URL и списков."""

from __future__ import annotations

from typing import Collection, List, Sequence
from urllib.parse import urljoin, urlsplit, urlunsplit

from address_scout.errors import InvalidURL
from address_scout.logger import logger

__all__: Sequence[str] = (
    "resolve_url",
    "hostname_of",
    "is_http_url",
    "remove_duplicates",
)


def resolve_url(base: str, reference: str) -> str:
    """Разрешает ссылку *reference* относительно *base* (RFC 3986).

    Относительный путь без ведущего ``/`` считается путём от корня сайта:
    ``resolve_url("https://example.com/path/", "script")`` даёт
    ``https://example.com/script``, а не ``.../path/script``.
    """
    try:
        urlsplit(base)
    except ValueError as exc:
        raise InvalidURL(base, exc) from exc
    try:
        ref = urlsplit(reference)
    except ValueError as exc:
        raise InvalidURL(reference, exc) from exc

    if not ref.scheme and ref.path and not ref.path.startswith("/"):
        reference = urlunsplit(ref._replace(path="/" + ref.path))

    try:
        resolved = urljoin(base, reference)
    except ValueError as exc:
        raise InvalidURL(reference, exc) from exc
    logger.debug("Resolved script URL: %s + %s -> %s", base, reference, resolved)
    return resolved


def hostname_of(url: str) -> str:
    """Возвращает hostname (нижний регистр, без порта) или пустую строку."""
    try:
        return urlsplit(url).hostname or ""
    except ValueError as exc:
        raise InvalidURL(url, exc) from exc


def is_http_url(url: str) -> bool:
    """Проверяет, что URL начинается с http:// или https://."""
    return url.startswith(("http://", "https://"))


def remove_duplicates(items: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка, сохраняя порядок."""
    return list(dict.fromkeys(items))
