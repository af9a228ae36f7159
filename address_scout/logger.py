# === FILE: address_scout/logger.py ===
"""Логирование AddressScout.

Все модули пишут в логгер ``AddressScout`` или в его потомков
(``AddressScout.scraper``, ``AddressScout.fetcher`` и т.д.), поэтому одна
настройка через :func:`configure` покрывает весь пакет.

Консольный вывод идёт в **stderr**: stdout команды ``scrape`` занят
JSON-результатом. Файл логов с ротацией подключается опцией ``--log-file``.
Для ``serve`` журнал запросов aiohttp направляется в те же обработчики
(:func:`route_access_log`).
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "AddressScout"
ACCESS_LOGGER_NAME: Final[str] = "aiohttp.access"

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _build_handlers(log_file: str | Path | None, fmt: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Пере)настраивает логгер ``AddressScout``.

    level: уровень, строкой (``"DEBUG"``) или числом.
    log_file: файл с ротацией; *None* означает только stderr.
    log_format: строка формата для :class:`logging.Formatter`.
    replace_handlers: *True* убирает прежние обработчики, *False* добавляет новые.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        lg.handlers.clear()

    for handler in _build_handlers(log_file, log_format):
        lg.addHandler(handler)

    # Корневой логгер приложения-хоста не должен дублировать наши записи.
    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Настройка для CLI: заменяет обработчики, файл логов только по запросу."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


def route_access_log() -> logging.Logger:
    """Пишет журнал запросов aiohttp.web через обработчики ``AddressScout``."""
    project = logging.getLogger(LOGGER_NAME)
    access = logging.getLogger(ACCESS_LOGGER_NAME)
    access.handlers = list(project.handlers)
    access.setLevel(project.level)
    access.propagate = False
    return access


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "route_access_log", "LOGGER_NAME", "DEFAULT_FORMAT"]
