# === FILE: address_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации AddressScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

__all__ = ("ScraperConfig", "load_config", "DEFAULT_USER_AGENT", "DEFAULT_BLACKLIST")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36"
)

# Собственные хосты сервиса и заведомо бесполезные цели.
DEFAULT_BLACKLIST = (
    "google.com",
    "localhost",
    "ethereum-address-scraper-api-n3j67ioglq-as.a.run.app",
)

DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:5173",
    "https://ethereum-address-scraper.web.app",
    "https://ethereum-address-scraper.firebaseapp.com",
)


class ScraperConfig(BaseModel):
    """Конфигурация одного экземпляра скрейпера (и HTTP API поверх него)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    timeout: float = Field(3.0, gt=0, description="Таймаут на один запрос (секунд).")
    max_content_size: int = Field(
        20 * 1024 * 1024, ge=1, description="Жесткий лимит размера тела ответа (байт)."
    )
    cache_size: int = Field(1000, ge=1, description="Ёмкость каждого из двух кэшей.")
    concurrency: int = Field(16, ge=1, description="Число воркеров для скриптов одной цели.")
    target_timeout: Optional[float] = Field(
        None, gt=0, description="Дедлайн на обработку одной цели (секунд)."
    )
    blacklist: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BLACKLIST),
        description="Хосты, которые никогда не сканируются.",
    )

    # HTTP API
    request_timeout: float = Field(30.0, gt=0, description="Таймаут запроса /scrape (секунд).")
    allowed_origins: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS),
        description="Origin-ы, которым разрешён CORS.",
    )

    @field_validator("blacklist", mode="before")
    def _normalize_hosts(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return [str(h).strip().lower() for h in v if str(h).strip()]
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScraperConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ScraperConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return ScraperConfig(**data)
    except ValidationError:
        raise
