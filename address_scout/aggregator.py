# File: address_scout/aggregator.py
"""address_scout.aggregator: Слияние найденных адресов и итоговый отчёт."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from address_scout.crawler.models import AddressInfo, ContentType
from address_scout.utils import remove_duplicates

__all__ = ["ScrapeReport", "dedup", "results_to_dicts"]


def dedup(infos: Iterable[AddressInfo]) -> List[AddressInfo]:
    """Объединяет записи с одинаковым (address, src, type).

    targets результата — объединение targets всех слитых записей в порядке
    первого появления. Входные объекты не изменяются.
    """
    merged: Dict[Tuple[str, str, ContentType], AddressInfo] = {}
    for info in infos:
        existing = merged.get(info.key)
        if existing is None:
            merged[info.key] = AddressInfo(
                address=info.address,
                src=info.src,
                type=info.type,
                targets=remove_duplicates(info.targets),
            )
        else:
            existing.targets = remove_duplicates([*existing.targets, *info.targets])
    return list(merged.values())


def results_to_dicts(results: Iterable[AddressInfo]) -> List[Dict[str, Any]]:
    return [info.to_dict() for info in results]


@dataclass(slots=True)
class ScrapeReport:
    """Результат одного запуска: исходные цели и найденные адреса."""

    targets: List[str] = field(default_factory=list)
    results: List[AddressInfo] = field(default_factory=list)

    @property
    def addresses(self) -> List[str]:
        """Уникальные адреса без учёта источника."""
        return remove_duplicates([info.address for info in self.results])

    def to_dict(self) -> Dict[str, Any]:
        return {"targets": list(self.targets), "results": results_to_dicts(self.results)}

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление списка результатов."""
        return json.dumps(
            results_to_dicts(self.results), ensure_ascii=False, indent=2 if pretty else None
        )
