"""
Fixed-capacity in-memory cache with random eviction.

Used twice by the scraper: once for per-target results and once for raw script
bodies. Safe for concurrent use from several threads and asyncio tasks.
"""
from __future__ import annotations

import random
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

__all__ = ("FixedSizeCache",)


class _ReadWriteLock:
    """Many readers or one writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class FixedSizeCache:
    """Key/value store holding at most ``capacity`` entries.

    Inserting a new key into a full cache evicts one existing key picked
    uniformly at random. Overwriting an existing key never evicts. Entries
    have no expiry.
    """

    def __init__(self, capacity: int, *, rng: Optional[random.Random] = None) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._items: Dict[str, Any] = {}
        self._keys: List[str] = []
        self._lock = _ReadWriteLock()
        self._rng = rng or random.Random()

    def set(self, key: str, value: Any) -> None:
        with self._lock.write():
            if key not in self._items:
                if len(self._keys) >= self.capacity:
                    self._evict_one()
                self._keys.append(key)
            self._items[key] = value

    def get(self, key: str) -> Tuple[Any, bool]:
        with self._lock.read():
            if key in self._items:
                return self._items[key], True
            return None, False

    def _evict_one(self) -> None:
        # swap-remove keeps eviction O(1)
        idx = self._rng.randrange(len(self._keys))
        victim = self._keys[idx]
        self._keys[idx] = self._keys[-1]
        self._keys.pop()
        del self._items[victim]

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._items

    def __repr__(self) -> str:
        return f"<FixedSizeCache size={len(self)} capacity={self.capacity}>"
