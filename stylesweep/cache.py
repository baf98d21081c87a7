"""
Result cache seam for callers that run the engine repeatedly.

The engine never touches a cache itself. Callers build a key from the inputs
(`content_key`) and wrap the engine call with `cached()`; any object with
`get(key)` / `set(key, value)` can stand in for `MemoryCache`.
"""
from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


def content_key(*parts: Any) -> str:
    h = hashlib.sha256()
    for part in parts:
        h.update(repr(part).encode('utf-8'))
        h.update(b'\x00')
    return h.hexdigest()


class ResultCache(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Cached value for `key`, or None on a miss."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...


class MemoryCache(ResultCache):
    def __init__(self, max_entries: int = 256):
        self.max_entries = max_entries
        self._entries: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        value = self._entries.get(key)
        logger.debug("Cache %s for key: %s", 'hit' if value is not None else 'miss', key[:12])
        return value

    def set(self, key: str, value: Any) -> None:
        if key not in self._entries and len(self._entries) >= self.max_entries:
            # evict oldest insertion
            self._entries.pop(next(iter(self._entries)))
        self._entries[key] = value

    def __len__(self) -> int:
        return len(self._entries)


def cached(cache: Optional[ResultCache], key: str, compute: Callable[[], Any]) -> Any:
    if cache is None:
        return compute()
    value = cache.get(key)
    if value is None:
        value = compute()
        cache.set(key, value)
    return value
