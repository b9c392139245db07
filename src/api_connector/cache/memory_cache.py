"""
In-memory cache backend.
"""

import threading
from typing import Any, Dict, Iterable, Optional, Set

from ..core.cache import NOT_FOUND, Cache, validate_identifier


class MemoryCache(Cache):
    """
    Process-local cache backed by a dict.

    Entries live as long as the instance. Useful as a default backend
    and for tests.
    """

    def __init__(self):
        self._entries: Dict[str, Any] = {}
        self._tags: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        validate_identifier(key)
        with self._lock:
            return self._entries.get(key, NOT_FOUND)

    def set(self, key: str, value: Any, tags: Optional[Iterable[str]] = None) -> None:
        validate_identifier(key)
        tags = set(tags or [])
        for tag in tags:
            validate_identifier(tag, "tag")

        with self._lock:
            self._entries[key] = value
            self._tags[key] = tags

    def remove(self, key: str) -> bool:
        validate_identifier(key)
        with self._lock:
            self._tags.pop(key, None)
            return self._entries.pop(key, NOT_FOUND) is not NOT_FOUND

    def flush_by_tag(self, tag: str) -> int:
        validate_identifier(tag, "tag")
        with self._lock:
            keys = [key for key, tags in self._tags.items() if tag in tags]
            for key in keys:
                self._entries.pop(key, None)
                self._tags.pop(key, None)
        return len(keys)

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()
            self._tags.clear()

    def __len__(self) -> int:
        return len(self._entries)
