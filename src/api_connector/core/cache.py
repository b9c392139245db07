"""
Cache interface consumed by connectors.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional


class _NotFound:
    """Marker returned by caches for absent entries."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()

IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z0-9_%\-&]{1,250}$")


def validate_identifier(identifier: str, kind: str = "entry identifier") -> None:
    """Raise ValueError if the identifier cannot be used as a key or tag."""
    if not isinstance(identifier, str) or not IDENTIFIER_PATTERN.match(identifier):
        raise ValueError(f"Invalid cache {kind}: {identifier!r}")


class Cache(ABC):
    """
    Abstract base class for key-value caches.
    
    Entries may carry tags so groups of entries can be removed together.
    Reads return NOT_FOUND for absent keys, so a stored None or empty
    value is distinguishable from a miss.
    """

    @abstractmethod
    def get(self, key: str) -> Any:
        """
        Read an entry.
        
        Returns:
            The stored value or NOT_FOUND
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any, tags: Optional[Iterable[str]] = None) -> None:
        """
        Store an entry, replacing any previous value and tags.
        
        Raises:
            CacheWriteError: If the value could not be stored
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Remove an entry. Returns True if something was removed."""
        pass

    @abstractmethod
    def flush_by_tag(self, tag: str) -> int:
        """Remove all entries carrying the tag. Returns the number removed."""
        pass

    @abstractmethod
    def flush(self) -> None:
        """Remove all entries."""
        pass

    def has(self, key: str) -> bool:
        """Check whether an entry exists."""
        return self.get(key) is not NOT_FOUND
