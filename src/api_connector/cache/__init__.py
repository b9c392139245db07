"""
Cache backends.
"""

from .file_cache import FileCache
from .memory_cache import MemoryCache

__all__ = ["FileCache", "MemoryCache"]
