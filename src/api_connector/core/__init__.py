"""
Core abstractions for API connectors.
"""

from .cache import NOT_FOUND, Cache
from .exceptions import (
    ApiConnectorError, ConfigurationError, TransportError,
    RedirectLoopError, CacheError, CacheWriteError,
)
from .transport import HttpRequest, HttpResponse, Transport

__all__ = [
    "NOT_FOUND",
    "Cache",
    "ApiConnectorError",
    "ConfigurationError",
    "TransportError",
    "RedirectLoopError",
    "CacheError",
    "CacheWriteError",
    "HttpRequest",
    "HttpResponse",
    "Transport",
]
