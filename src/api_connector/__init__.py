"""
Generic base class for configuration-driven REST API connectors.
"""

from .cache import FileCache, MemoryCache
from .config import ApiSettings, load_settings
from .core import (
    NOT_FOUND, Cache, HttpRequest, HttpResponse, Transport,
    ApiConnectorError, ConfigurationError, TransportError,
    RedirectLoopError, CacheError, CacheWriteError,
)
from .core.connector import ApiConnector
from .transport import RequestsTransport, StubTransport

__version__ = "1.0.0"

__all__ = [
    "ApiConnector",
    "ApiSettings",
    "load_settings",
    "Cache",
    "NOT_FOUND",
    "FileCache",
    "MemoryCache",
    "Transport",
    "HttpRequest",
    "HttpResponse",
    "RequestsTransport",
    "StubTransport",
    "ApiConnectorError",
    "ConfigurationError",
    "TransportError",
    "RedirectLoopError",
    "CacheError",
    "CacheWriteError",
]
