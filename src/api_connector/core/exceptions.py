"""
Exception hierarchy for API connectors.
"""


class ApiConnectorError(Exception):
    """Base exception for all connector errors."""
    pass


class ConfigurationError(ApiConnectorError):
    """Raised when connector settings are missing or invalid."""
    pass


class TransportError(ApiConnectorError):
    """Raised when an HTTP request could not be completed."""
    pass


class RedirectLoopError(TransportError):
    """Raised when the transport detects an infinite redirection."""
    pass


class CacheError(ApiConnectorError):
    """Base exception for cache backends."""
    pass


class CacheWriteError(CacheError):
    """Raised when a cache backend fails to store a value."""
    pass
