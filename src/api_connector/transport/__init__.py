"""
HTTP transports.
"""

from .requests_transport import RequestsTransport
from .stub_transport import StubTransport

__all__ = ["RequestsTransport", "StubTransport"]
