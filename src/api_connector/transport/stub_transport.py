"""
Stub transport for testing.

Returns canned responses without any network access and records every
request it receives, so connector behavior can be asserted exactly.
"""

import logging
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from ..core.transport import HttpRequest, HttpResponse, Transport


logger = logging.getLogger(__name__)


class StubTransport(Transport):
    """
    Deterministic transport returning canned responses.

    Responses are looked up by request path. Unknown paths get the
    default response. A configured error is raised for every request.
    """

    def __init__(
        self,
        responses: Optional[Dict[str, HttpResponse]] = None,
        default_response: Optional[HttpResponse] = None,
        error: Optional[Exception] = None,
    ):
        """
        Initialize the stub transport.

        Args:
            responses: Mapping of request path to response
            default_response: Response for unknown paths (default: 404)
            error: Exception to raise instead of responding
        """
        self.responses = dict(responses or {})
        self.default_response = default_response or HttpResponse(
            status_code=404, body='{"error": "not found"}'
        )
        self.error = error

        # Track requests for testing
        self.request_history: List[HttpRequest] = []
        self.timeouts: List[float] = []

    def add_response(self, path: str, status_code: int = 200, body: str = "{}") -> None:
        """Register a response for a request path."""
        self.responses[path] = HttpResponse(status_code=status_code, body=body)

    def request(self, request: HttpRequest, timeout: float) -> HttpResponse:
        self.request_history.append(request)
        self.timeouts.append(timeout)

        if self.error is not None:
            raise self.error

        path = urlsplit(request.uri).path
        response = self.responses.get(path, self.default_response)
        logger.debug(f"Stub response for {request.method} {path}: {response.status_code}")
        return response
