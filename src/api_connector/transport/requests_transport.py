"""
HTTP transport built on the requests library.
"""

import logging
import time
from typing import Any, Dict, Optional

import requests

from ..core.exceptions import ConfigurationError, RedirectLoopError, TransportError
from ..core.transport import HttpRequest, HttpResponse, Transport


logger = logging.getLogger(__name__)


# Session attributes that may be set through engine options
SESSION_OPTIONS = ("verify", "cert", "proxies", "max_redirects", "trust_env", "stream")


class RequestsTransport(Transport):
    """
    Transport that sends each request through a fresh requests.Session.

    Engine options are applied as session attributes, so things like
    TLS verification, client certificates, proxies and the redirect
    limit can be configured per connector.
    """

    def __init__(
        self,
        engine_options: Optional[Dict[str, Any]] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the transport.

        Args:
            engine_options: Session attributes to apply to every request
            user_agent: Custom User-Agent header
        """
        self.engine_options = dict(engine_options or {})
        self.user_agent = user_agent or "ApiConnector/1.0"

        unknown = set(self.engine_options) - set(SESSION_OPTIONS)
        if unknown:
            raise ConfigurationError(
                f"Unsupported engine options: {', '.join(sorted(unknown))}"
            )

    def _build_session(self) -> requests.Session:
        """Create a session with the engine options applied."""
        session = requests.Session()
        for option, value in self.engine_options.items():
            setattr(session, option, value)
        return session

    def request(self, request: HttpRequest, timeout: float) -> HttpResponse:
        """
        Send a request.

        Args:
            request: The request to send
            timeout: Connect/read timeout in seconds

        Returns:
            HttpResponse with the raw result
        """
        headers = dict(request.headers)
        if "User-Agent" not in headers:
            headers["User-Agent"] = self.user_agent

        session = self._build_session()
        start_time = time.time()
        try:
            response = session.request(
                request.method.upper(),
                request.uri,
                headers=headers,
                data=request.body.encode("utf-8") if request.body is not None else None,
                timeout=timeout,
            )
        except requests.exceptions.TooManyRedirects as e:
            raise RedirectLoopError(f"Too many redirects for {request.uri}: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{request.method} {request.uri} failed: {e}") from e
        finally:
            session.close()

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"{request.method} {request.uri} -> {response.status_code} ({duration_ms} ms)"
        )

        return HttpResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )
