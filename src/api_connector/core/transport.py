"""
Transport interface used by connectors to send HTTP requests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class HttpRequest:
    """
    Request handed to a transport.
    
    Attributes:
        method: HTTP method (GET, POST, ...)
        uri: Fully resolved request URI including the query string
        headers: Request headers
        body: Optional request body
    """
    method: str
    uri: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


@dataclass
class HttpResponse:
    """
    Response returned by a transport.
    
    Attributes:
        status_code: HTTP status code
        body: Raw response body as text
        headers: Response headers
    """
    status_code: int
    body: str = ""
    headers: Dict[str, str] = field(default_factory=dict)


class Transport(ABC):
    """
    Abstract base class for HTTP transports.
    
    Implementations send a single request and return the raw response,
    whatever its status code.
    """

    @abstractmethod
    def request(self, request: HttpRequest, timeout: float) -> HttpResponse:
        """
        Send a request.
        
        Args:
            request: The request to send
            timeout: Connect/read timeout in seconds
            
        Returns:
            HttpResponse with the raw result
            
        Raises:
            RedirectLoopError: If the redirect limit was exceeded
            TransportError: If the request could not be completed
        """
        pass
