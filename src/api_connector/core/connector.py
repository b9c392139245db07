"""
Base class for REST API connectors.

A concrete connector binds to one settings section and exposes
domain-specific methods on top of fetch_data / post_json_data:

    class WeatherConnector(ApiConnector):
        settings_section = "Vendor.Package.weather"

        def get_forecast(self, city: str) -> dict:
            return self.fetch_data("forecast", {"city": city})
"""

import base64
import hashlib
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

from ..cache.memory_cache import MemoryCache
from ..config.settings import ApiSettings, load_settings
from ..transport.requests_transport import RequestsTransport
from .cache import NOT_FOUND, Cache
from .exceptions import CacheWriteError, RedirectLoopError, TransportError
from .transport import HttpRequest, HttpResponse, Transport


class ApiConnector:
    """
    Configuration-driven REST API connector.

    GET responses can be served from a persistent fallback cache keyed by
    the request URI. Arbitrary values can be stored in the api cache through
    get_item / set_item / unset_item; reads are mirrored in a per-instance
    object cache.
    """

    # Dotted path of the settings section used by from_config()
    settings_section: Optional[str] = None

    # Session options handed to the default transport
    request_engine_options: Dict[str, Any] = {}

    def __init__(
        self,
        settings: ApiSettings,
        api_cache: Cache,
        fallback_cache: Cache,
        transport: Optional[Transport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the connector.

        Args:
            settings: Connector settings
            api_cache: Persistent cache for arbitrary values
            fallback_cache: Persistent cache for raw GET responses
            transport: HTTP transport (defaults to RequestsTransport)
            logger: Logger for request and cache errors
        """
        if transport is None:
            transport = RequestsTransport(engine_options=self.request_engine_options)

        self.settings = settings
        self.api_cache = api_cache
        self.fallback_cache = fallback_cache
        self.transport = transport
        self.logger = logger if logger is not None else logging.getLogger(__name__)

        self._object_cache: Dict[str, Any] = {}
        self._object_cache_lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config_path: Path,
        api_cache: Optional[Cache] = None,
        fallback_cache: Optional[Cache] = None,
        transport: Optional[Transport] = None,
        section: Optional[str] = None,
        env_prefix: Optional[str] = None,
    ) -> "ApiConnector":
        """
        Create a connector from a YAML settings file.

        Args:
            config_path: Path to the YAML file
            api_cache: Cache for arbitrary values (defaults to MemoryCache)
            fallback_cache: Cache for raw responses (defaults to MemoryCache)
            transport: HTTP transport (defaults to RequestsTransport)
            section: Settings section, overrides settings_section
            env_prefix: Prefix for environment overrides

        Returns:
            Configured connector
        """
        section = section or cls.settings_section
        if not section:
            raise ValueError(f"{cls.__name__} does not define a settings_section")

        settings = load_settings(config_path, section, env_prefix=env_prefix)
        return cls(
            settings,
            api_cache=api_cache if api_cache is not None else MemoryCache(),
            fallback_cache=fallback_cache if fallback_cache is not None else MemoryCache(),
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def build_request_uri(
        self,
        action_name: str,
        additional_parameters: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Build the URI for an action.

        The action path is appended to the path of the base URL and the
        query string is built from the base parameters merged with the
        additional ones (additional parameters win).
        """
        action_path = self.settings.get_action_path(action_name)
        parts = urlsplit(self.settings.api_url)

        parameters = dict(self.settings.parameters)
        parameters.update(additional_parameters or {})

        return urlunsplit((
            parts.scheme,
            parts.netloc,
            parts.path + action_path,
            urlencode(parameters, doseq=True),
            "",
        ))

    def get_cache_key(self, identifier: str) -> str:
        """Create a cache identifier namespaced by the connector class."""
        cls = type(self)
        namespace = f"{cls.__module__}.{cls.__qualname__}"
        return hashlib.sha1(f"{namespace}__{identifier}".encode("utf-8")).hexdigest()

    def fetch_data(
        self,
        action_name: str,
        additional_parameters: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Retrieve data from the api.

        With the fallback cache enabled a cached response is returned
        without contacting the api.

        Args:
            action_name: Configured action to call
            additional_parameters: Extra query parameters

        Returns:
            The decoded JSON object, or an empty dict if nothing usable
            was received
        """
        request_uri = self.build_request_uri(action_name, additional_parameters)
        fallback_cache_key = self.get_cache_key(request_uri)
        body = NOT_FOUND

        if self.settings.use_fallback_cache:
            body = self.fallback_cache.get(fallback_cache_key)

        if body is NOT_FOUND:
            response = self._fetch_data_internal(request_uri)
            if response is None:
                return {}
            body = response.body

        return self._decode_body(body)

    def _fetch_data_internal(self, request_uri: str) -> Optional[HttpResponse]:
        """Send a GET request and store the raw response in the fallback cache."""
        request = HttpRequest(method="GET", uri=request_uri, headers=self._get_headers())
        try:
            response = self.transport.request(request, timeout=self.settings.timeout)
        except TransportError as e:
            self.logger.error(f"Get request to Api failed with exception: {e}")
            return None

        if response.status_code != 200:
            self.logger.error(
                f"Get request to Api failed with code {response.status_code}: {request_uri}"
            )

        if self.settings.use_fallback_cache:
            try:
                self.fallback_cache.set(self.get_cache_key(request_uri), response.body)
            except CacheWriteError as e:
                self.logger.error(f"Cache error: {e}")

        return response

    def _decode_body(self, body: Any) -> Dict[str, Any]:
        if not isinstance(body, (str, bytes, bytearray)):
            return {}
        try:
            data = json.loads(body)
        except ValueError:
            self.logger.debug("Response body is not valid JSON")
            return {}
        if not isinstance(data, dict):
            self.logger.debug(f"Response body is a JSON {type(data).__name__}, not an object")
            return {}
        return data

    def post_json_data(
        self,
        action_name: str,
        additional_parameters: Optional[Mapping[str, Any]] = None,
        data: Any = None,
    ) -> bool:
        """
        JSON encode data and post it to the api.

        Returns:
            True if the api answered with 200 or 204
        """
        request_uri = self.build_request_uri(action_name, additional_parameters)
        try:
            body = json.dumps(data if data is not None else {})
        except (TypeError, ValueError) as e:
            self.logger.error(f"Post request to Api failed, data is not JSON serializable: {e}")
            return False

        headers = self._get_headers()
        headers["Content-Type"] = "application/json"
        request = HttpRequest(method="POST", uri=request_uri, headers=headers, body=body)

        try:
            response = self.transport.request(request, timeout=self.settings.timeout)
        except RedirectLoopError as e:
            self.logger.error(f"Post request to Api failed with an infinite redirection: {e}")
            return False
        except TransportError as e:
            self.logger.error(f"Post request to Api failed with exception: {e}")
            return False

        if response.status_code not in (200, 204):
            self.logger.error(f"Post request to Api failed with code {response.status_code}")
            return False
        return True

    def _get_headers(self) -> Dict[str, str]:
        """Return request headers, with basic auth if credentials are configured."""
        headers: Dict[str, str] = {}
        if self.settings.has_credentials:
            credentials = f"{self.settings.username}:{self.settings.password}"
            encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
            headers["Authorization"] = f"Basic {encoded}"
        return headers

    # ------------------------------------------------------------------
    # Object cache
    # ------------------------------------------------------------------

    def get_item(self, cache_key: str) -> Any:
        """
        Read a value from the api cache, mirrored in the object cache.

        Returns:
            The stored value or NOT_FOUND; misses are mirrored as well
        """
        with self._object_cache_lock:
            if cache_key in self._object_cache:
                return self._object_cache[cache_key]
            item = self.api_cache.get(cache_key)
            self._object_cache[cache_key] = item
            return item

    def set_item(self, cache_key: str, value: Any, tags: Optional[Iterable[str]] = None) -> None:
        """
        Store a value in the object cache and the api cache.

        Raises:
            CacheWriteError: If the api cache rejects the value
        """
        with self._object_cache_lock:
            self.api_cache.set(cache_key, value, list(tags or []))
            self._object_cache[cache_key] = value

    def unset_item(self, cache_key: str) -> None:
        """Remove a value from the object cache and the api cache."""
        with self._object_cache_lock:
            self._object_cache.pop(cache_key, None)
            self.api_cache.remove(cache_key)

    def flush_object_cache(self) -> None:
        """Forget all mirrored values; the api cache is left untouched."""
        with self._object_cache_lock:
            self._object_cache.clear()
