"""
Shared test fixtures and configuration for pytest.
"""

import sys
from pathlib import Path
from typing import Callable

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from api_connector import ApiConnector, ApiSettings, HttpResponse, MemoryCache, StubTransport


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings_data() -> dict:
    """Fixture providing a settings mapping as found in config files."""
    return {
        "apiUrl": "https://api.example.com/v2",
        "timeout": 15,
        "parameters": {
            "api_key": "xyz",
            "format": "json",
        },
        "actions": {
            "x": "/x",
            "list": "/items.php",
            "report": "/report",
        },
        "useFallbackCache": True,
    }


@pytest.fixture
def settings(settings_data) -> ApiSettings:
    """Fixture providing validated connector settings."""
    return ApiSettings.from_dict(settings_data)


@pytest.fixture
def stub_transport() -> StubTransport:
    """Fixture providing a stub transport answering 200 with an empty object."""
    return StubTransport(default_response=HttpResponse(status_code=200, body="{}"))


@pytest.fixture
def api_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def fallback_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def make_connector(settings, api_cache, fallback_cache, stub_transport) -> Callable[..., ApiConnector]:
    """
    Fixture providing a connector factory.

    Keyword arguments override the default settings, caches and transport.
    """
    def factory(connector_class=ApiConnector, **overrides) -> ApiConnector:
        settings_overrides = overrides.pop("settings_overrides", None)
        connector_settings = overrides.pop("settings", settings)
        if settings_overrides:
            data = {
                "api_url": connector_settings.api_url,
                "actions": connector_settings.actions,
                "parameters": connector_settings.parameters,
                "timeout": connector_settings.timeout,
                "username": connector_settings.username,
                "password": connector_settings.password,
                "use_fallback_cache": connector_settings.use_fallback_cache,
            }
            data.update(settings_overrides)
            connector_settings = ApiSettings.from_dict(data)

        return connector_class(
            connector_settings,
            api_cache=overrides.pop("api_cache", api_cache),
            fallback_cache=overrides.pop("fallback_cache", fallback_cache),
            transport=overrides.pop("transport", stub_transport),
            **overrides,
        )

    return factory
