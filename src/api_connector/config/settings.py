"""
Connector settings and the YAML loader that produces them.

A settings section looks like:

    Vendor:
      Package:
        weather:
          apiUrl: 'https://my.rest.api/v2'
          timeout: 30
          parameters:       # optional, added to each request
            api_key: 'xyz'
            format: 'json'
          actions:
            forecast: '/forecast.php'
          username: 'user'  # optional basic auth
          password: 'secret'
          useFallbackCache: true
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

import yaml

from ..core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


# Settings keys as written in configuration files, mapped to field names
_KEY_ALIASES = {
    "apiUrl": "api_url",
    "useFallbackCache": "use_fallback_cache",
}


@dataclass(frozen=True)
class ApiSettings:
    """
    Immutable configuration for one API connector.

    Attributes:
        api_url: Base URL; action paths are appended to its path
        actions: Mapping of action name to path segment
        parameters: Query parameters merged into every request
        timeout: Connect/read timeout in seconds
        username: Optional basic auth user
        password: Optional basic auth password
        use_fallback_cache: Whether GET responses go through the fallback cache
    """
    api_url: str
    actions: Mapping[str, str] = field(default_factory=dict)
    parameters: Mapping[str, str] = field(default_factory=dict)
    timeout: float = 30
    username: Optional[str] = None
    password: Optional[str] = None
    use_fallback_cache: bool = False

    def __post_init__(self) -> None:
        self._validate()

        # Read-only views so the settings stay immutable after validation
        object.__setattr__(self, "actions", MappingProxyType(dict(self.actions)))
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    def _validate(self) -> None:
        if not self.api_url or not isinstance(self.api_url, str):
            raise ConfigurationError("apiUrl is required")

        parts = urlsplit(self.api_url)
        if not parts.scheme or not parts.netloc:
            raise ConfigurationError(f"apiUrl is not an absolute URL: {self.api_url}")

        if not isinstance(self.actions, Mapping):
            raise ConfigurationError("actions must be a mapping of action name to path")
        for name, path in self.actions.items():
            if not isinstance(path, str):
                raise ConfigurationError(f"Path for action {name} must be a string, got {path!r}")
        if not isinstance(self.parameters, Mapping):
            raise ConfigurationError("parameters must be a mapping")

        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise ConfigurationError(f"timeout must be a number, got {self.timeout!r}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

        if not isinstance(self.use_fallback_cache, bool):
            raise ConfigurationError(
                f"useFallbackCache must be true or false, got {self.use_fallback_cache!r}"
            )

    @property
    def has_credentials(self) -> bool:
        """True when both username and password are non-empty."""
        return bool(self.username) and bool(self.password)

    def get_action_path(self, action_name: str) -> str:
        """Return the configured path for an action."""
        if action_name not in self.actions:
            raise ConfigurationError(f"Unknown action: {action_name}")
        return self.actions[action_name]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ApiSettings":
        """
        Create settings from a configuration mapping.

        Accepts both the camelCase keys of configuration files and the
        snake_case field names.

        Args:
            data: Settings mapping

        Returns:
            Validated ApiSettings
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("Connector settings must be a mapping")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                logger.debug(f"Ignoring unknown settings key: {key}")
                continue
            values[name] = value

        if "api_url" not in values:
            raise ConfigurationError("apiUrl is required")

        # Normalize optional sections; YAML yields None for empty blocks
        for name in ("actions", "parameters"):
            if not isinstance(values.get(name) or {}, Mapping):
                raise ConfigurationError(f"{name} must be a mapping")

        values["actions"] = dict(values.get("actions") or {})
        values["parameters"] = {
            str(k): "" if v is None else str(v)
            for k, v in (values.get("parameters") or {}).items()
        }

        return cls(**values)


def _resolve_section(config: Dict[str, Any], section: str) -> Any:
    """Walk a dotted path through nested mappings."""
    value: Any = config
    for key in section.split("."):
        if not isinstance(value, dict) or key not in value:
            return None
        value = value[key]
    return value


def _apply_env_overrides(data: Dict[str, Any], env_prefix: str) -> None:
    """Apply environment variable overrides to a settings mapping."""
    overrides = {
        "apiUrl": os.environ.get(f"{env_prefix}_API_URL"),
        "username": os.environ.get(f"{env_prefix}_USERNAME"),
        "password": os.environ.get(f"{env_prefix}_PASSWORD"),
    }
    for key, value in overrides.items():
        if value:
            data.pop(_KEY_ALIASES.get(key, key), None)
            data[key] = value


def load_settings(
    config_path: Path,
    section: str,
    env_prefix: Optional[str] = None,
) -> ApiSettings:
    """
    Load connector settings from a YAML file.

    Args:
        config_path: Path to the YAML file
        section: Dotted path to the settings section (e.g. "Vendor.Package.weather")
        env_prefix: Optional prefix for environment overrides
            (<PREFIX>_API_URL, <PREFIX>_USERNAME, <PREFIX>_PASSWORD)

    Returns:
        Validated ApiSettings
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.info(f"Loading connector settings from: {config_path} [{section}]")

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    data = _resolve_section(config, section)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings section not found: {section}")

    data = dict(data)
    if env_prefix:
        _apply_env_overrides(data, env_prefix)

    return ApiSettings.from_dict(data)
