"""Configuration loader for the registry core.

Reads settings from a YAML file (default: app.yaml) whose ``env_variables``
mapping holds the values, with process environment variables taking priority
over the file. The resulting ``Settings`` object is built once and handed to
the components that need it; nothing in the core reads configuration globally.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .ranking import DEFAULT_ALGORITHM, get_known_algorithms

DEFAULT_CONFIG_PATH = Path("app.yaml")
CONFIG_PATH_ENV_VAR = "REGISTRY_BACKEND_CONFIG"

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WEB_URL = "https://github.com"
DEFAULT_USER_AGENT = "registry-backend"
DEFAULT_PAGINATED_AMOUNT = 30

# Setting name -> environment variable / YAML key.
_KEYS = {
    "api_url": "GITHUB_API_URL",
    "web_url": "GITHUB_WEB_URL",
    "username": "GH_USERNAME",
    "token": "GH_TOKEN",
    "user_agent": "GH_USERAGENT",
    "cache_time": "CACHETIME",
    "search_algorithm": "SEARCHALGORITHM",
    "paginated_amount": "PAGINATE",
    "request_timeout": "REQUEST_TIMEOUT",
    "max_pages": "MAX_PAGES",
    "ban_list_source": "BAN_LIST_SOURCE",
    "featured_packages_source": "FEATURED_PACKAGES_SOURCE",
    "featured_themes_source": "FEATURED_THEMES_SOURCE",
    "debug": "DEBUGLOG",
}

_TRUTHY = {"1", "true", "yes", "y"}


@dataclass(slots=True, frozen=True)
class Settings:
    """Process-wide settings, passed explicitly to each component."""

    username: str
    token: str
    api_url: str = DEFAULT_API_URL
    web_url: str = DEFAULT_WEB_URL
    user_agent: str = DEFAULT_USER_AGENT
    cache_time: float = 300.0
    search_algorithm: str = DEFAULT_ALGORITHM
    paginated_amount: int = DEFAULT_PAGINATED_AMOUNT
    request_timeout: float = 30.0
    max_pages: int = 100
    ban_list_source: str = ""
    featured_packages_source: str = ""
    featured_themes_source: str = ""
    debug: bool = False

    def __post_init__(self) -> None:
        if not self.username or not self.token:
            raise ConfigError("Host credentials (GH_USERNAME, GH_TOKEN) must be provided")
        if self.cache_time <= 0:
            raise ConfigError("CACHETIME must be positive")
        if self.paginated_amount <= 0:
            raise ConfigError("PAGINATE must be positive")
        if self.max_pages <= 0:
            raise ConfigError("MAX_PAGES must be positive")
        if self.request_timeout <= 0:
            raise ConfigError("REQUEST_TIMEOUT must be positive")
        if self.search_algorithm not in get_known_algorithms():
            known = ", ".join(get_known_algorithms())
            raise ConfigError(
                f"Unknown SEARCHALGORITHM '{self.search_algorithm}'. Known algorithms: {known}"
            )

    @property
    def service_auth(self) -> tuple[str, str]:
        """Basic credential used for every call made on the service's behalf."""
        return (self.username, self.token)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> Settings:
        """Build settings from a mapping keyed by environment variable names."""
        kwargs: dict[str, Any] = {}
        for field_name, key in _KEYS.items():
            raw = values.get(key)
            if raw is None or raw == "":
                continue
            kwargs[field_name] = _coerce(field_name, key, raw)

        kwargs.setdefault("username", "")
        kwargs.setdefault("token", "")
        return cls(**kwargs)


def _coerce(field_name: str, key: str, raw: Any) -> Any:
    if field_name in {"paginated_amount", "max_pages"}:
        try:
            return int(raw)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc
    if field_name in {"cache_time", "request_timeout"}:
        try:
            return float(raw)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{key} must be a number, got {raw!r}") from exc
    if field_name == "debug":
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in _TRUTHY
    return str(raw)


def _resolve_config_path(
    path: Path | str | None, environ: Mapping[str, str]
) -> tuple[Path, bool]:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. REGISTRY_BACKEND_CONFIG environment variable
    3. Default path (app.yaml in the working directory)

    The flag tells whether the path was requested explicitly.
    """
    if path is not None:
        return Path(path), True

    env_path = environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path), True

    return DEFAULT_CONFIG_PATH, False


def _read_file_values(config_path: Path) -> dict[str, Any]:
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    values = data.get("env_variables", {})
    if not isinstance(values, dict):
        raise ConfigError("'env_variables' must be a mapping")
    return values


def load_settings(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load and validate settings from a YAML file and the environment.

    Args:
        path: Optional path to the config file. If not provided, uses the
            REGISTRY_BACKEND_CONFIG env var or falls back to ./app.yaml.
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        A validated Settings object.

    Raises:
        ConfigError: If an explicit file is missing, unreadable or malformed,
            or if any value is invalid.
    """
    environ = os.environ if environ is None else environ
    config_path, explicit = _resolve_config_path(path, environ)

    values: dict[str, Any] = {}
    if config_path.exists():
        values.update(_read_file_values(config_path))
    elif explicit:
        raise ConfigError(f"Configuration file not found: {config_path}")

    for key in _KEYS.values():
        if environ.get(key):
            values[key] = environ[key]

    return Settings.from_mapping(values)
