"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - Hierarchical YAML configuration loading
    - Environment variable override (UI_BASE_URL overrides ui.base_url)
    - Dot notation path access
    - Fail-fast access to required keys
    - Typed UISettings view of the ``ui`` section

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml
from loguru import logger

from .errors import ConfigurationMissingError


# Default configuration file path (<repo>/config/config.yaml)
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"
CONFIG_PATH_ENV = "STOREFRONT_CONFIG"

_MISSING = object()


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (UI_BASE_URL)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("ui.timeout_seconds", 10)
        15  # From YAML or env var

        >>> config.require("ui.base_url")
        'https://ecommerce.tealiumdemo.com'

    Environment Variable Mapping:
        - ui.base_url -> UI_BASE_URL
        - ui.headless -> UI_HEADLESS
        - logging.level -> LOGGING_LEVEL
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Singleton pattern - return existing instance if available."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Falls back to $STOREFRONT_CONFIG, then DEFAULT_CONFIG_PATH.
        """
        if getattr(self, "_initialized", False):
            return

        env_path = os.environ.get(CONFIG_PATH_ENV)
        self._config_path = Path(config_path or env_path or DEFAULT_CONFIG_PATH)
        self._file_found = False
        self._load_config()
        self._initialized = True

    @property
    def config_path(self) -> Path:
        return self._config_path

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            self._file_found = False
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationMissingError(
                f"Invalid YAML in configuration file {self._config_path}: {e}"
            ) from e

        if not isinstance(loaded, dict):
            raise ConfigurationMissingError(
                f"Configuration file {self._config_path} must contain a mapping, "
                f"got {type(loaded).__name__}"
            )
        self._config = loaded
        self._file_found = True
        logger.debug(f"Loaded configuration from: {self._config_path}")

    def _lookup(self, key: str) -> Any:
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return _MISSING
            value = value[part]
        return _MISSING if value is None else value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "ui.base_url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._lookup(key)
        return default if value is _MISSING else value

    def require(self, key: str, cast: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        Get a configuration value that must be present and non-blank.

        Args:
            key: Dot-notation path
            cast: Optional converter applied to the raw value

        Returns:
            The (converted) value

        Raises:
            ConfigurationMissingError: If the key is absent, blank or cannot be converted
        """
        value = self.get(key, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            source = (
                str(self._config_path) if self._file_found
                else f"{self._config_path} (file not found)"
            )
            env_key = key.upper().replace(".", "_")
            logger.error(f"Required configuration '{key}' is missing")
            raise ConfigurationMissingError(
                f"Required configuration '{key}' is missing or blank "
                f"(set it in {source} or via ${env_key})"
            )

        if cast is None:
            return value
        try:
            return cast(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationMissingError(
                f"Configuration '{key}'={value!r} is not a valid {getattr(cast, '__name__', cast)}"
            ) from e

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get entire configuration section.

        Args:
            section: Section name (e.g., "ui", "logging")

        Returns:
            Section dictionary or empty dict if not found
        """
        return self._config.get(section) or {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """
        Reset singleton instance.

        Useful for testing when configuration needs to be reloaded
        with different settings.
        """
        cls._instance = None
        cls._config = {}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes", "on")


@dataclass(frozen=True)
class UISettings:
    """
    Typed view of the ``ui`` configuration section.

    Attributes:
        base_url: Storefront root URL
        timeout_seconds: Default wait timeout
        poll_interval_seconds: Wait polling interval
        action_timeout_seconds: Native Playwright action timeout
        retry_budget: Attempts per resolution + action
        browser: chromium / firefox / webkit
        headless: Run without a visible window
        screenshot_dir: Where failure screenshots are written
    """
    base_url: str
    timeout_seconds: float = 10.0
    poll_interval_seconds: float = 0.5
    action_timeout_seconds: float = 5.0
    retry_budget: int = 3
    browser: str = "chromium"
    headless: bool = True
    screenshot_dir: str = "screenshots"

    def __post_init__(self):
        if self.timeout_seconds <= 0:
            raise ConfigurationMissingError("ui.timeout_seconds must be positive")
        if self.poll_interval_seconds <= 0:
            raise ConfigurationMissingError("ui.poll_interval_seconds must be positive")
        if self.action_timeout_seconds <= 0:
            raise ConfigurationMissingError("ui.action_timeout_seconds must be positive")
        if self.retry_budget < 1:
            raise ConfigurationMissingError("ui.retry_budget must be at least 1")

    def url(self, path: str = "/") -> str:
        """Join ``path`` onto the base URL."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "UISettings":
        """
        Build settings from a ConfigLoader, failing fast on missing values.

        Raises:
            ConfigurationMissingError: If ``ui.base_url`` is absent or a value is invalid
        """
        config = config or ConfigLoader()
        return cls(
            base_url=config.require("ui.base_url", cast=str).rstrip("/"),
            timeout_seconds=_typed(config, "ui.timeout_seconds", 10.0, float),
            poll_interval_seconds=_typed(config, "ui.poll_interval_seconds", 0.5, float),
            action_timeout_seconds=_typed(config, "ui.action_timeout_seconds", 5.0, float),
            retry_budget=_typed(config, "ui.retry_budget", 3, int),
            browser=str(config.get("ui.browser", "chromium")).lower(),
            headless=_as_bool(config.get("ui.headless", True)),
            screenshot_dir=str(config.get("ui.screenshot_dir", "screenshots")),
        )


def _typed(config: ConfigLoader, key: str, default: Any, cast: Callable[[Any], Any]) -> Any:
    value = config.get(key, default)
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationMissingError(
            f"Configuration '{key}'={value!r} is not a valid {cast.__name__}"
        ) from e


__all__ = [
    "ConfigLoader",
    "UISettings",
    "DEFAULT_CONFIG_PATH",
]
