"""
================================================================================
Configuration Loader
================================================================================

YAML configuration for the Treveler API suite with environment overrides.

Features:
    - Single YAML file (treveler_suites/config/config.yaml)
    - Environment variable override (AUTH_RESPONSE_TIME_LIMIT_MS -> auth.response_time_limit_ms)
    - Dot notation path access with typed defaults
    - Named test accounts (auth.accounts.<name>)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.yaml"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Lookup order (highest priority first):
        1. Environment variables (API_BASE_URL)
        2. YAML configuration file
        3. Default passed by the caller

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("api.base_url", "http://localhost:8000")
        'http://localhost:8000'
        >>> config.get("auth.response_time_limit_ms", 15000)
        15000

    Environment Variable Mapping:
        - api.base_url -> API_BASE_URL
        - api.timeout -> API_TIMEOUT
        - auth.default_expiry_seconds -> AUTH_DEFAULT_EXPIRY_SECONDS
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Return the already loaded instance if there is one."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key: Dot-notation path (e.g., "auth.response_time_limit_ms")
            default: Value returned when the key is not configured; its type
                     is also used to convert environment strings

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Return a whole top-level section, or {} when missing."""
        return self._config.get(section, {})

    def get_account(self, name: str) -> Tuple[str, str]:
        """
        Email and one-time code of a configured test account.

        Args:
            name: Account key under auth.accounts (e.g., "guest")

        Returns:
            (email, code) tuple

        Raises:
            ConfigurationError: If the account or one of its fields is missing
        """
        email = self.get(f"auth.accounts.{name}.email")
        code = self.get(f"auth.accounts.{name}.code")
        if not email or not code:
            raise ConfigurationError(f"Test account not configured: auth.accounts.{name}")
        return str(email), str(code)

    def reload(self) -> None:
        """Re-read the YAML file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """Convert an environment string to the type of the default."""
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
        """Drop the loaded instance (for testing)."""
        cls._instance = None
        cls._config = {}


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
]
