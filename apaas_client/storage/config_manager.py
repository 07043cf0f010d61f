"""
Loads client settings from an INI file and validates them.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from apaas_client.exceptions import ConfigurationError
from apaas_client.models.config import ClientConfig

log = logging.getLogger(__name__)

CLIENT_SECTION = "apaas"
LIMITER_SECTION = "limiter"


class ConfigManager:
    """Handles reading the client's INI config file into a ClientConfig."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = Path(config_file_path)
        # Secrets may legitimately contain '%', so interpolation stays off.
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, overrides: dict[str, Any] | None = None) -> ClientConfig:
        """
        Loads configuration from the INI file, applies overrides, and validates it.

        Args:
            overrides: Values that take precedence over the file, e.g. a
                namespace chosen at runtime.

        Returns:
            A validated ClientConfig object.

        Raises:
            ConfigurationError: If the config file is missing, invalid, or
            validation fails.
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'."
            )

        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        if not self._parser.has_section(CLIENT_SECTION):
            raise ConfigurationError(
                f"Configuration file '{self.config_file_path}' has no "
                f"[{CLIENT_SECTION}] section."
            )

        settings = self._get_config_as_dict()
        if overrides:
            settings.update(overrides)

        try:
            config = ClientConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        log.debug(
            f"Loaded configuration for namespace '{config.namespace}' "
            f"from {self.config_file_path}"
        )
        return config

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the client and limiter sections into keyword arguments."""
        section = self._parser[CLIENT_SECTION]
        try:
            settings: dict[str, Any] = {
                "client_id": section.get("client_id", ""),
                "client_secret": section.get("client_secret", ""),
                "namespace": section.get("namespace", ""),
                "disable_token_cache": section.getboolean("disable_token_cache", False),
            }
            for key in ("base_url", "timeout", "token_refresh_margin_ms"):
                if key in section:
                    settings[key] = section[key]

            if self._parser.has_section(LIMITER_SECTION):
                settings["limiter"] = dict(self._parser[LIMITER_SECTION])
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in configuration file: {e}") from e

        return settings
