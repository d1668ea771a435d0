"""
Main configuration module for the configurator library.

Provides centralized configuration management with validation, loading from
multiple sources, and a clean access interface.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, ValidationError
from dotenv import load_dotenv

from config.config import (
    ExportConfig,
    ValidationConfig,
    SystemConfig,
)
from errors import ConfigError, ErrorCode

# Import the registry (which was initialized in config/__init__.py)
from config.registry import registry
from utils.error_logging import setup_error_loggers

ENV_PREFIX = "CONFIGURATOR_"


class AppConfig(BaseModel):
    """
    Central configuration manager for the library.

    Handles loading from multiple sources:
    1. JSON configuration files
    2. Environment variables

    Provides validated access to all library settings.
    """

    export: ExportConfig = Field(default_factory=ExportConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None) -> "AppConfig":
        """
        Load configuration from various sources and create a config instance.

        Args:
            config_path: Optional path to a JSON configuration file

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigError: If configuration is invalid
        """
        # Load environment variables
        load_dotenv()

        config_data: Dict[str, Any] = {}

        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise ConfigError(
                    f"Configuration file not found: {path}",
                    ErrorCode.CONFIG_NOT_FOUND
                )

            try:
                with open(path, "r") as f:
                    file_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(
                    f"Invalid JSON in configuration file: {e}",
                    ErrorCode.CONFIG_PARSE_ERROR
                )
            except OSError as e:
                raise ConfigError(
                    f"Error loading configuration file: {e}",
                    ErrorCode.INVALID_CONFIG
                )
            if not isinstance(file_config, dict):
                raise ConfigError(
                    f"Configuration file must contain a JSON object: {path}",
                    ErrorCode.CONFIG_PARSE_ERROR
                )
            config_data.update(file_config)

        # Environment variables override file values section by section
        for section_name, section_data in cls._load_from_env().items():
            section = config_data.setdefault(section_name, {})
            if isinstance(section, dict):
                section.update(section_data)

        try:
            instance = cls.model_validate(config_data)
        except ValidationError as e:
            raise ConfigError(
                f"Error initializing configuration: {e}",
                ErrorCode.INVALID_CONFIG
            )

        cls._apply_logging(instance)
        return instance

    @classmethod
    def _load_from_env(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load configuration from environment variables.
        Nested keys are separated by '__'.

        Examples:
            CONFIGURATOR_EXPORT__TYPE_TAG_KEY=__type__
            CONFIGURATOR_VALIDATION__STRICT_UNKNOWN_KEYS=true

        Returns:
            Nested dictionary of configuration values from environment
        """
        config: Dict[str, Dict[str, Any]] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            config_key = key[len(ENV_PREFIX):].lower()
            if "__" not in config_key:
                # Top-level settings not supported, must use section
                continue

            section, setting = config_key.split("__", 1)
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                # Use as string if not valid JSON
                parsed_value = value
            config.setdefault(section, {})[setting] = parsed_value

        return config

    @classmethod
    def _apply_logging(cls, config: "AppConfig") -> None:
        """
        Apply the logging settings of a loaded configuration.

        Args:
            config: Configuration instance
        """
        level = getattr(logging, config.system.log_level.upper(), None)
        if not isinstance(level, int):
            raise ConfigError(
                f"Unknown log level: {config.system.log_level}",
                ErrorCode.INVALID_CONFIG
            )
        logging.getLogger("configurator").setLevel(level)

        if config.system.error_log_dir:
            setup_error_loggers(config.system.error_log_dir)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., "export.type_tag_key")
            default: Default value if key is not found

        Returns:
            Configuration value or default
        """
        parts = key.split(".")

        if len(parts) == 1:
            return getattr(self, parts[0], default)

        if len(parts) == 2:
            section = getattr(self, parts[0], None)
            if section is None:
                return default
            return getattr(section, parts[1], default)

        # Unsupported nesting level
        return default

    def require(self, key: str) -> Any:
        """
        Get a required configuration value.

        Args:
            key: Configuration key in dot notation (e.g., "export.type_tag_key")

        Returns:
            Configuration value

        Raises:
            ConfigError: If the key is not found
        """
        value = self.get(key)
        if value is None:
            raise ConfigError(
                f"Required configuration key not found: {key}",
                ErrorCode.CONFIG_NOT_FOUND
            )
        return value

    def as_dict(self) -> Dict[str, Any]:
        """
        Get the full configuration as a dictionary.

        Returns:
            Configuration dictionary
        """
        return self.model_dump()


def initialize_config() -> AppConfig:
    """
    Initialize the configuration system.

    Returns:
        The loaded configuration instance
    """
    config_instance = AppConfig.load(os.getenv(f"{ENV_PREFIX}CONFIG_FILE") or None)
    logging.getLogger(__name__).debug(
        f"Configuration loaded; registry initialized with: {list(registry.list_registered())}"
    )
    return config_instance


# Create the global configuration instance
config = initialize_config()
