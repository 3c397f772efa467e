"""Configuration management system."""

from __future__ import annotations

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from dotenv import load_dotenv

from .constants import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_DATA_DIR,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RATES_URL,
    DEFAULT_RETRY_DELAY_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    LOG_FILE,
    RATES_FILE_NAME,
)

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Exception raised when a configuration value has the wrong format."""
    pass


def _env_number(variable: str, convert):
    """Read a numeric environment variable, naming it when it is malformed."""
    raw = os.getenv(variable)
    try:
        return convert(raw.strip())
    except ValueError:
        expected = "an integer" if convert is int else "a number"
        raise ConfigurationError(
            f"Environment variable {variable} must be {expected}, got '{raw}'"
        ) from None


class Settings:
    """Configuration management class for the currency converter.

    Defaults are overridden by an optional JSON configuration file and then
    by environment variables (a .env file in the working directory is
    loaded first).
    """

    def __init__(self, config_file: Optional[str] = None, load_env_file: bool = True):
        """Initialize settings.

        Args:
            config_file: Optional path to configuration file
            load_env_file: Whether to read a .env file before the environment
        """
        self._config: Dict[str, Any] = {}
        self._config_file = config_file
        self._load_default_config()

        if config_file:
            self.load_from_file(config_file)

        if load_env_file and Path(".env").exists():
            load_dotenv(".env")

        # Load from environment variables
        self._load_from_environment()

    def _load_default_config(self) -> None:
        """Load default configuration values."""
        self._config = {
            'rates': {
                'url': DEFAULT_RATES_URL,
                'max_attempts': DEFAULT_MAX_ATTEMPTS,
                'timeout_seconds': DEFAULT_TIMEOUT_SECONDS,
                'retry_delay_seconds': DEFAULT_RETRY_DELAY_SECONDS
            },
            'storage': {
                'data_directory': DEFAULT_DATA_DIR,
                'rates_file': RATES_FILE_NAME
            },
            'startup': {
                'update_on_start': True
            },
            'logging': {
                'level': DEFAULT_LOG_LEVEL,
                'console_level': DEFAULT_CONSOLE_LOG_LEVEL,
                'file': LOG_FILE,
                'format': DEFAULT_LOG_FORMAT
            }
        }

    def _load_from_environment(self) -> None:
        """Load configuration from environment variables."""
        if os.getenv('CONVERTER_RATES_URL'):
            self._config['rates']['url'] = os.getenv('CONVERTER_RATES_URL')

        if os.getenv('CONVERTER_MAX_ATTEMPTS'):
            self._config['rates']['max_attempts'] = _env_number('CONVERTER_MAX_ATTEMPTS', int)

        if os.getenv('CONVERTER_TIMEOUT'):
            self._config['rates']['timeout_seconds'] = _env_number('CONVERTER_TIMEOUT', float)

        if os.getenv('CONVERTER_DATA_DIR'):
            self._config['storage']['data_directory'] = os.getenv('CONVERTER_DATA_DIR')

        # Development mode
        if os.getenv('CONVERTER_DEV', 'false').lower() == 'true':
            self._config['logging']['level'] = 'DEBUG'

    def load_from_file(self, config_file: str) -> None:
        """Load configuration from JSON file.

        Args:
            config_file: Path to configuration file
        """
        config_path = Path(config_file)

        if not config_path.exists():
            logger.warning(f"Configuration file not found: {config_file}")
            return

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load configuration file {config_file}: {e}")
            return

        # Merge with existing configuration
        self._merge_config(self._config, file_config)
        logger.info(f"Loaded configuration from: {config_file}")

    def save_to_file(self, config_file: str) -> None:
        """Save configuration to JSON file.

        Args:
            config_file: Path to save configuration file
        """
        config_path = Path(config_file)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(self._config, f, indent=2)
            logger.info(f"Saved configuration to: {config_file}")
        except OSError as e:
            logger.error(f"Failed to save configuration file {config_file}: {e}")

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Configuration key (supports dot notation, e.g., 'rates.url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by key.

        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
        """
        keys = key.split('.')
        config = self._config

        # Navigate to the parent dictionary
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def get_rates_config(self) -> Dict[str, Any]:
        """Get rates feed configuration."""
        return self.get('rates', {})

    def get_data_directory(self) -> str:
        """Get the directory holding the rates snapshot."""
        return self.get('storage.data_directory', DEFAULT_DATA_DIR)

    def get_rates_file_name(self) -> str:
        """Get the rates snapshot file name."""
        return self.get('storage.rates_file', RATES_FILE_NAME)

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.get('logging', {})

    def is_development_mode(self) -> bool:
        """Check if development mode is enabled."""
        return os.getenv('CONVERTER_DEV', 'false').lower() == 'true'


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns:
        Global settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure_system(config_file: Optional[str] = None) -> Settings:
    """Configure the system with settings.

    Args:
        config_file: Optional path to configuration file

    Returns:
        Configured settings instance
    """
    global _settings
    _settings = Settings(config_file)
    return _settings
