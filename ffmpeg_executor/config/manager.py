"""
Configuration management for the FFmpeg executor.

This module handles loading, validating, and saving configuration from YAML files.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from ffmpeg_executor.config.models import AppConfig
from ffmpeg_executor.utils import ConfigurationError, get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "FFMPEG_EXECUTOR_CONFIG"


class ConfigManager:
    """Manages executor configuration."""

    DEFAULT_CONFIG_LOCATIONS = [
        Path.home() / ".ffmpeg-executor.yaml",
        Path.home() / ".config" / "ffmpeg-executor" / "config.yaml",
        Path.cwd() / ".ffmpeg-executor.yaml",
    ]

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file
        """
        self.config_path = config_path
        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> AppConfig:
        """
        Get current configuration, loading it if necessary.

        Raises:
            ConfigurationError: If configuration cannot be loaded
        """
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self, config_path: Optional[Path] = None) -> AppConfig:
        """
        Load configuration from file or create default.

        Lookup order: explicit path, $FFMPEG_EXECUTOR_CONFIG, default locations.

        Args:
            config_path: Optional path to configuration file

        Returns:
            Loaded AppConfig

        Raises:
            ConfigurationError: If configuration file is missing or invalid
        """
        path = config_path or self.config_path
        if path is None and os.environ.get(CONFIG_ENV_VAR):
            path = Path(os.environ[CONFIG_ENV_VAR])

        if path:
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")
            return self._load_from_file(path)

        for default_path in self.DEFAULT_CONFIG_LOCATIONS:
            if default_path.exists():
                logger.info(f"Loading configuration from {default_path}")
                return self._load_from_file(default_path)

        logger.info("No configuration file found, using defaults")
        return AppConfig.create_default()

    def _load_from_file(self, path: Path) -> AppConfig:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If file cannot be read or parsed
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file {path}: {e}") from e

        if data is None:
            raise ConfigurationError(f"Configuration file is empty: {path}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {path}")

        try:
            config = AppConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

        logger.debug(f"Successfully loaded configuration from {path}")
        return config

    def save(self, path: Optional[Path] = None, config: Optional[AppConfig] = None) -> None:
        """
        Save configuration to file.

        Args:
            path: Path to save configuration (uses default if None)
            config: Configuration to save (uses current if None)

        Raises:
            ConfigurationError: If configuration cannot be saved
        """
        cfg = config or self.config
        save_path = path or self.config_path or self.DEFAULT_CONFIG_LOCATIONS[0]

        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)
            data = cfg.model_dump(mode="json")
            with open(save_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}") from e

        logger.info(f"Configuration saved to {save_path}")

    def init_default_config(self, path: Optional[Path] = None, force: bool = False) -> Path:
        """
        Initialize default configuration file.

        Args:
            path: Path to create configuration file (uses default if None)
            force: Overwrite existing file

        Returns:
            Path to created configuration file

        Raises:
            ConfigurationError: If file already exists and force=False
        """
        target_path = path or self.DEFAULT_CONFIG_LOCATIONS[0]

        if target_path.exists() and not force:
            raise ConfigurationError(
                f"Configuration file already exists: {target_path}. Use force=True to overwrite."
            )

        self.save(target_path, AppConfig.create_default())
        return target_path

    def reload(self) -> AppConfig:
        """Reload configuration from file."""
        self._config = None
        return self.config


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[Path] = None) -> ConfigManager:
    """
    Get global configuration manager instance.

    A config_path different from the current manager's replaces it.
    """
    global _config_manager

    if _config_manager is None or (
        config_path is not None and config_path != _config_manager.config_path
    ):
        _config_manager = ConfigManager(config_path)

    return _config_manager


def get_config(config_path: Optional[Path] = None) -> AppConfig:
    """Get executor configuration."""
    return get_config_manager(config_path).config
