"""Configuration management for the FFmpeg executor."""

from ffmpeg_executor.config.manager import (
    ConfigManager,
    get_config,
    get_config_manager,
)
from ffmpeg_executor.config.models import (
    DEFAULT_CONTAINER_NAME,
    DEFAULT_CONTAINER_WORKDIR,
    AppConfig,
    ExecutorConfig,
    PerformanceConfig,
)

__all__ = [
    # Manager
    "ConfigManager",
    "get_config",
    "get_config_manager",
    # Models
    "AppConfig",
    "DEFAULT_CONTAINER_NAME",
    "DEFAULT_CONTAINER_WORKDIR",
    "ExecutorConfig",
    "PerformanceConfig",
]
