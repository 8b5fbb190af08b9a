"""
FFmpeg Executor

Bounded-concurrency FFmpeg runner for thumbnail and preview extraction,
reaching FFmpeg through a container or a native binary.
"""

__version__ = "0.1.0"

from ffmpeg_executor.config import AppConfig, PerformanceConfig
from ffmpeg_executor.executor import (
    BoundedFFmpegExecutor,
    DockerFFmpegExecutor,
    FFmpegExecutor,
    NativeFFmpegExecutor,
    create_executor,
)
from ffmpeg_executor.processing import VideoProcessingService
from ffmpeg_executor.utils import (
    ConfigurationError,
    ExecutionFailedError,
    FFmpegExecutorError,
    InvalidInputError,
    ProcessTimeoutError,
    QueueFullError,
    get_logger,
    setup_logger,
)

__all__ = [
    "__version__",
    # Config
    "AppConfig",
    "PerformanceConfig",
    # Executors
    "BoundedFFmpegExecutor",
    "DockerFFmpegExecutor",
    "FFmpegExecutor",
    "NativeFFmpegExecutor",
    "create_executor",
    "VideoProcessingService",
    # Errors
    "ConfigurationError",
    "ExecutionFailedError",
    "FFmpegExecutorError",
    "InvalidInputError",
    "ProcessTimeoutError",
    "QueueFullError",
    # Logging
    "get_logger",
    "setup_logger",
]
