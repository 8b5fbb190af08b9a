"""Shared utilities: errors, logging and helpers."""

from ffmpeg_executor.utils.errors import (
    ConfigurationError,
    ExecutionFailedError,
    FFmpegExecutorError,
    InvalidInputError,
    ProcessTimeoutError,
    QueueFullError,
    ThumbnailError,
)
from ffmpeg_executor.utils.helpers import (
    build_scale_filter,
    derive_preview_name,
    derive_thumbnail_name,
    format_duration,
    join_work_dir,
    parse_time_to_seconds,
    safe_basename,
    strip_extension,
)
from ffmpeg_executor.utils.logger import get_logger, log_performance, setup_logger

__all__ = [
    # Errors
    "ConfigurationError",
    "ExecutionFailedError",
    "FFmpegExecutorError",
    "InvalidInputError",
    "ProcessTimeoutError",
    "QueueFullError",
    "ThumbnailError",
    # Helpers
    "build_scale_filter",
    "derive_preview_name",
    "derive_thumbnail_name",
    "format_duration",
    "join_work_dir",
    "parse_time_to_seconds",
    "safe_basename",
    "strip_extension",
    # Logging
    "get_logger",
    "log_performance",
    "setup_logger",
]
