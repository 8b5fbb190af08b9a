"""Data models for the FFmpeg executor."""

from ffmpeg_executor.models.tasks import (
    TERMINAL_STATUSES,
    ExecutionTask,
    ExecutorStats,
    TaskStatus,
)

__all__ = [
    "ExecutionTask",
    "ExecutorStats",
    "TaskStatus",
    "TERMINAL_STATUSES",
]
