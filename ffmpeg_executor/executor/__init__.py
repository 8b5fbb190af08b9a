"""FFmpeg process execution with bounded concurrency."""

from ffmpeg_executor.executor.backends import DockerFFmpegExecutor, NativeFFmpegExecutor
from ffmpeg_executor.executor.base import BoundedFFmpegExecutor, FFmpegExecutor
from ffmpeg_executor.executor.factory import create_executor
from ffmpeg_executor.executor.gate import CapacityGate
from ffmpeg_executor.executor.subprocess import AsyncFFmpegProcess, FFmpegArgsBuilder

__all__ = [
    "AsyncFFmpegProcess",
    "BoundedFFmpegExecutor",
    "CapacityGate",
    "DockerFFmpegExecutor",
    "FFmpegArgsBuilder",
    "FFmpegExecutor",
    "NativeFFmpegExecutor",
    "create_executor",
]
