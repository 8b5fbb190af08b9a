"""
FFmpeg executor interface and the bounded implementation shared by backends.

Backends (docker, native) differ only in how FFmpeg is reached and in the
working-directory prefixes that inputs and outputs are joined to. Admission
control, performance flags and timeout handling live in BoundedFFmpegExecutor.
"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import PurePath
from typing import Optional, Sequence, Union

from ..config import PerformanceConfig
from ..models import ExecutionTask, ExecutorStats, TaskStatus
from ..utils import (
    InvalidInputError,
    ProcessTimeoutError,
    QueueFullError,
    build_scale_filter,
    derive_preview_name,
    derive_thumbnail_name,
    get_logger,
    join_work_dir,
    safe_basename,
)
from .gate import CapacityGate
from .subprocess import AsyncFFmpegProcess, FFmpegArgsBuilder

logger = get_logger(__name__)

PathLike = Union[str, PurePath]

# Fastest encoder preset and decoder tuning; keeps FFmpeg's memory footprint low
LOW_MEMORY_FLAGS = ("-preset", "ultrafast", "-tune", "fastdecode")

FRAME_QUALITY = "2"


class FFmpegExecutor(ABC):
    """Strategy interface over the ways FFmpeg can be deployed."""

    @abstractmethod
    async def execute(self, args: Sequence[str]) -> str:
        """
        Run FFmpeg with the given arguments.

        Args:
            args: FFmpeg arguments, not including the program itself

        Returns:
            Combined stdout/stderr output

        Raises:
            QueueFullError: If no capacity slot frees up in time
            ProcessTimeoutError: If FFmpeg does not finish in time
            ExecutionFailedError: If FFmpeg exits with a non-zero code
        """

    @abstractmethod
    async def extract_frame(
        self,
        video_path: PathLike,
        timestamp: int,
        output_path: Optional[PathLike] = None,
    ) -> str:
        """
        Extract a single frame from a video as a JPEG.

        Args:
            video_path: Source video
            timestamp: Seek position in whole seconds
            output_path: Caller's output directory (backend-dependent use)

        Returns:
            Derived frame file name, e.g. "movie_thumb_5.jpg"
        """

    @abstractmethod
    def describe(self) -> str:
        """Return the backend identifier used in diagnostics."""


class BoundedFFmpegExecutor(FFmpegExecutor):
    """
    FFmpeg executor with a concurrency cap, a timeout and performance flags.

    One instance is meant to live for the whole service; its capacity gate is
    shared by every task submitted through it.
    """

    def __init__(self, performance: PerformanceConfig, binary: str = "ffmpeg"):
        """
        Initialize executor.

        Args:
            performance: Resource limits
            binary: FFmpeg program name or path
        """
        self.performance = performance
        self.binary = binary
        self.gate = CapacityGate(performance.max_concurrent_tasks)
        self.stats = ExecutorStats()

        logger.info(
            f"{type(self).__name__} initialized, max concurrent tasks: "
            f"{performance.max_concurrent_tasks}, thread limit: {performance.threads}"
        )

    @property
    @abstractmethod
    def invocation_prefix(self) -> list[str]:
        """Tokens placed before the FFmpeg program name."""

    @abstractmethod
    def input_dir_for(self, video_path: PathLike) -> str:
        """Directory, as the backend sees it, that holds the source video."""

    @abstractmethod
    def output_dir_for(self, video_path: PathLike, output_path: Optional[PathLike]) -> str:
        """Directory, as the backend sees it, that receives derived files."""

    def performance_flags(self) -> list[str]:
        """Flags derived from the performance config, placed before caller args."""
        flags: list[str] = []
        if self.performance.threads > 0:
            flags.extend(["-threads", str(self.performance.threads)])
        if self.performance.low_memory_mode:
            flags.extend(LOW_MEMORY_FLAGS)
        return flags

    def build_command(self, args: Sequence[str]) -> list[str]:
        """
        Build the full invocation.

        Order: backend prefix, program, performance flags, caller args.
        """
        return [*self.invocation_prefix, self.binary, *self.performance_flags(), *args]

    async def execute(self, args: Sequence[str]) -> str:
        task = ExecutionTask(args=tuple(args))
        timeout = self.performance.timeout_seconds

        task.transition(TaskStatus.ACQUIRING_SLOT)
        try:
            async with self.gate.slot(timeout):
                task.transition(TaskStatus.RUNNING)
                return await self._run(task, timeout)
        except QueueFullError as e:
            task.error = str(e)
            task.transition(TaskStatus.REJECTED)
            self.stats.record(task)
            logger.warning(f"Task {task.task_id} rejected: {e}")
            raise
        except asyncio.CancelledError:
            if task.status is TaskStatus.ACQUIRING_SLOT:
                task.error = "cancelled while waiting for a slot"
                task.transition(TaskStatus.FAILED)
                self.stats.record(task)
                logger.info(f"Task {task.task_id} cancelled before it started")
            raise

    async def _run(self, task: ExecutionTask, timeout: int) -> str:
        command = self.build_command(task.args)
        task.command = tuple(command)
        logger.info(f"Running FFmpeg ({self.describe()}): {' '.join(command)}")

        process = AsyncFFmpegProcess(command, timeout=timeout)
        try:
            output = await process.run()
        except (Exception, asyncio.CancelledError) as e:
            task.exit_code = process.returncode
            task.error = str(e) or type(e).__name__
            task.transition(TaskStatus.FAILED)
            self.stats.record(task, timed_out=isinstance(e, ProcessTimeoutError))
            raise

        task.exit_code = process.returncode
        task.transition(TaskStatus.SUCCEEDED)
        self.stats.record(task)
        logger.info(f"FFmpeg task {task.task_id} completed in {task.duration:.2f}s")
        return output

    def build_frame_args(
        self,
        video_path: PathLike,
        timestamp: int,
        output_path: Optional[PathLike] = None,
    ) -> tuple[str, list[str]]:
        """
        Build frame-extraction arguments.

        Returns:
            Tuple of (derived file name, FFmpeg arguments)

        Raises:
            InvalidInputError: If the timestamp is negative or the file name is unsafe
        """
        if timestamp < 0:
            raise InvalidInputError(f"timestamp must be >= 0, got {timestamp}")

        video_name = safe_basename(video_path)
        frame_name = derive_thumbnail_name(video_name, timestamp)
        input_dir = self.input_dir_for(video_path)
        output_dir = self.output_dir_for(video_path, output_path)

        output_options = {"vframes": "1", "q:v": FRAME_QUALITY}
        if self.performance.has_resolution_limit:
            output_options["vf"] = build_scale_filter(
                self.performance.max_resolution_width,
                self.performance.max_resolution_height,
            )
        output_options["y"] = ""

        args = (
            FFmpegArgsBuilder()
            .input(join_work_dir(input_dir, video_name), {"ss": str(timestamp)})
            .output(join_work_dir(output_dir, frame_name), output_options)
            .build()
        )
        return frame_name, args

    def build_preview_args(
        self,
        video_path: PathLike,
        duration: int,
        output_path: Optional[PathLike] = None,
    ) -> tuple[str, list[str]]:
        """
        Build arguments for a low-bitrate clip of the first ``duration`` seconds.

        Returns:
            Tuple of (derived file name, FFmpeg arguments)
        """
        if duration <= 0:
            raise InvalidInputError(f"duration must be > 0, got {duration}")

        video_name = safe_basename(video_path)
        preview_name = derive_preview_name(video_name, duration)
        input_dir = self.input_dir_for(video_path)
        output_dir = self.output_dir_for(video_path, output_path)

        output_options = {"t": str(duration), "c:v": "libx264", "c:a": "aac"}
        if self.performance.max_bitrate > 0:
            output_options["b:v"] = f"{self.performance.max_bitrate}k"
        if self.performance.has_resolution_limit:
            output_options["vf"] = build_scale_filter(
                self.performance.max_resolution_width,
                self.performance.max_resolution_height,
            )
        output_options["movflags"] = "+faststart"
        output_options["y"] = ""

        args = (
            FFmpegArgsBuilder()
            .input(join_work_dir(input_dir, video_name))
            .output(join_work_dir(output_dir, preview_name), output_options)
            .build()
        )
        return preview_name, args

    def build_probe_args(self, video_path: PathLike) -> list[str]:
        """Build arguments that make FFmpeg print stream info without decoding."""
        video_name = safe_basename(video_path)
        return (
            FFmpegArgsBuilder()
            .input(join_work_dir(self.input_dir_for(video_path), video_name))
            .output("-", {"t": "0", "f": "null"})
            .build()
        )

    async def extract_frame(
        self,
        video_path: PathLike,
        timestamp: int,
        output_path: Optional[PathLike] = None,
    ) -> str:
        frame_name, args = self.build_frame_args(video_path, timestamp, output_path)
        await self.execute(args)
        logger.info(f"Frame extracted ({self.describe()}): {frame_name}")
        return frame_name
