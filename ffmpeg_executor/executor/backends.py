"""
Concrete FFmpeg backends.

DockerFFmpegExecutor runs FFmpeg inside a long-lived container through
``docker exec``; paths are container paths under a fixed working directory.
NativeFFmpegExecutor runs the FFmpeg binary on the host.
"""

from pathlib import Path
from typing import Optional

from ..config import DEFAULT_CONTAINER_NAME, DEFAULT_CONTAINER_WORKDIR, PerformanceConfig
from .base import BoundedFFmpegExecutor, PathLike


class DockerFFmpegExecutor(BoundedFFmpegExecutor):
    """Run FFmpeg in a container via ``docker exec <container> ffmpeg``."""

    def __init__(
        self,
        performance: PerformanceConfig,
        container_name: str = DEFAULT_CONTAINER_NAME,
        work_dir: str = DEFAULT_CONTAINER_WORKDIR,
        binary: str = "ffmpeg",
        docker_binary: str = "docker",
    ):
        """
        Initialize docker executor.

        Args:
            performance: Resource limits
            container_name: Running container that has FFmpeg installed
            work_dir: Container directory holding videos and extracted frames
            binary: FFmpeg program inside the container
            docker_binary: Container runtime executable on the host
        """
        self.container_name = container_name
        self.work_dir = work_dir
        self.docker_binary = docker_binary
        super().__init__(performance, binary=binary)

    @property
    def invocation_prefix(self) -> list[str]:
        return [self.docker_binary, "exec", self.container_name]

    def input_dir_for(self, video_path: PathLike) -> str:
        # Host paths mean nothing inside the container
        return self.work_dir

    def output_dir_for(self, video_path: PathLike, output_path: Optional[PathLike]) -> str:
        return self.work_dir

    def describe(self) -> str:
        return "docker (optimized)"


class NativeFFmpegExecutor(BoundedFFmpegExecutor):
    """Run the FFmpeg binary installed on the host."""

    def __init__(
        self,
        performance: PerformanceConfig,
        work_dir: Optional[str] = None,
        binary: str = "ffmpeg",
    ):
        """
        Initialize native executor.

        Args:
            performance: Resource limits
            work_dir: Fixed directory for videos and frames. When unset, videos
                are read from their own directory and frames are written to the
                caller's output directory, falling back to the video's directory.
            binary: FFmpeg program name or path
        """
        self.work_dir = work_dir
        super().__init__(performance, binary=binary)

    @property
    def invocation_prefix(self) -> list[str]:
        return []

    def input_dir_for(self, video_path: PathLike) -> str:
        if self.work_dir:
            return self.work_dir
        return str(Path(video_path).parent)

    def output_dir_for(self, video_path: PathLike, output_path: Optional[PathLike]) -> str:
        if self.work_dir:
            return self.work_dir
        if output_path:
            return str(output_path)
        return str(Path(video_path).parent)

    def describe(self) -> str:
        return "native (optimized)"
