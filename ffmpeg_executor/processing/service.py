"""
Video processing service.

Caller-facing operations built on an FFmpeg executor: thumbnails, preview
clips and duration probing.
"""

import re
from pathlib import Path
from typing import Optional, Union

from ..executor import BoundedFFmpegExecutor
from ..utils import (
    FFmpegExecutorError,
    ThumbnailError,
    get_logger,
    log_performance,
    parse_time_to_seconds,
)

logger = get_logger(__name__)

DURATION_PATTERN = re.compile(r"Duration: (\d{2}:\d{2}:\d{2}(?:\.\d+)?)")

DEFAULT_THUMBNAIL_TIMESTAMP = 1
DEFAULT_PREVIEW_DURATION = 10


class VideoProcessingService:
    """Generates thumbnails and previews for uploaded videos."""

    def __init__(self, executor: BoundedFFmpegExecutor):
        self.executor = executor

    @log_performance(logger)
    async def generate_thumbnail(
        self,
        video_file: Union[str, Path],
        timestamp: int = DEFAULT_THUMBNAIL_TIMESTAMP,
    ) -> str:
        """
        Extract a thumbnail frame next to the video.

        Args:
            video_file: Source video
            timestamp: Seek position in seconds

        Returns:
            Thumbnail file name

        Raises:
            ThumbnailError: If extraction fails for any executor-level reason
            OSError: If FFmpeg or the container runtime cannot be started (not wrapped)
        """
        video_file = Path(video_file)
        logger.info(
            f"Extracting frame with {self.executor.describe()}: "
            f"{video_file.name}, timestamp: {timestamp}s"
        )

        try:
            thumbnail = await self.executor.extract_frame(video_file, timestamp, video_file.parent)
        except FFmpegExecutorError as e:
            logger.error(f"Thumbnail generation failed for {video_file.name}: {e}")
            raise ThumbnailError(f"Thumbnail generation failed: {e}") from e

        logger.info(f"Thumbnail generated: {thumbnail}")
        return thumbnail

    @log_performance(logger)
    async def generate_preview(
        self,
        video_file: Union[str, Path],
        duration: int = DEFAULT_PREVIEW_DURATION,
    ) -> str:
        """
        Encode a low-bitrate clip of the first ``duration`` seconds.

        Returns:
            Preview file name

        Raises:
            ThumbnailError: If encoding fails for any executor-level reason
            OSError: If FFmpeg cannot be started
        """
        video_file = Path(video_file)

        try:
            preview, args = self.executor.build_preview_args(
                video_file, duration, video_file.parent
            )
            await self.executor.execute(args)
        except FFmpegExecutorError as e:
            logger.error(f"Preview generation failed for {video_file.name}: {e}")
            raise ThumbnailError(f"Preview generation failed: {e}") from e

        logger.info(f"Preview generated: {preview}")
        return preview

    async def get_video_duration(self, video_file: Union[str, Path]) -> int:
        """
        Probe a video's duration.

        Returns:
            Duration in whole seconds, 0 if FFmpeg reports none
        """
        video_file = Path(video_file)
        output = await self.executor.execute(
            self.executor.build_probe_args(video_file)
        )
        return parse_duration(output) or 0


def parse_duration(output: str) -> Optional[int]:
    """
    Find the container duration in FFmpeg's input summary.

    Args:
        output: FFmpeg output containing a "Duration: HH:MM:SS.xx" line

    Returns:
        Whole seconds, or None if no duration is present (e.g. "Duration: N/A")
    """
    match = DURATION_PATTERN.search(output)
    if not match:
        return None
    return int(parse_time_to_seconds(match.group(1)))
