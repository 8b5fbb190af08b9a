"""Video processing operations built on the executor."""

from ffmpeg_executor.processing.service import VideoProcessingService, parse_duration

__all__ = ["VideoProcessingService", "parse_duration"]
