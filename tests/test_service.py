"""
Tests for the video processing service.
"""

import sys
from unittest.mock import AsyncMock

import pytest

from ffmpeg_executor.executor import NativeFFmpegExecutor
from ffmpeg_executor.processing import VideoProcessingService, parse_duration
from ffmpeg_executor.utils import (
    ExecutionFailedError,
    InvalidInputError,
    ProcessTimeoutError,
    QueueFullError,
    ThumbnailError,
)

SAMPLE_OUTPUT = """\
Input #0, mov,mp4,m4a,3gp,3g2,mj2, from '/workdir/movie.mp4':
  Duration: 00:02:05.48, start: 0.000000, bitrate: 1205 kb/s
  Stream #0:0(und): Video: h264 (High), yuv420p, 1920x1080, 1070 kb/s, 25 fps
"""


@pytest.fixture
def executor(performance):
    """Native executor whose execute() is mocked."""
    executor = NativeFFmpegExecutor(performance)
    executor.execute = AsyncMock(return_value=SAMPLE_OUTPUT)
    return executor


@pytest.fixture
def service(executor):
    return VideoProcessingService(executor)


class TestGenerateThumbnail:
    """Test thumbnail generation."""

    @pytest.mark.asyncio
    async def test_returns_thumbnail_name(self, service, executor):
        name = await service.generate_thumbnail("/srv/videos/movie.mp4", 5)

        assert name == "movie_thumb_5.jpg"
        args = executor.execute.await_args.args[0]
        assert args[args.index("-i") + 1] == "/srv/videos/movie.mp4"
        assert args[-1] == "/srv/videos/movie_thumb_5.jpg"

    @pytest.mark.asyncio
    async def test_default_timestamp(self, service, executor):
        assert await service.generate_thumbnail("clip.mov") == "clip_thumb_1.jpg"
        args = executor.execute.await_args.args[0]
        assert args[:2] == ["-ss", "1"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            QueueFullError("FFmpeg task queue is full, please retry later", 1),
            ProcessTimeoutError("FFmpeg task timed out (1s)", 1),
            ExecutionFailedError("FFmpeg failed with exit code 1", 1),
        ],
    )
    async def test_executor_errors_are_wrapped(self, service, executor, error):
        executor.execute.side_effect = error

        with pytest.raises(ThumbnailError) as exc_info:
            await service.generate_thumbnail("movie.mp4", 5)

        assert exc_info.value.__cause__ is error
        assert str(error) in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_input_is_wrapped(self, service, executor):
        with pytest.raises(ThumbnailError) as exc_info:
            await service.generate_thumbnail("movie.mp4", -3)

        assert isinstance(exc_info.value.__cause__, InvalidInputError)
        executor.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_os_errors_propagate(self, service, executor):
        executor.execute.side_effect = FileNotFoundError("ffmpeg")

        with pytest.raises(FileNotFoundError):
            await service.generate_thumbnail("movie.mp4", 5)


class TestGeneratePreview:
    """Test preview generation."""

    @pytest.mark.asyncio
    async def test_returns_preview_name(self, service, executor):
        name = await service.generate_preview("/srv/videos/movie.mp4", 15)

        assert name == "movie_preview_15s.mp4"
        args = executor.execute.await_args.args[0]
        assert args[args.index("-t") + 1] == "15"
        assert args[-1] == "/srv/videos/movie_preview_15s.mp4"

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self, service, executor):
        executor.execute.side_effect = ExecutionFailedError("boom", 1)

        with pytest.raises(ThumbnailError, match="Preview generation failed"):
            await service.generate_preview("movie.mp4")

    @pytest.mark.asyncio
    async def test_zero_duration_rejected(self, service):
        with pytest.raises(ThumbnailError):
            await service.generate_preview("movie.mp4", 0)


class TestVideoDuration:
    """Test duration probing."""

    @pytest.mark.asyncio
    async def test_duration_from_output(self, service, executor):
        assert await service.get_video_duration("/srv/videos/movie.mp4") == 125

        args = executor.execute.await_args.args[0]
        assert args == ["-i", "/srv/videos/movie.mp4", "-t", "0", "-f", "null", "-"]

    @pytest.mark.asyncio
    async def test_unknown_duration(self, service, executor):
        executor.execute.return_value = "  Duration: N/A, bitrate: N/A\n"
        assert await service.get_video_duration("stream.ts") == 0

    @pytest.mark.skipif(sys.platform == "win32", reason="fake ffmpeg relies on a shebang")
    @pytest.mark.asyncio
    async def test_duration_from_real_process(self, performance, fake_ffmpeg, tmp_path):
        executor = NativeFFmpegExecutor(performance, binary=str(fake_ffmpeg))
        service = VideoProcessingService(executor)

        assert await service.get_video_duration(tmp_path / "movie.mp4") == 65


class TestParseDuration:
    """Test parse_duration."""

    @pytest.mark.parametrize(
        "output,expected",
        [
            (SAMPLE_OUTPUT, 125),
            ("Duration: 01:00:00.00, start", 3600),
            ("Duration: 00:00:09, start", 9),
            ("Duration: 00:00:59.99", 59),
        ],
    )
    def test_parses(self, output, expected):
        assert parse_duration(output) == expected

    @pytest.mark.parametrize("output", ["", "Duration: N/A", "no summary here"])
    def test_missing(self, output):
        assert parse_duration(output) is None
