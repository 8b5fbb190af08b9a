"""
Helper functions for the FFmpeg executor.

File-name derivation, working-directory joins and time formatting used by the
executors and the processing service.
"""

import posixpath
import re
from pathlib import PurePath
from typing import Union

from .errors import InvalidInputError

PathLike = Union[str, PurePath]

_EXTENSION_PATTERN = re.compile(r"\.[^.]+$")


def safe_basename(video_path: PathLike) -> str:
    """
    Return the base name of a video path, rejecting names that could escape
    a working directory once joined to it.

    Args:
        video_path: Path or file name of the source video

    Returns:
        Base file name

    Raises:
        InvalidInputError: If the base name is empty, "." or "..", or holds
            a NUL byte
    """
    # Split on both separators so Windows-style names are stripped on POSIX too
    name = re.split(r"[\\/]", str(video_path))[-1]

    if name in ("", ".", "..") or "\x00" in name:
        raise InvalidInputError(f"Unsafe video file name: {str(video_path)!r}")
    return name


def strip_extension(filename: str) -> str:
    """Remove the trailing extension (".mp4" in "a.b.mp4") from a file name."""
    return _EXTENSION_PATTERN.sub("", filename)


def derive_thumbnail_name(video_path: PathLike, timestamp: int) -> str:
    """
    Derive the frame file name for a video and timestamp.

    Args:
        video_path: Source video path or file name
        timestamp: Seek position in seconds

    Returns:
        File name such as "movie_thumb_5.jpg" for "movie.mp4" at 5s
    """
    return f"{strip_extension(safe_basename(video_path))}_thumb_{timestamp}.jpg"


def derive_preview_name(video_path: PathLike, duration: int) -> str:
    """Derive the preview clip file name, e.g. "movie_preview_10s.mp4"."""
    return f"{strip_extension(safe_basename(video_path))}_preview_{duration}s.mp4"


def join_work_dir(work_dir: str, filename: str) -> str:
    """
    Join a backend working-directory prefix with a file name.

    The prefix is used verbatim as the backend sees it (a container path for
    docker, a local path for native runs); only the separator is normalised.
    """
    if not work_dir:
        return filename
    if "\\" in work_dir and "/" not in work_dir:
        return work_dir.rstrip("\\") + "\\" + filename
    return posixpath.join(work_dir, filename)


def build_scale_filter(max_width: int, max_height: int) -> str:
    """
    Build a scale filter fitting output inside a bounding box.

    Keeps the aspect ratio and never upscales.

    Args:
        max_width: Maximum output width in pixels
        max_height: Maximum output height in pixels

    Returns:
        Filter expression for ``-vf``
    """
    return (
        f"scale='min({max_width},iw)':'min({max_height},ih)'"
        ":force_original_aspect_ratio=decrease"
    )


def format_duration(seconds: float) -> str:
    """
    Format duration as HH:MM:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "01:30:45")
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_time_to_seconds(time_str: str) -> float:
    """
    Parse time string to seconds.

    Supports formats:
    - HH:MM:SS.mmm
    - MM:SS.mmm
    - SS.mmm

    Args:
        time_str: Time string to parse

    Returns:
        Time in seconds
    """
    parts = time_str.split(":")
    if len(parts) == 3:
        hours, minutes, seconds = parts
        return float(hours) * 3600 + float(minutes) * 60 + float(seconds)
    elif len(parts) == 2:
        minutes, seconds = parts
        return float(minutes) * 60 + float(seconds)
    else:
        return float(parts[0])
