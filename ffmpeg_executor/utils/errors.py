"""
Custom exceptions for the FFmpeg executor.

This module defines the exception hierarchy used throughout the application.
Every failure surfaced by an executor is one of these, except for OS-level
spawn errors which propagate unchanged.
"""

from typing import Optional


class FFmpegExecutorError(Exception):
    """Base exception for all executor errors."""

    pass


class ConfigurationError(FFmpegExecutorError):
    """Configuration is invalid or missing."""

    pass


class InvalidInputError(FFmpegExecutorError):
    """Caller supplied an unusable file name or parameter."""

    pass


class QueueFullError(FFmpegExecutorError):
    """No capacity slot became available before the deadline."""

    def __init__(self, message: str, timeout: float):
        """
        Initialize queue-full error.

        Args:
            message: Error message
            timeout: How long the caller waited for a slot, in seconds
        """
        super().__init__(message)
        self.timeout = timeout


class ProcessTimeoutError(FFmpegExecutorError):
    """Process exceeded timeout threshold."""

    def __init__(self, message: str, timeout: float):
        """
        Initialize timeout error.

        Args:
            message: Error message
            timeout: Timeout value in seconds
        """
        super().__init__(message)
        self.timeout = timeout


class ExecutionFailedError(FFmpegExecutorError):
    """FFmpeg exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        exit_code: int,
        command: Optional[list[str]] = None,
        output: str = "",
    ):
        """
        Initialize execution error with process details.

        Args:
            message: Error message
            exit_code: Process exit code
            command: Command that failed
            output: Combined stdout/stderr captured from the process
        """
        super().__init__(message)
        self.exit_code = exit_code
        self.command = command
        self.output = output


class ThumbnailError(FFmpegExecutorError):
    """Thumbnail or preview generation failed."""

    pass
