"""
Async subprocess wrapper for FFmpeg execution.

This module runs a single FFmpeg command with stdout and stderr merged into
one line-oriented buffer, enforces a completion deadline, and terminates the
process when the deadline passes or the awaiting task is cancelled.
"""

import asyncio
import codecs
import re
from typing import Optional

from ..utils import ExecutionFailedError, ProcessTimeoutError, get_logger

logger = get_logger(__name__)


class AsyncFFmpegProcess:
    """
    Async wrapper for one FFmpeg subprocess.

    Provides non-blocking process execution with:
    - Combined stdout/stderr capture, one newline-terminated line per output line
    - Timeout handling with forced termination
    - Proper cleanup on errors and cancellation
    """

    READ_CHUNK_SIZE = 8192
    KILL_GRACE_SECONDS = 2.0

    # Carriage returns count as line breaks; FFmpeg redraws its stats line with them
    LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

    ERROR_PATTERNS = [
        r"Error while (opening|decoding|encoding)",
        r"Invalid data found",
        r"No such file or directory",
        r"Permission denied",
        r"Unknown encoder",
        r"Codec .* is not supported",
        r"Invalid argument",
        r"No such container",
        r"is not running",
    ]

    def __init__(self, command: list[str], timeout: Optional[float] = None):
        """
        Initialize async FFmpeg process.

        Args:
            command: Full argument vector, program first
            timeout: Maximum execution time in seconds (None = no timeout)
        """
        self.command = list(command)
        self.timeout = timeout
        self._process: Optional[asyncio.subprocess.Process] = None
        self._lines: list[str] = []

    async def run(self) -> str:
        """
        Run the command and wait for completion.

        Returns:
            Combined stdout/stderr text

        Raises:
            ExecutionFailedError: If process exits with a non-zero code
            ProcessTimeoutError: If process exceeds timeout
            OSError: If the program cannot be started
        """
        logger.debug(f"Full command: {' '.join(self.command)}")

        self._process = await asyncio.create_subprocess_exec(
            *self.command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )

        try:
            if self.timeout:
                await asyncio.wait_for(self._communicate(), timeout=self.timeout)
            else:
                await self._communicate()

        except asyncio.TimeoutError:
            logger.error(f"FFmpeg process exceeded timeout of {self.timeout}s")
            await self.terminate()
            raise ProcessTimeoutError(
                f"FFmpeg task timed out ({self.timeout}s)",
                timeout=self.timeout or 0.0,
            )

        except (Exception, asyncio.CancelledError):
            await self.terminate()
            raise

        output = self.output
        returncode = self._process.returncode
        if returncode != 0:
            error_msg = self._extract_error_message(output)
            logger.error(f"FFmpeg exited with code {returncode}, output: {output}")
            raise ExecutionFailedError(
                f"FFmpeg failed with exit code {returncode}: {error_msg}",
                exit_code=returncode if returncode is not None else -1,
                command=self.command,
                output=output,
            )

        return output

    async def _communicate(self) -> None:
        """Read merged output until EOF, then wait for exit."""
        if not self._process:
            raise RuntimeError("Process not started")

        await self._read_output()
        await self._process.wait()

    async def _read_output(self) -> None:
        if not self._process or not self._process.stdout:
            return

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        pending = ""

        while True:
            chunk = await self._process.stdout.read(self.READ_CHUNK_SIZE)
            if not chunk:
                break
            pending = self._drain_lines(pending + decoder.decode(chunk))

        self._drain_lines(pending + decoder.decode(b"", final=True), final=True)

    def _drain_lines(self, text: str, final: bool = False) -> str:
        """
        Move complete lines from text into the buffer.

        Returns:
            The unterminated remainder, to be prefixed to the next chunk
        """
        # A trailing \r may be the first half of \r\n split across chunks
        held = ""
        if not final and text.endswith("\r"):
            text, held = text[:-1], "\r"

        parts = self.LINE_BREAK_PATTERN.split(text)
        rest = parts.pop()
        self._lines.extend(parts)

        if final:
            if rest:
                self._lines.append(rest)
            return ""
        return rest + held

    def _extract_error_message(self, output: str) -> str:
        """
        Extract meaningful error message from output.

        Args:
            output: Complete captured output

        Returns:
            Extracted error message or the last lines of output
        """
        lines = output.split("\n")

        for pattern in self.ERROR_PATTERNS:
            regex = re.compile(pattern, re.IGNORECASE)
            for i, line in enumerate(lines):
                if regex.search(line):
                    return " | ".join(line for line in lines[i : i + 3] if line.strip())

        non_empty = [line for line in lines if line.strip()]
        return " | ".join(non_empty[-3:]) if non_empty else "Unknown error"

    async def terminate(self) -> None:
        """
        Terminate the process.

        Sends SIGTERM, waits briefly, then sends SIGKILL if needed.
        """
        if not self._process or self._process.returncode is not None:
            return

        try:
            logger.warning("Terminating FFmpeg process...")
            self._process.terminate()
            try:
                await asyncio.wait_for(self._process.wait(), timeout=self.KILL_GRACE_SECONDS)
            except asyncio.TimeoutError:
                logger.warning("Forcing process termination...")
                self._process.kill()
                await self._process.wait()
        except ProcessLookupError:
            # Exited between the returncode check and the signal
            pass

    @property
    def is_running(self) -> bool:
        """Check if process is currently running."""
        return self._process is not None and self._process.returncode is None

    @property
    def returncode(self) -> Optional[int]:
        """Get process return code."""
        return self._process.returncode if self._process else None

    @property
    def output(self) -> str:
        """Captured output, each line newline-terminated."""
        return "".join(f"{line}\n" for line in self._lines)

    @property
    def output_lines(self) -> list[str]:
        """Get captured output lines."""
        return self._lines.copy()


class FFmpegArgsBuilder:
    """
    Builder for FFmpeg argument lists.

    Produces the arguments that follow the program name and performance
    flags: per-input options, inputs, output options, outputs.
    """

    def __init__(self):
        """Initialize argument builder."""
        self._inputs: list[tuple[dict[str, str], str]] = []
        self._outputs: list[tuple[dict[str, str], str]] = []

    def input(self, file: str, options: Optional[dict[str, str]] = None) -> "FFmpegArgsBuilder":
        """
        Add input file with options placed before its ``-i``.

        Args:
            file: Input path as the backend sees it
            options: Input options as dict (e.g., {"ss": "5"})

        Returns:
            Self for chaining
        """
        self._inputs.append((dict(options or {}), str(file)))
        return self

    def output(self, file: str, options: Optional[dict[str, str]] = None) -> "FFmpegArgsBuilder":
        """
        Add output file with options.

        Args:
            file: Output path as the backend sees it
            options: Output options as dict; empty values are bare flags (e.g., {"y": ""})

        Returns:
            Self for chaining
        """
        self._outputs.append((dict(options or {}), str(file)))
        return self

    @staticmethod
    def _flatten(options: dict[str, str]) -> list[str]:
        args: list[str] = []
        for key, value in options.items():
            args.append(f"-{key}")
            if value:  # Skip empty values (for flags)
                args.append(value)
        return args

    def build(self) -> list[str]:
        """
        Build final argument list.

        Returns:
            FFmpeg arguments as list
        """
        args: list[str] = []
        for options, file in self._inputs:
            args.extend(self._flatten(options))
            args.extend(["-i", file])
        for options, file in self._outputs:
            args.extend(self._flatten(options))
            args.append(file)
        return args
