"""
CLI interface for the FFmpeg executor.

This module provides the command-line interface using Typer and Rich.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Coroutine, Optional, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config import AppConfig, get_config_manager
from ..executor import BoundedFFmpegExecutor, create_executor
from ..processing import VideoProcessingService
from ..utils import (
    ConfigurationError,
    FFmpegExecutorError,
    QueueFullError,
    format_duration,
    get_logger,
    setup_logger,
)

T = TypeVar("T")

# EX_TEMPFAIL: the caller should retry later
EXIT_QUEUE_FULL = 75

app = typer.Typer(
    name="ffmpeg-executor",
    help="Extract thumbnails and previews with a concurrency-limited FFmpeg",
    add_completion=False,
)

console = Console()

logger = get_logger(__name__)


class _State:
    config_file: Optional[Path] = None
    verbose: bool = False


state = _State()


@app.callback()
def main_callback(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="Custom configuration file",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[Path] = typer.Option(None, "--log", help="Log file path"),
) -> None:
    """Global options."""
    state.config_file = config_file
    state.verbose = verbose
    setup_logger(
        level="DEBUG" if verbose else "WARNING",
        log_file=log_file,
        verbose=verbose,
        console=Console(stderr=True),
    )


def _load_config() -> AppConfig:
    return get_config_manager(state.config_file).config


def _build_executor() -> BoundedFFmpegExecutor:
    return create_executor(_load_config())


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, mapping executor errors to exit codes."""
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠ Cancelled by user[/yellow]")
        sys.exit(130)
    except FFmpegExecutorError as e:
        if isinstance(e, QueueFullError) or isinstance(e.__cause__, QueueFullError):
            console.print(f"[bold yellow]⚠ Busy:[/bold yellow] {e}")
            sys.exit(EXIT_QUEUE_FULL)
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        if state.verbose:
            console.print_exception()
        sys.exit(1)
    except OSError as e:
        console.print(f"[bold red]✗ Could not start FFmpeg:[/bold red] {e}")
        sys.exit(1)


@app.command("thumbnail")
def thumbnail_command(
    video: Path = typer.Argument(..., help="Video file (its name is resolved in the work dir)"),
    timestamp: int = typer.Option(1, "--timestamp", "-t", min=0, help="Seek position in seconds"),
) -> None:
    """Extract one frame from a video as a JPEG thumbnail."""
    try:
        service = VideoProcessingService(_build_executor())
    except ConfigurationError as e:
        console.print(f"[bold red]✗ Configuration error:[/bold red] {e}")
        sys.exit(1)

    name = _run(service.generate_thumbnail(video, timestamp))
    console.print(f"[green]✓[/green] Thumbnail: {name}")


@app.command("preview")
def preview_command(
    video: Path = typer.Argument(..., help="Video file"),
    duration: int = typer.Option(10, "--duration", "-d", min=1, help="Preview length in seconds"),
) -> None:
    """Encode a low-bitrate preview of the start of a video."""
    try:
        service = VideoProcessingService(_build_executor())
    except ConfigurationError as e:
        console.print(f"[bold red]✗ Configuration error:[/bold red] {e}")
        sys.exit(1)

    name = _run(service.generate_preview(video, duration))
    console.print(f"[green]✓[/green] Preview: {name}")


@app.command("duration")
def duration_command(video: Path = typer.Argument(..., help="Video file")) -> None:
    """Print a video's duration."""
    try:
        service = VideoProcessingService(_build_executor())
    except ConfigurationError as e:
        console.print(f"[bold red]✗ Configuration error:[/bold red] {e}")
        sys.exit(1)

    seconds = _run(service.get_video_duration(video))
    console.print(f"{seconds} ({format_duration(seconds)})")


@app.command(
    "run",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def run_command(ctx: typer.Context) -> None:
    """
    Run FFmpeg with raw arguments (pass them after --).

    Performance flags from the configuration are inserted before the arguments.
    """
    if not ctx.args:
        console.print("[red]✗ No FFmpeg arguments given[/red]")
        sys.exit(2)

    try:
        executor = _build_executor()
    except ConfigurationError as e:
        console.print(f"[bold red]✗ Configuration error:[/bold red] {e}")
        sys.exit(1)

    output = _run(executor.execute(list(ctx.args)))
    console.print(output, end="", markup=False, highlight=False)


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="Action: init, show"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for 'init' action",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """
    Manage configuration files.

    Actions:
    - init: Create a default configuration file
    - show: Display current configuration
    """
    if action == "init":
        output_path = output or Path(".ffmpeg-executor.yaml")
        try:
            get_config_manager().init_default_config(output_path, force=force)
        except ConfigurationError as e:
            console.print(f"[red]✗ Error:[/red] {e}")
            sys.exit(1)
        console.print(f"[green]✓[/green] Created config file: {output_path}")

    elif action == "show":
        try:
            config = _load_config()
        except ConfigurationError as e:
            console.print(f"[red]✗ Error:[/red] {e}")
            sys.exit(1)

        console.print()
        console.print(Panel("[bold cyan]Current Configuration[/bold cyan]", border_style="cyan"))

        table = Table(title="Executor", show_header=True)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")
        for key, value in config.executor.model_dump().items():
            table.add_row(key, "-" if value is None else str(value))
        console.print(table)

        table = Table(title="Performance", show_header=True)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")
        for key, value in config.performance.model_dump().items():
            table.add_row(key, str(value))
        console.print(table)

    else:
        console.print(f"[red]✗ Unknown action:[/red] {action}")
        console.print("Valid actions: init, show")
        sys.exit(1)


@app.command("info")
def info_command() -> None:
    """Show the selected backend and its command prefix."""
    try:
        executor = _build_executor()
    except ConfigurationError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        sys.exit(1)

    table = Table(show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Backend", executor.describe())
    table.add_row("Command", " ".join(executor.build_command([])))
    table.add_row("Max concurrent tasks", str(executor.gate.capacity))
    table.add_row("Timeout", f"{executor.performance.timeout_seconds}s")
    console.print(table)


@app.command("version")
def version_command() -> None:
    """Show version information."""
    console.print(f"ffmpeg-executor [cyan]{__version__}[/cyan]")


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
