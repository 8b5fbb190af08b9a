"""
Configuration models using Pydantic.

This module defines the configuration structure for the FFmpeg executor.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONTAINER_NAME = "viewx-ffmpeg"
DEFAULT_CONTAINER_WORKDIR = "/workdir"


class PerformanceConfig(BaseModel):
    """Resource limits applied to every FFmpeg invocation."""

    model_config = ConfigDict(frozen=True)

    max_concurrent_tasks: int = Field(
        default=1, gt=0, description="Maximum FFmpeg processes running at once"
    )
    threads: int = Field(default=2, ge=0, description="FFmpeg -threads value (0 = unset)")
    low_memory_mode: bool = Field(
        default=True, description="Add fastest-encode / fastest-decode tuning flags"
    )
    timeout_seconds: int = Field(
        default=300, gt=0, description="Deadline for slot acquisition and for process completion"
    )
    max_resolution_width: int = Field(
        default=1280, description="Bounding-box width for extracted frames (<= 0 = unset)"
    )
    max_resolution_height: int = Field(
        default=720, description="Bounding-box height for extracted frames (<= 0 = unset)"
    )
    max_bitrate: int = Field(
        default=2000, description="Video bitrate cap for previews in kbps (<= 0 = unset)"
    )

    @property
    def has_resolution_limit(self) -> bool:
        """Both bounding-box dimensions are configured."""
        return self.max_resolution_width > 0 and self.max_resolution_height > 0


class ExecutorConfig(BaseModel):
    """Backend selection and invocation settings."""

    model_config = ConfigDict(frozen=True)

    type: Literal["docker", "native"] = Field(
        default="docker", description="Backend used to reach FFmpeg: docker or native"
    )
    container_name: str = Field(
        default=DEFAULT_CONTAINER_NAME, description="Container running FFmpeg (docker backend)"
    )
    binary: str = Field(default="ffmpeg", description="FFmpeg executable name or path")
    docker_binary: str = Field(default="docker", description="Container runtime executable")
    work_dir: Optional[str] = Field(
        default=None,
        description=(
            "Working-directory prefix for inputs and outputs. Docker defaults to /workdir; "
            "native defaults to the caller's output directory"
        ),
    )

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Normalise backend name."""
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("container_name", "binary", "docker_binary")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty executable or container names."""
        if not v.strip():
            raise ValueError("value must not be empty")
        return v.strip()


class AppConfig(BaseModel):
    """Main executor configuration."""

    executor: ExecutorConfig = Field(default_factory=ExecutorConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)

    @classmethod
    def create_default(cls) -> "AppConfig":
        """Create default configuration (docker backend, low-memory limits)."""
        return cls()
