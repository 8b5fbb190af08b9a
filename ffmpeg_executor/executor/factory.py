"""
Executor selection from configuration.
"""

from ..config import DEFAULT_CONTAINER_WORKDIR, AppConfig
from ..utils import ConfigurationError, get_logger
from .backends import DockerFFmpegExecutor, NativeFFmpegExecutor
from .base import BoundedFFmpegExecutor

logger = get_logger(__name__)


def create_executor(config: AppConfig) -> BoundedFFmpegExecutor:
    """
    Create the executor named by ``config.executor.type``.

    Args:
        config: Application configuration

    Returns:
        A docker or native executor sharing one capacity gate for its lifetime

    Raises:
        ConfigurationError: If the backend type is unknown
    """
    settings = config.executor

    if settings.type == "docker":
        executor: BoundedFFmpegExecutor = DockerFFmpegExecutor(
            config.performance,
            container_name=settings.container_name,
            work_dir=settings.work_dir or DEFAULT_CONTAINER_WORKDIR,
            binary=settings.binary,
            docker_binary=settings.docker_binary,
        )
    elif settings.type == "native":
        executor = NativeFFmpegExecutor(
            config.performance,
            work_dir=settings.work_dir,
            binary=settings.binary,
        )
    else:
        raise ConfigurationError(f"Unknown executor type: {settings.type!r}")

    logger.debug(f"Selected FFmpeg executor: {executor.describe()}")
    return executor
