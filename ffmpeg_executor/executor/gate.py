"""
Capacity gate limiting concurrent FFmpeg processes.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from ..utils import QueueFullError, get_logger

logger = get_logger(__name__)


class CapacityGate:
    """
    Counting admission gate built on asyncio.Semaphore.

    A slot is taken with ``async with gate.slot(timeout):`` and given back when
    the block exits, whatever the outcome. Failing to get a slot within the
    timeout raises QueueFullError.
    """

    def __init__(self, capacity: int):
        """
        Initialize gate.

        Args:
            capacity: Number of slots (must be positive)
        """
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._semaphore = asyncio.Semaphore(capacity)
        self._in_use = 0

    @asynccontextmanager
    async def slot(self, timeout: Optional[float] = None) -> AsyncIterator[None]:
        """
        Hold one slot for the duration of the block.

        Args:
            timeout: Seconds to wait for a slot (None = wait indefinitely)

        Raises:
            QueueFullError: If no slot frees up before the timeout
        """
        try:
            await asyncio.wait_for(self._semaphore.acquire(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"No FFmpeg slot free after {timeout}s ({self._in_use}/{self._capacity} in use)"
            )
            raise QueueFullError(
                "FFmpeg task queue is full, please retry later",
                timeout=timeout or 0.0,
            ) from None

        self._in_use += 1
        try:
            yield
        finally:
            self._in_use -= 1
            self._semaphore.release()

    @property
    def capacity(self) -> int:
        """Total number of slots."""
        return self._capacity

    @property
    def in_use(self) -> int:
        """Slots currently held."""
        return self._in_use

    @property
    def available(self) -> int:
        """Slots free right now."""
        return self._capacity - self._in_use
