"""
Data models for FFmpeg execution tasks.

Each call to an executor is tracked as an ExecutionTask that moves through
TaskStatus states; executors aggregate outcomes in ExecutorStats.
"""

import itertools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

_task_counter = itertools.count(1)


class TaskStatus(Enum):
    """Status of an execution task."""

    PENDING = "pending"
    ACQUIRING_SLOT = "acquiring_slot"
    REJECTED = "rejected"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({TaskStatus.REJECTED, TaskStatus.SUCCEEDED, TaskStatus.FAILED})

_ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.ACQUIRING_SLOT}),
    # FAILED here means the caller cancelled while waiting for a slot
    TaskStatus.ACQUIRING_SLOT: frozenset(
        {TaskStatus.REJECTED, TaskStatus.RUNNING, TaskStatus.FAILED}
    ),
    TaskStatus.RUNNING: frozenset({TaskStatus.SUCCEEDED, TaskStatus.FAILED}),
}


def _next_task_id() -> str:
    return f"ffmpeg-{next(_task_counter)}"


@dataclass
class ExecutionTask:
    """A single FFmpeg invocation."""

    args: tuple[str, ...]
    task_id: str = field(default_factory=_next_task_id)
    command: tuple[str, ...] = ()
    status: TaskStatus = TaskStatus.PENDING
    exit_code: Optional[int] = None
    error: Optional[str] = None
    created_at: float = field(default_factory=time.monotonic)
    started_at: Optional[float] = None
    completed_at: Optional[float] = None

    def transition(self, status: TaskStatus) -> None:
        """
        Move the task to a new status.

        Raises:
            ValueError: If the transition is not part of the task lifecycle
        """
        if status not in _ALLOWED_TRANSITIONS.get(self.status, frozenset()):
            raise ValueError(f"Invalid task transition {self.status.value} -> {status.value}")
        self.status = status
        if status is TaskStatus.RUNNING:
            self.started_at = time.monotonic()
        elif status in TERMINAL_STATUSES:
            self.completed_at = time.monotonic()

    @property
    def is_terminal(self) -> bool:
        """Check if task reached a final state."""
        return self.status in TERMINAL_STATUSES

    @property
    def duration(self) -> Optional[float]:
        """Run time of the process, if it started and finished."""
        if self.started_at is not None and self.completed_at is not None:
            return self.completed_at - self.started_at
        return None


@dataclass
class ExecutorStats:
    """Running totals of task outcomes for one executor."""

    succeeded: int = 0
    failed: int = 0
    timed_out: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        """Tasks that reached a terminal state (timeouts count as failures)."""
        return self.succeeded + self.failed + self.rejected

    def record(self, task: ExecutionTask, timed_out: bool = False) -> None:
        """Count a finished task."""
        if task.status is TaskStatus.SUCCEEDED:
            self.succeeded += 1
        elif task.status is TaskStatus.REJECTED:
            self.rejected += 1
        elif task.status is TaskStatus.FAILED:
            self.failed += 1
            if timed_out:
                self.timed_out += 1
