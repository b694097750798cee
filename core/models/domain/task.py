"""Task management domain models."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from core.types import TaskOutcome
from core.utils import utc_now

Work = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class Task:
    """A named, prioritized, timeout-bounded unit of background work.

    The handle is the caller's side of the task: it is settled exactly once
    by the scheduler (or cancelled by the caller).
    """

    task_id: str
    work: Work
    priority: int
    timeout: float
    sequence: int
    handle: "asyncio.Future[Any]"
    created_at: datetime = field(default_factory=utc_now)

    @property
    def sort_key(self) -> tuple[int, int]:
        """Higher priority first, then submission order."""
        return (-self.priority, self.sequence)


@dataclass(frozen=True)
class TaskEvent:
    """Outcome notification emitted once per finished task."""

    task_id: str
    outcome: TaskOutcome
    result: Any = None
    error: BaseException | None = None
    duration_seconds: float = 0.0


class SchedulerStats(BaseModel):
    """Queue introspection for the operational dashboard."""

    is_processing: bool
    queue_size: int
    active_jobs: int
    submitted: int = 0
    completed: int = 0
    failed: int = 0
    timed_out: int = 0
    stopped: int = 0


class JobStats(BaseModel):
    """Statistics for periodic job execution."""

    executions: int = 0
    errors: int = 0
    consecutive_errors: int = 0
    last_execution_time: datetime | None = None
    last_error_time: datetime | None = None
    start_time: datetime | None = None


class JobRunnerStatus(BaseModel):
    """Status information for a periodic job runner."""

    name: str
    status: str
    running: bool
    stats: JobStats
    config: dict[str, Any]
