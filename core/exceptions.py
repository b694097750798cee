"""Exceptions raised by the background scheduler."""


class SchedulerError(Exception):
    """Base exception for scheduler errors."""

    pass


class TaskTimeoutError(SchedulerError):
    """Raised when a task does not finish within its timeout."""

    def __init__(self, task_id: str, timeout: float) -> None:
        super().__init__(f"Task {task_id} timed out after {timeout:.3f}s")
        self.task_id = task_id
        self.timeout = timeout


class SchedulerStoppedError(SchedulerError):
    """Raised for every pending task when the scheduler is cleared."""

    def __init__(self, message: str = "Service stopped") -> None:
        super().__init__(message)


class TaskCancelledError(SchedulerError):
    """Raised when a task's work was cancelled from inside the work itself."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} work was cancelled")
        self.task_id = task_id
