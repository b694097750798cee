"""Priority-ordered, timeout-bounded background task scheduler.

Callers submit a zero-argument coroutine function and get back an
``asyncio.Future`` right away. A single worker loop drains the queue one
task at a time, racing each task's work against its timeout.
"""

import asyncio
import itertools
from typing import Any, Awaitable, Callable

from core.exceptions import (
    SchedulerStoppedError,
    TaskCancelledError,
    TaskTimeoutError,
)
from core.log import get_logger
from core.models.domain.task import SchedulerStats, Task, TaskEvent, Work
from core.types import TaskOutcome

logger = get_logger(__name__)

EventCallback = Callable[[TaskEvent], Awaitable[None]]


def _mark_retrieved(future: "asyncio.Future[Any]") -> None:
    # Keeps asyncio from logging "exception was never retrieved" for
    # handles nobody awaited and for abandoned work.
    if not future.cancelled():
        future.exception()


class BackgroundScheduler:
    """Single-worker task queue with priority ordering and timeouts."""

    def __init__(
        self,
        default_timeout: float = 30.0,
        default_priority: int = 0,
        yield_seconds: float = 0.01,
        cancel_abandoned_work: bool = True,
        on_task_completed: EventCallback | None = None,
        on_task_failed: EventCallback | None = None,
    ):
        """Initialize the scheduler.

        Args:
            default_timeout: Timeout in seconds for tasks submitted without one
            default_priority: Priority for tasks submitted without one
            yield_seconds: Pause between two tasks so other coroutines get a turn
            cancel_abandoned_work: Cancel the work of a task that timed out or
                was cleared. When False the work keeps running detached and
                its outcome is discarded.
            on_task_completed: Awaited with a TaskEvent after each success
            on_task_failed: Awaited with a TaskEvent after each failure or timeout
        """
        if default_timeout <= 0:
            raise ValueError("default_timeout must be positive")

        self.default_timeout = default_timeout
        self.default_priority = default_priority
        self.yield_seconds = yield_seconds
        self.cancel_abandoned_work = cancel_abandoned_work
        self.on_task_completed = on_task_completed
        self.on_task_failed = on_task_failed

        self._queue: list[Task] = []
        self._active: Task | None = None
        self._worker: asyncio.Task[None] | None = None
        self._sequence = itertools.count()

        self._submitted = 0
        self._completed = 0
        self._failed = 0
        self._timed_out = 0
        self._stopped = 0

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    @property
    def active_count(self) -> int:
        return 1 if self._active is not None else 0

    @property
    def is_processing(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def submit(
        self,
        task_id: str,
        work: Work,
        priority: int | None = None,
        timeout: float | None = None,
    ) -> "asyncio.Future[Any]":
        """Queue ``work`` and return its completion handle.

        Must be called from a running event loop. Returns immediately.

        Args:
            task_id: Name used in logs and events
            work: Zero-argument callable returning an awaitable
            priority: Higher runs first; ties keep submission order. Defaults
                to the scheduler's default priority
            timeout: Seconds before the handle rejects with TaskTimeoutError

        Returns:
            Future settled exactly once with the work's result or an error
        """
        timeout = self.default_timeout if timeout is None else timeout
        priority = self.default_priority if priority is None else priority
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        loop = asyncio.get_running_loop()
        handle: asyncio.Future[Any] = loop.create_future()
        handle.add_done_callback(_mark_retrieved)

        task = Task(
            task_id=task_id,
            work=work,
            priority=priority,
            timeout=timeout,
            sequence=next(self._sequence),
            handle=handle,
        )
        self._queue.append(task)
        self._queue.sort(key=lambda queued: queued.sort_key)
        self._submitted += 1

        logger.debug(
            f"Task {task_id} queued (priority={priority}, timeout={timeout}s, "
            f"queue={len(self._queue)})"
        )

        if not self.is_processing:
            self._worker = loop.create_task(self._drain())

        return handle

    def clear_all(self) -> int:
        """Reject every queued and in-flight task with SchedulerStoppedError.

        Returns:
            Number of handles rejected
        """
        pending = list(self._queue)
        self._queue.clear()
        if self._active is not None:
            pending.append(self._active)

        rejected = 0
        for task in pending:
            if not task.handle.done():
                task.handle.set_exception(SchedulerStoppedError())
                rejected += 1

        self._stopped += rejected
        logger.warning(f"Scheduler cleared, {rejected} task(s) rejected")
        return rejected

    async def join(self) -> None:
        """Wait until the worker loop has drained the queue."""
        while self._worker is not None and not self._worker.done():
            await asyncio.wait({self._worker})

    async def shutdown(self) -> None:
        """Clear all tasks and stop the worker loop."""
        self.clear_all()
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
        self._worker = None

    def get_stats(self) -> SchedulerStats:
        return SchedulerStats(
            is_processing=self.is_processing,
            queue_size=self.queue_size,
            active_jobs=self.active_count,
            submitted=self._submitted,
            completed=self._completed,
            failed=self._failed,
            timed_out=self._timed_out,
            stopped=self._stopped,
        )

    async def _drain(self) -> None:
        logger.debug("Scheduler worker started")
        try:
            while self._queue:
                task = self._queue.pop(0)
                if task.handle.done():
                    logger.debug(f"Task {task.task_id} cancelled before start")
                    continue

                self._active = task
                try:
                    await self._run(task)
                finally:
                    self._active = None

                await asyncio.sleep(self.yield_seconds)
        finally:
            self._worker = None
            logger.debug("Scheduler worker idle")

    async def _run(self, task: Task) -> None:
        loop = asyncio.get_running_loop()
        started = loop.time()
        work = asyncio.ensure_future(self._invoke(task))

        try:
            await asyncio.wait(
                {work, task.handle},
                timeout=task.timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            self._abandon(work)
            raise

        duration = loop.time() - started

        # Cleared or cancelled by the caller while running.
        if task.handle.done():
            self._abandon(work)
            logger.info(f"Task {task.task_id} abandoned after {duration:.3f}s")
            return

        if not work.done():
            error = TaskTimeoutError(task.task_id, task.timeout)
            task.handle.set_exception(error)
            self._abandon(work)
            self._timed_out += 1
            logger.warning(str(error))
            await self._emit(
                self.on_task_failed,
                TaskEvent(task.task_id, TaskOutcome.TIMED_OUT, None, error, duration),
            )
            return

        failure = (
            TaskCancelledError(task.task_id) if work.cancelled() else work.exception()
        )
        if failure is not None:
            task.handle.set_exception(failure)
            self._failed += 1
            logger.error(f"Task {task.task_id} failed after {duration:.3f}s: {failure}")
            await self._emit(
                self.on_task_failed,
                TaskEvent(task.task_id, TaskOutcome.REJECTED, None, failure, duration),
            )
            return

        result = work.result()
        task.handle.set_result(result)
        self._completed += 1
        logger.debug(f"Task {task.task_id} completed in {duration:.3f}s")
        await self._emit(
            self.on_task_completed,
            TaskEvent(task.task_id, TaskOutcome.FULFILLED, result, None, duration),
        )

    @staticmethod
    async def _invoke(task: Task) -> Any:
        return await task.work()

    def _abandon(self, work: "asyncio.Future[Any]") -> None:
        if work.done():
            _mark_retrieved(work)
            return
        if self.cancel_abandoned_work:
            work.cancel()
        work.add_done_callback(_mark_retrieved)

    @staticmethod
    async def _emit(callback: EventCallback | None, event: TaskEvent) -> None:
        if callback is None:
            return
        try:
            await callback(event)
        except Exception as e:
            logger.error(f"Error in task event callback for {event.task_id}: {e}")
