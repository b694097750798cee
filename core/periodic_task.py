"""Periodic background jobs (price snapshots, performance summaries)."""

import asyncio
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Awaitable, Callable

from core.log import get_logger
from core.models.domain.task import JobRunnerStatus, JobStats
from core.utils import utc_now

logger = get_logger(__name__)


class JobStatus(Enum):
    """Status of a periodic job runner."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"


class PeriodicJob(ABC):
    """A unit of work repeated on a fixed interval."""

    name: str = "job"

    @abstractmethod
    async def execute(self) -> None:
        """Run one iteration of the job."""
        pass

    async def on_start(self) -> None:
        """Hook called before the first iteration."""
        pass

    async def on_stop(self) -> None:
        """Hook called after the loop has stopped."""
        pass

    async def on_error(self, error: Exception) -> None:
        """Called when an iteration raises.

        Args:
            error: The exception that occurred
        """
        logger.error(f"Error in periodic job {self.name}: {error}")


class PeriodicJobRunner:
    """Runs a PeriodicJob in a background asyncio task."""

    def __init__(
        self,
        job: PeriodicJob,
        interval_seconds: float = 60,
        retry_delay: float = 30,
        max_retries: int = 3,
        run_immediately: bool = True,
        on_status_change: Callable[[JobStatus], Awaitable[None]] | None = None,
        on_error: Callable[[Exception], Awaitable[None]] | None = None,
    ):
        """Initialize the runner.

        Args:
            job: The job to execute
            interval_seconds: Delay between iterations
            retry_delay: Delay before retrying after an error
            max_retries: Consecutive failures tolerated before giving up
            run_immediately: Execute once right away instead of waiting a full interval
            on_status_change: Callback when status changes
            on_error: Callback when an iteration fails
        """
        self.job = job
        self.interval_seconds = interval_seconds
        self.retry_delay = retry_delay
        self.max_retries = max_retries
        self.run_immediately = run_immediately
        self.on_status_change = on_status_change
        self.on_error = on_error

        self.status = JobStatus.IDLE
        self.stats = JobStats()
        self._background_task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._background_task is not None and not self._background_task.done()

    async def __aenter__(self) -> "PeriodicJobRunner":
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.stop()

    async def start(self) -> None:
        """Call the job's start hook and launch the loop."""
        if self.running:
            logger.warning(f"Periodic job {self.job.name} already running")
            return

        try:
            await self.job.on_start()
        except Exception as e:
            await self._set_status(JobStatus.ERROR)
            logger.error(f"Failed to start periodic job {self.job.name}: {e}")
            await self._handle_error(e)
            raise

        self._stop_event.clear()
        self.stats.start_time = utc_now()
        await self._set_status(JobStatus.RUNNING)
        self._background_task = asyncio.create_task(self._loop())
        logger.info(
            f"Periodic job {self.job.name} started "
            f"(every {self.interval_seconds}s)"
        )

    async def stop(self) -> None:
        """Stop the loop and call the job's stop hook."""
        self._stop_event.set()

        if self._background_task and not self._background_task.done():
            self._background_task.cancel()
            try:
                await self._background_task
            except asyncio.CancelledError:
                pass
        self._background_task = None

        try:
            await self.job.on_stop()
        except Exception as e:
            logger.error(f"Error during cleanup of {self.job.name}: {e}")

        await self._set_status(JobStatus.STOPPED)
        logger.info(f"Periodic job {self.job.name} stopped")

    async def execute_once(self) -> None:
        """Execute the job once outside the loop; errors propagate."""
        try:
            await self.job.execute()
        except Exception as e:
            self._record_error()
            await self._handle_error(e)
            raise
        self._record_success()

    def get_status(self) -> JobRunnerStatus:
        return JobRunnerStatus(
            name=self.job.name,
            status=self.status.value,
            running=self.running,
            stats=self.stats,
            config={
                "interval_seconds": self.interval_seconds,
                "retry_delay": self.retry_delay,
                "max_retries": self.max_retries,
            },
        )

    async def _loop(self) -> None:
        if not self.run_immediately and await self._wait(self.interval_seconds):
            return

        while not self._stop_event.is_set():
            try:
                await self.job.execute()
                self._record_success()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._record_error()
                logger.error(f"Error in periodic job {self.job.name}: {e}")
                await self._handle_error(e)

                if self.stats.consecutive_errors >= self.max_retries:
                    logger.error(
                        f"Too many consecutive errors ({self.max_retries}), "
                        f"stopping {self.job.name}"
                    )
                    await self._set_status(JobStatus.ERROR)
                    return

                if await self._wait(self.retry_delay):
                    return
                continue

            if await self._wait(self.interval_seconds):
                return

    async def _wait(self, seconds: float) -> bool:
        """Sleep for ``seconds``; True when a stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    def _record_success(self) -> None:
        self.stats.executions += 1
        self.stats.consecutive_errors = 0
        self.stats.last_execution_time = utc_now()

    def _record_error(self) -> None:
        self.stats.errors += 1
        self.stats.consecutive_errors += 1
        self.stats.last_error_time = utc_now()

    async def _set_status(self, status: JobStatus) -> None:
        old_status = self.status
        self.status = status

        if old_status != status:
            logger.debug(
                f"{self.job.name} status changed: {old_status.value} -> {status.value}"
            )
            if self.on_status_change:
                try:
                    await self.on_status_change(status)
                except Exception as e:
                    logger.error(f"Error in status change callback: {e}")

    async def _handle_error(self, error: Exception) -> None:
        try:
            await self.job.on_error(error)
        except Exception as e:
            logger.error(f"Error in job error handler: {e}")

        if self.on_error:
            try:
                await self.on_error(error)
            except Exception as e:
                logger.error(f"Error in external error callback: {e}")
