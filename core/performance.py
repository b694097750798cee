"""Operation timing, slow-operation tracking and performance reports."""

import time
from collections import deque
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, AsyncIterator, Callable

from pydantic import ValidationError

from core.log import get_logger
from core.models.domain.performance import (
    Metric,
    OperationStats,
    PerformanceReport,
    PerformanceStats,
    ReportSummary,
    SlowOperation,
)
from core.periodic_task import PeriodicJob
from core.utils import utc_now

logger = get_logger(__name__)

FAST_THRESHOLD_MS = 100.0

GRADE_LABELS = {
    "A+": "Excellent",
    "A": "Very Good",
    "B": "Good",
    "C": "Acceptable",
    "D": "Needs Optimization",
}


def grade(mean_ms: float, slow_percentage: float) -> str:
    """Map mean duration and slow share to a letter grade, best first."""
    if mean_ms < 100 and slow_percentage < 5:
        return "A+"
    if mean_ms < 200 and slow_percentage < 10:
        return "A"
    if mean_ms < 500 and slow_percentage < 20:
        return "B"
    if mean_ms < 1000 and slow_percentage < 30:
        return "C"
    return "D"


class Timer:
    """Handle returned by PerformanceMonitor.start_timing."""

    def __init__(
        self,
        monitor: "PerformanceMonitor",
        operation: str,
        subject_id: str,
    ):
        self.monitor = monitor
        self.operation = operation
        self.subject_id = subject_id
        self.started_at = utc_now()
        self._started = monitor.clock()
        self.operation_id = (
            f"{operation}_{subject_id}_{int(self.started_at.timestamp() * 1000)}"
        )
        self._metric: Metric | None = None

    def end(self, details: dict[str, Any] | None = None) -> Metric:
        """Stop the timer and record the metric; later calls return the same one."""
        if self._metric is not None:
            return self._metric

        duration_ms = (self.monitor.clock() - self._started) * 1000
        try:
            metric = self._build(duration_ms, details or {})
        except ValidationError as e:
            logger.error(f"Dropping invalid details for {self.operation_id}: {e}")
            metric = self._build(duration_ms, {})

        self._metric = metric
        self.monitor.record(metric)
        return metric

    def _build(self, duration_ms: float, details: Any) -> Metric:
        return Metric(
            operation_id=self.operation_id,
            operation=self.operation,
            subject_id=self.subject_id,
            start_time=self.started_at,
            end_time=self.started_at + timedelta(milliseconds=duration_ms),
            duration_ms=round(duration_ms, 3),
            details=details,
        )


class PerformanceMonitor:
    """Keeps bounded timing history and derives statistics from it.

    Purely observational: recording never raises into the timed operation.
    """

    def __init__(
        self,
        threshold_ms: float = 1000.0,
        max_metrics: int = 1000,
        max_slow_metrics: int = 100,
        clock: Callable[[], float] = time.perf_counter,
    ):
        if max_metrics < 1 or max_slow_metrics < 1:
            raise ValueError("Metric capacities must be positive")

        self.threshold_ms = threshold_ms
        self.clock = clock
        self._metrics: deque[Metric] = deque(maxlen=max_metrics)
        self._slow: deque[Metric] = deque(maxlen=max_slow_metrics)

    @property
    def metrics(self) -> list[Metric]:
        return list(self._metrics)

    @property
    def slow_metrics(self) -> list[Metric]:
        return list(self._slow)

    def start_timing(self, operation: str, subject_id: str | int) -> Timer:
        logger.debug(f"Starting timer for {operation} ({subject_id})")
        return Timer(self, operation, str(subject_id))

    @asynccontextmanager
    async def measure(
        self, operation: str, subject_id: str | int
    ) -> AsyncIterator[Timer]:
        """Time the enclosed block, recording success or the error message."""
        timer = self.start_timing(operation, subject_id)
        try:
            yield timer
        except BaseException as e:
            timer.end({"success": False, "error": str(e) or type(e).__name__})
            raise
        timer.end({"success": True})

    def record(self, metric: Metric) -> None:
        try:
            self._metrics.append(metric)
            duration = metric.duration_ms
            logger.debug(
                f"{metric.operation} completed in {duration:.0f}ms "
                f"({metric.subject_id})"
            )

            if duration > self.threshold_ms:
                self._slow.append(metric)
                logger.warning(
                    f"Slow operation: {metric.operation} took {duration:.0f}ms "
                    f"(threshold: {self.threshold_ms:.0f}ms)"
                )
            if duration > self.threshold_ms * 2:
                logger.critical(
                    f"{metric.operation} took {duration:.0f}ms, "
                    f"more than twice the threshold"
                )
        except Exception as e:
            logger.error(f"Failed to record metric {metric.operation_id}: {e}")

    def get_stats(self) -> PerformanceStats:
        metrics = list(self._metrics)
        if not metrics:
            return PerformanceStats(threshold_ms=self.threshold_ms)

        total = len(metrics)
        mean = sum(m.duration_ms for m in metrics) / total
        slow = sum(1 for m in metrics if m.duration_ms > self.threshold_ms)
        fast = sum(1 for m in metrics if m.duration_ms <= FAST_THRESHOLD_MS)

        operations: dict[str, OperationStats] = {}
        for metric in metrics:
            stats = operations.get(metric.operation)
            if stats is None:
                stats = OperationStats(min_ms=metric.duration_ms)
                operations[metric.operation] = stats
            stats.count += 1
            stats.total_ms += metric.duration_ms
            stats.min_ms = min(stats.min_ms, metric.duration_ms)
            stats.max_ms = max(stats.max_ms, metric.duration_ms)
            if metric.duration_ms > self.threshold_ms:
                stats.slow_count += 1

        for stats in operations.values():
            stats.mean_ms = stats.total_ms / stats.count
            stats.slow_percentage = stats.slow_count / stats.count * 100

        return PerformanceStats(
            total=total,
            mean_ms=round(mean),
            slow_count=slow,
            fast_count=fast,
            slow_percentage=round(slow / total * 100),
            fast_percentage=round(fast / total * 100),
            threshold_ms=self.threshold_ms,
            operations=operations,
            recent_slow=list(self._slow)[-10:],
        )

    def get_slowest(self, limit: int = 10) -> list[SlowOperation]:
        ranked = sorted(self._metrics, key=lambda m: m.duration_ms, reverse=True)
        return [
            SlowOperation(
                operation=m.operation,
                duration_ms=m.duration_ms,
                subject_id=m.subject_id,
                timestamp=m.timestamp,
            )
            for m in ranked[:limit]
        ]

    def get_report(self) -> PerformanceReport:
        stats = self.get_stats()
        letter = grade(stats.mean_ms, stats.slow_percentage)
        return PerformanceReport(
            summary=ReportSummary(
                total=stats.total,
                mean_ms=stats.mean_ms,
                grade=letter,
                grade_label=GRADE_LABELS[letter],
                slow_percentage=stats.slow_percentage,
            ),
            operations=stats.operations,
            slowest=self.get_slowest(5),
            recommendations=self._recommendations(stats),
        )

    def clear(self) -> None:
        self._metrics.clear()
        self._slow.clear()
        logger.info("Performance metrics cleared")

    def set_threshold(self, threshold_ms: float) -> None:
        if threshold_ms <= 0:
            raise ValueError("threshold_ms must be positive")
        self.threshold_ms = threshold_ms
        logger.info(f"Response time threshold set to {threshold_ms}ms")

    @staticmethod
    def _recommendations(stats: PerformanceStats) -> list[str]:
        recommendations = []
        if stats.slow_percentage > 20:
            recommendations.append(
                "High share of slow operations, move more work to background tasks"
            )
        if stats.mean_ms > 500:
            recommendations.append(
                "Average response time is high, acknowledge requests before doing work"
            )

        for name, op in stats.operations.items():
            if op.slow_percentage > 30:
                recommendations.append(
                    f"{name} is frequently slow, optimize this handler"
                )
            if op.mean_ms > 1000:
                recommendations.append(
                    f"{name} averages {op.mean_ms:.0f}ms, consider caching its data"
                )

        if not recommendations:
            recommendations.append("Performance is good, no optimization needed")
        return recommendations


class PerformanceSummaryJob(PeriodicJob):
    """Logs a one-line performance summary when metrics are present."""

    name = "performance-summary"

    def __init__(self, monitor: PerformanceMonitor):
        self.monitor = monitor

    async def execute(self) -> None:
        stats = self.monitor.get_stats()
        if stats.total == 0:
            return
        logger.info(
            f"Performance summary: {stats.total} operations, "
            f"mean {stats.mean_ms}ms, {stats.slow_percentage}% slow, "
            f"grade {grade(stats.mean_ms, stats.slow_percentage)}"
        )
