"""Operational endpoints: scheduler, performance metrics and jobs."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_job_runners, get_monitor, get_scheduler
from api.models import ClearQueueResponse, ThresholdResponse, ThresholdUpdate
from core.log import get_logger
from core.models.domain.performance import (
    PerformanceReport,
    PerformanceStats,
    SlowOperation,
)
from core.models.domain.task import JobRunnerStatus, SchedulerStats
from core.performance import PerformanceMonitor
from core.periodic_task import PeriodicJobRunner
from core.scheduler import BackgroundScheduler

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/ops", tags=["operations"])


@router.get("/scheduler", response_model=SchedulerStats)
async def get_scheduler_stats(
    scheduler: Annotated[BackgroundScheduler, Depends(get_scheduler)],
) -> SchedulerStats:
    """Queue length, active jobs and outcome counters."""
    return scheduler.get_stats()


@router.post("/scheduler/clear", response_model=ClearQueueResponse)
async def clear_scheduler(
    scheduler: Annotated[BackgroundScheduler, Depends(get_scheduler)],
) -> ClearQueueResponse:
    """Reject every queued and running task."""
    rejected = scheduler.clear_all()
    logger.warning(f"Scheduler cleared through the API, {rejected} tasks rejected")
    return ClearQueueResponse(rejected=rejected)


@router.get("/performance", response_model=PerformanceStats)
async def get_performance_stats(
    monitor: Annotated[PerformanceMonitor, Depends(get_monitor)],
) -> PerformanceStats:
    return monitor.get_stats()


@router.get("/performance/report", response_model=PerformanceReport)
async def get_performance_report(
    monitor: Annotated[PerformanceMonitor, Depends(get_monitor)],
) -> PerformanceReport:
    """Graded summary with per-operation stats and recommendations."""
    return monitor.get_report()


@router.get("/performance/slowest", response_model=list[SlowOperation])
async def get_slowest_operations(
    monitor: Annotated[PerformanceMonitor, Depends(get_monitor)],
    limit: int = Query(default=10, ge=1, le=100),
) -> list[SlowOperation]:
    return monitor.get_slowest(limit)


@router.put("/performance/threshold", response_model=ThresholdResponse)
async def update_threshold(
    update: ThresholdUpdate,
    monitor: Annotated[PerformanceMonitor, Depends(get_monitor)],
) -> ThresholdResponse:
    """Change the duration above which operations count as slow."""
    try:
        monitor.set_threshold(update.threshold_ms)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ThresholdResponse(threshold_ms=monitor.threshold_ms)


@router.post("/performance/clear", status_code=status.HTTP_204_NO_CONTENT)
async def clear_performance(
    monitor: Annotated[PerformanceMonitor, Depends(get_monitor)],
) -> None:
    monitor.clear()


@router.get("/jobs", response_model=list[JobRunnerStatus])
async def get_jobs(
    runners: Annotated[list[PeriodicJobRunner], Depends(get_job_runners)],
) -> list[JobRunnerStatus]:
    """Status of the periodic background jobs."""
    return [runner.get_status() for runner in runners]
