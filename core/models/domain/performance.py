"""Performance metric and report models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from core.utils import utc_now


class Metric(BaseModel):
    """One recorded timing sample."""

    operation_id: str
    operation: str
    subject_id: str
    start_time: datetime
    end_time: datetime
    duration_ms: float
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utc_now)


class OperationStats(BaseModel):
    """Aggregate timings for one operation name."""

    count: int = 0
    total_ms: float = 0.0
    min_ms: float = 0.0
    max_ms: float = 0.0
    mean_ms: float = 0.0
    slow_count: int = 0
    slow_percentage: float = 0.0


class PerformanceStats(BaseModel):
    """Aggregate over every retained metric."""

    total: int = 0
    mean_ms: int = 0
    slow_count: int = 0
    fast_count: int = 0
    slow_percentage: int = 0
    fast_percentage: int = 0
    threshold_ms: float
    operations: dict[str, OperationStats] = Field(default_factory=dict)
    recent_slow: list[Metric] = Field(default_factory=list)


class SlowOperation(BaseModel):
    operation: str
    duration_ms: float
    subject_id: str
    timestamp: datetime


class ReportSummary(BaseModel):
    total: int
    mean_ms: int
    grade: str
    grade_label: str
    slow_percentage: int


class PerformanceReport(BaseModel):
    """Dashboard-ready report with grade and recommendations."""

    summary: ReportSummary
    operations: dict[str, OperationStats]
    slowest: list[SlowOperation]
    recommendations: list[str]
