"""Operational models for API responses."""

from pydantic import BaseModel


class ClearQueueResponse(BaseModel):
    """Result of clearing the scheduler queue."""

    rejected: int


class ThresholdUpdate(BaseModel):
    """Request body for changing the slow-operation threshold."""

    threshold_ms: float


class ThresholdResponse(BaseModel):
    threshold_ms: float
