from datetime import date, datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from stepkit.schemas.steps import StepObservation, StepSource, StepSummary


class StepResponse(BaseModel):
    request_id: str
    api_latency_ms: int
    data: StepObservation


class DayStepsOut(BaseModel):
    """One day of a multi-day result."""

    day: date
    steps: int
    source: StepSource
    window_end: datetime


class StepSeriesResponse(BaseModel):
    request_id: str
    api_latency_ms: int
    data: list[DayStepsOut]
    summary: StepSummary


class ProviderStatus(BaseModel):
    available: bool
    authorized: Optional[bool] = None


class HealthResponse(BaseModel):
    status: str
    historical: ProviderStatus
    recent: ProviderStatus
    realtime_active: bool


class PermissionResult(BaseModel):
    requested: bool
    success: bool
    error: str | None = None


class PermissionResponse(BaseModel):
    results: Dict[str, PermissionResult]


class SampleIn(BaseModel):
    steps: int = Field(ge=0)
    at: datetime | None = None


class RealtimeStatus(BaseModel):
    active: bool
    started_at: datetime | None = None
    latest: StepObservation | None = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: dict = Field(default_factory=dict)
