"""Step aggregation data model."""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StepSource(str, Enum):
    """Provenance of a step reading."""

    HISTORICAL = "historical"
    RECENT = "recent"
    HYBRID = "hybrid"


class Route(str, Enum):
    """Outcome of source selection for a window."""

    HISTORICAL_ONLY = "historical_only"
    RECENT_ONLY = "recent_only"
    HYBRID = "hybrid"
    UNAVAILABLE = "unavailable"


class StepObservation(BaseModel):
    """Steps counted in a window, tagged with the provider(s) that produced it."""

    model_config = ConfigDict(frozen=True)

    steps: int = Field(ge=0)
    source: StepSource
    window_end: datetime


class TimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.start > self.end:
            raise ValueError("window start must not be after window end")
        return self


class StepServiceConfig(BaseModel):
    """Engine configuration, fixed for the lifetime of a StepService."""

    model_config = ConfigDict(frozen=True)

    use_hybrid_mode: bool = True
    recent_window_lookback_days: int = Field(default=7, ge=0)
    first_weekday: int = Field(default=0, ge=0, le=6)
    timezone: Optional[str] = None


class StepSummary(BaseModel):
    """Aggregate over the days present in a multi-day result."""

    total_steps: int
    days: int
    average_steps: float
    sources: Dict[str, int] = Field(default_factory=dict)
