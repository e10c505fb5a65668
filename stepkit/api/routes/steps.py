"""Step routes - Single-window and multi-day step queries with request metadata."""

import time
import uuid
from datetime import date, datetime
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Path, Query

from stepkit.api.deps import get_step_service
from stepkit.schemas.api import DayStepsOut, StepResponse, StepSeriesResponse
from stepkit.schemas.steps import StepObservation
from stepkit.services.step_service import StepService, summarize

router = APIRouter(prefix="/steps", tags=["steps"])


def _single(observation: StepObservation, started: float) -> StepResponse:
    return StepResponse(
        request_id=str(uuid.uuid4()),
        api_latency_ms=int((time.perf_counter() - started) * 1000),
        data=observation,
    )


def _series(series: Dict[datetime, StepObservation], started: float) -> StepSeriesResponse:
    return StepSeriesResponse(
        request_id=str(uuid.uuid4()),
        api_latency_ms=int((time.perf_counter() - started) * 1000),
        data=[
            DayStepsOut(day=day.date(), steps=obs.steps, source=obs.source, window_end=obs.window_end)
            for day, obs in sorted(series.items())
        ],
        summary=summarize(series),
    )


# -----------------------------------------------------------------------------
# Single Window Endpoints
# -----------------------------------------------------------------------------


@router.get("/today", response_model=StepResponse)
async def get_today(service: StepService = Depends(get_step_service)):
    """Steps since the start of today."""
    started = time.perf_counter()
    return _single(await service.fetch_today_steps(), started)


@router.get("/window", response_model=StepResponse)
async def get_window(
    start: datetime = Query(..., description="Window start (ISO 8601)"),
    end: datetime = Query(..., description="Window end (ISO 8601)"),
    service: StepService = Depends(get_step_service),
):
    """
    Steps inside an arbitrary window.

    Recent windows may combine both providers (source=hybrid); older windows
    come from the historical provider only.
    """
    started = time.perf_counter()
    return _single(await service.fetch_steps(start, end), started)


@router.get("/date/{day}", response_model=StepResponse)
async def get_date(day: date, service: StepService = Depends(get_step_service)):
    """Steps for one calendar day."""
    started = time.perf_counter()
    return _single(await service.fetch_steps_for_date(day), started)


# -----------------------------------------------------------------------------
# Multi-day Endpoints
# -----------------------------------------------------------------------------


@router.get("/last/{days}", response_model=StepSeriesResponse)
async def get_last_n_days(
    days: int = Path(..., ge=1, le=366),
    service: StepService = Depends(get_step_service),
):
    """Last N days including today. Days that could not be fetched are omitted."""
    started = time.perf_counter()
    return _series(await service.fetch_last_n_days(days), started)


@router.get("/range", response_model=StepSeriesResponse)
async def get_range(
    start: date = Query(..., description="First day (inclusive)"),
    end: date = Query(..., description="Last day (inclusive)"),
    service: StepService = Depends(get_step_service),
):
    """Every day in the range. Days that could not be fetched count as zero."""
    started = time.perf_counter()
    return _series(await service.fetch_steps_for_date_range(start, end), started)


@router.get("/week", response_model=StepSeriesResponse)
async def get_week(
    day: Optional[date] = Query(None, alias="date", description="Any day in the week (default today)"),
    service: StepService = Depends(get_step_service),
):
    started = time.perf_counter()
    target = day or service.calendar.now()
    return _series(await service.fetch_weekly_steps(target), started)


@router.get("/month", response_model=StepSeriesResponse)
async def get_month(
    day: Optional[date] = Query(None, alias="date", description="Any day in the month (default today)"),
    service: StepService = Depends(get_step_service),
):
    started = time.perf_counter()
    target = day or service.calendar.now()
    return _series(await service.fetch_monthly_steps(target), started)


@router.get("/year/{year}", response_model=StepSeriesResponse)
async def get_year(
    year: int = Path(..., ge=1970, le=9999),
    service: StepService = Depends(get_step_service),
):
    started = time.perf_counter()
    return _series(await service.fetch_yearly_steps(year), started)
