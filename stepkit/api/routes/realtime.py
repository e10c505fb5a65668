"""Realtime routes - Start/stop the live session and read its latest reading."""

from fastapi import APIRouter, Depends, Request

from stepkit.api.deps import get_step_service
from stepkit.schemas.api import RealtimeStatus
from stepkit.schemas.steps import StepObservation
from stepkit.services.step_service import StepService

router = APIRouter(prefix="/realtime", tags=["realtime"])


def _status(request: Request, service: StepService) -> RealtimeStatus:
    return RealtimeStatus(
        active=service.realtime_active,
        started_at=service.realtime.started_at,
        latest=getattr(request.app.state, "latest_observation", None),
    )


@router.post("/start", response_model=RealtimeStatus)
async def start_realtime(request: Request, service: StepService = Depends(get_step_service)):
    """Start live updates (no-op when already running or when the recent provider is unavailable)."""
    state = request.app.state

    def store(observation: StepObservation) -> None:
        state.latest_observation = observation

    if not service.realtime_active:
        state.latest_observation = None
    service.start_realtime_updates(store)
    return _status(request, service)


@router.post("/stop", response_model=RealtimeStatus)
async def stop_realtime(request: Request, service: StepService = Depends(get_step_service)):
    service.stop_realtime_updates()
    return _status(request, service)


@router.get("/latest", response_model=RealtimeStatus)
async def latest(request: Request, service: StepService = Depends(get_step_service)):
    return _status(request, service)
