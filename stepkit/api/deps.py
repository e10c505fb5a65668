"""API dependencies"""

from fastapi import HTTPException, Request

from stepkit.providers.sample_buffer import SampleBufferProvider
from stepkit.services.step_service import StepService


def get_step_service(request: Request) -> StepService:
    """StepService created by the application lifespan."""
    return request.app.state.step_service


def get_sample_buffer(request: Request) -> SampleBufferProvider:
    """The recent-window provider, when it is the in-memory sample buffer."""
    recent = request.app.state.step_service.recent
    if not isinstance(recent, SampleBufferProvider):
        raise HTTPException(status_code=404, detail="Recent-window provider does not accept samples")
    return recent
