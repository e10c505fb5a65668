"""Sample routes - Feed step samples into the recent-window provider."""

from fastapi import APIRouter, Depends, status

from stepkit.api.deps import get_sample_buffer
from stepkit.providers.sample_buffer import SampleBufferProvider
from stepkit.schemas.api import SampleIn

router = APIRouter(prefix="/samples", tags=["samples"])


@router.post("", status_code=status.HTTP_202_ACCEPTED)
async def record_sample(sample: SampleIn, buffer: SampleBufferProvider = Depends(get_sample_buffer)):
    """Record a pedometer sample; pushes a live update when a realtime session is active."""
    buffer.record_steps(sample.steps, sample.at)
    return {"accepted": True, "steps": sample.steps}
