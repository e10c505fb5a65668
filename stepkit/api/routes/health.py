"""Health routes - Provider availability and readiness checks."""

from fastapi import APIRouter, Depends, Response

from stepkit.api.deps import get_step_service
from stepkit.schemas.api import HealthResponse, ProviderStatus
from stepkit.services.step_service import StepService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(response: Response, service: StepService = Depends(get_step_service)):
    """
    Health check endpoint for load balancer and Docker health checks.

    Reports provider availability/authorization and the realtime session state.
    Returns 503 if no provider is usable.
    """
    usable = service.has_any_provider_available()
    if not usable:
        response.status_code = 503

    return HealthResponse(
        status="ok" if usable else "no_provider",
        historical=ProviderStatus(
            available=service.historical.is_available,
            authorized=service.historical.is_authorized,
        ),
        recent=ProviderStatus(available=service.recent.is_available),
        realtime_active=service.realtime_active,
    )
