"""Permission routes."""

from fastapi import APIRouter, Depends

from stepkit.api.deps import get_step_service
from stepkit.schemas.api import PermissionResponse, PermissionResult
from stepkit.services.step_service import StepService

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.post("", response_model=PermissionResponse)
async def request_permissions(service: StepService = Depends(get_step_service)):
    """
    Ask every available provider for access.

    Succeeds when at least one provider is usable afterwards, even if another
    provider's request failed. Returns 503 when none is usable.
    """
    results = await service.request_permissions()
    return PermissionResponse(
        results={name: PermissionResult(**outcome) for name, outcome in results.items()}
    )
