from stepkit.core.errors import DataNotAvailable, NoProviderAvailable, PermissionDenied, StepServiceError
from stepkit.schemas.steps import Route, StepObservation, StepServiceConfig, StepSource, TimeWindow
from stepkit.services.step_service import StepService, summarize

__all__ = [
    "StepService",
    "StepServiceConfig",
    "StepObservation",
    "StepSource",
    "Route",
    "TimeWindow",
    "summarize",
    "StepServiceError",
    "NoProviderAvailable",
    "PermissionDenied",
    "DataNotAvailable",
]
