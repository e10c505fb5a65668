from stepkit.api.routes.health import router as health_router
from stepkit.api.routes.permissions import router as permissions_router
from stepkit.api.routes.realtime import router as realtime_router
from stepkit.api.routes.samples import router as samples_router
from stepkit.api.routes.steps import router as steps_router

__all__ = ["health_router", "permissions_router", "realtime_router", "samples_router", "steps_router"]
