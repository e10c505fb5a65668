from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stepkit.api.routes import (
    health_router,
    permissions_router,
    realtime_router,
    samples_router,
    steps_router,
)
from stepkit.core.config import settings
from stepkit.core.errors import (
    DataNotAvailable,
    InvalidRequest,
    NoProviderAvailable,
    PermissionDenied,
    StepServiceError,
)
from stepkit.core.logging import configure_logging, get_logger
from stepkit.providers import build_providers
from stepkit.schemas.api import ErrorResponse
from stepkit.services.step_service import StepService

log = get_logger("app")

ERROR_STATUS = {
    NoProviderAvailable: 503,
    PermissionDenied: 403,
    DataNotAvailable: 404,
    InvalidRequest: 422,
}


def build_step_service() -> StepService:
    """StepService wired from environment settings."""
    historical, recent = build_providers(settings)
    return StepService(historical, recent, config=settings.service_config())


def create_app(service: Optional[StepService] = None) -> FastAPI:
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(f"Starting step service in {settings.ENV.upper()} mode")
        app.state.step_service = service or build_step_service()
        app.state.latest_observation = None

        step_service: StepService = app.state.step_service
        log.info(
            f"Providers: historical available={step_service.historical.is_available} "
            f"authorized={step_service.historical.is_authorized}, "
            f"recent available={step_service.recent.is_available}"
        )

        yield

        # Shutdown
        step_service.stop_realtime_updates()
        log.info("Application shutdown complete")

    app = FastAPI(
        title="Step Aggregation Service",
        description="Step counts combined from a historical and a recent-window provider",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
        debug=settings.debug_enabled,
    )

    @app.exception_handler(StepServiceError)
    async def step_service_error_handler(request: Request, exc: StepServiceError):
        status_code = ERROR_STATUS.get(type(exc), 500)
        log.warning(f"{request.method} {request.url.path} -> {status_code} {exc.code}")
        body = ErrorResponse(error=exc.code, message=exc.message, details=exc.details)
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

    app.include_router(health_router)
    app.include_router(permissions_router)
    app.include_router(steps_router)
    app.include_router(realtime_router)
    app.include_router(samples_router)
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("stepkit.main:app", host="0.0.0.0", port=8000, log_config=None)
