"""
stepkit - Exceptions

Provider-level failures raised by provider implementations, and the
step service taxonomy surfaced to callers.
"""
from typing import Any, Dict, Optional


# =========================
# Provider Exceptions
# =========================

class ProviderError(Exception):
    """Base class for failures raised by a step data provider."""

    def __init__(self, provider: str, message: str = "Provider error"):
        self.provider = provider
        self.message = message
        super().__init__(f"{provider}: {message}")


class ProviderNotAvailable(ProviderError):
    """Capability missing on this platform/device."""

    def __init__(self, provider: str, message: str = "Provider is not available"):
        super().__init__(provider, message)


class ProviderUnauthorized(ProviderError):
    """User consent explicitly denied."""

    def __init__(self, provider: str, message: str = "Access to step data was denied"):
        super().__init__(provider, message)


class ProviderDataNotAvailable(ProviderError):
    """Provider reachable but has no data for the request."""

    def __init__(self, provider: str, message: str = "No step data for the requested window"):
        super().__init__(provider, message)


# =========================
# Step Service Exceptions
# =========================

class StepServiceError(Exception):
    """Base exception for errors surfaced by the step service."""

    code = "STEP_SERVICE_ERROR"

    def __init__(
        self,
        message: str = "An error occurred",
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if code:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)


class NoProviderAvailable(StepServiceError):
    """Neither provider is usable for the request."""

    code = "NO_PROVIDER_AVAILABLE"

    def __init__(
        self,
        message: str = "No step data provider is available",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details)


class PermissionDenied(StepServiceError):
    """The user explicitly denied access to step data."""

    code = "PERMISSION_DENIED"

    def __init__(
        self,
        message: str = "Access to step data was denied",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details)


class DataNotAvailable(StepServiceError):
    """A provider was reachable but returned no data for the window."""

    code = "DATA_NOT_AVAILABLE"

    def __init__(
        self,
        message: str = "Step data is not available for the requested window",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details)


class InvalidRequest(StepServiceError, ValueError):
    """The caller asked for a window or range that cannot exist."""

    code = "INVALID_REQUEST"

    def __init__(
        self,
        message: str = "Invalid step query",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details)


def translate_provider_error(exc: BaseException, provider: str) -> StepServiceError:
    """Collapse a provider-specific failure into the step service taxonomy."""
    details = {"provider": provider, "reason": str(exc)}
    if isinstance(exc, StepServiceError):
        return exc
    if isinstance(exc, ProviderUnauthorized):
        return PermissionDenied(details=details)
    if isinstance(exc, ProviderNotAvailable):
        return NoProviderAvailable(details=details)
    return DataNotAvailable(details=details)
