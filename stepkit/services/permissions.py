"""Requests access from every available provider."""

from __future__ import annotations

from typing import Any, Dict

from stepkit.core.errors import NoProviderAvailable
from stepkit.core.logging import get_logger
from stepkit.providers.base import HistoricalStepProvider, RecentStepProvider

log = get_logger("permissions")


class PermissionOrchestrator:
    """Asks each available provider for access; partial success is success."""

    def __init__(self, historical: HistoricalStepProvider, recent: RecentStepProvider):
        self.historical = historical
        self.recent = recent

    def has_any_provider_available(self) -> bool:
        return (self.historical.is_available and self.historical.is_authorized) or self.recent.is_available

    async def request_permissions(self) -> Dict[str, Any]:
        """Request access from both providers, then check that one is usable.

        Returns a per-provider report. Raises NoProviderAvailable (carrying the
        collected provider errors) when neither provider ends up usable.
        """
        results: Dict[str, Any] = {}
        errors: Dict[str, str] = {}

        for provider in (self.historical, self.recent):
            if not provider.is_available:
                results[provider.name] = {"requested": False, "success": False, "error": None}
                continue
            try:
                await provider.request_permission()
                results[provider.name] = {"requested": True, "success": True, "error": None}
            except Exception as exc:  # noqa: BLE001
                log.warning(f"Permission request failed for {provider.name}: {exc}")
                errors[provider.name] = str(exc)
                results[provider.name] = {"requested": True, "success": False, "error": str(exc)}

        if not self.has_any_provider_available():
            log.error("No step data provider is usable after requesting permissions")
            raise NoProviderAvailable(details={"errors": errors})

        log.info(f"Permissions requested: {results}")
        return results
