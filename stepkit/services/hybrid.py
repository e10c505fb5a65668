"""Executes a routing decision, combining or falling back between providers."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Awaitable, Callable

from stepkit.core.errors import (
    DataNotAvailable,
    NoProviderAvailable,
    ProviderDataNotAvailable,
    StepServiceError,
    translate_provider_error,
)
from stepkit.core.logging import get_logger
from stepkit.providers.base import HistoricalStepProvider, RecentStepProvider, StepProvider
from stepkit.schemas.steps import Route, StepObservation, StepSource

log = get_logger("hybrid")

Query = Callable[[StepProvider], Awaitable[int]]


class HybridFetchOrchestrator:
    """Runs the provider queries behind a :class:`Route`.

    Hybrid windows query both providers concurrently and keep the larger
    reading. If either query fails, the historical provider is retried alone,
    then the recent-window provider; only when both retries fail does the
    request fail. Single-provider routes have nothing to fall back to, so a
    provider failure is translated and raised directly.

    There is no timeout: a provider call that never returns blocks its window.
    """

    def __init__(self, historical: HistoricalStepProvider, recent: RecentStepProvider):
        self.historical = historical
        self.recent = recent

    async def execute(self, route: Route, query: Query, window_end: datetime) -> StepObservation:
        if route is Route.HYBRID:
            return await self._fetch_hybrid(query, window_end)
        if route is Route.HISTORICAL_ONLY:
            return await self._fetch_single(self.historical, StepSource.HISTORICAL, query, window_end)
        if route is Route.RECENT_ONLY:
            return await self._fetch_single(self.recent, StepSource.RECENT, query, window_end)
        raise NoProviderAvailable(
            details={
                "historical_available": self.historical.is_available,
                "historical_authorized": self.historical.is_authorized,
                "recent_available": self.recent.is_available,
            }
        )

    async def _fetch_hybrid(self, query: Query, window_end: datetime) -> StepObservation:
        # Join on both outcomes; a failure on one side must not cancel the other
        historical_steps, recent_steps = await asyncio.gather(
            self._query(self.historical, query),
            self._query(self.recent, query),
            return_exceptions=True,
        )
        if not isinstance(historical_steps, BaseException) and not isinstance(recent_steps, BaseException):
            return StepObservation(
                steps=max(historical_steps, recent_steps),
                source=StepSource.HYBRID,
                window_end=window_end,
            )

        log.warning(
            "Hybrid fetch incomplete "
            f"(historical={self._describe(historical_steps)}, recent={self._describe(recent_steps)}); "
            "falling back to sequential queries"
        )
        try:
            return await self._fetch_single(self.historical, StepSource.HISTORICAL, query, window_end)
        except StepServiceError as historical_exc:
            log.warning(f"Historical fallback failed: {historical_exc.message}")
            try:
                return await self._fetch_single(self.recent, StepSource.RECENT, query, window_end)
            except StepServiceError as recent_exc:
                log.error("Both providers failed for the window")
                raise DataNotAvailable(
                    details={
                        "historical": historical_exc.details,
                        "recent": recent_exc.details,
                    }
                ) from recent_exc

    async def _fetch_single(
        self,
        provider: StepProvider,
        source: StepSource,
        query: Query,
        window_end: datetime,
    ) -> StepObservation:
        try:
            steps = await self._query(provider, query)
        except Exception as exc:  # noqa: BLE001
            log.warning(f"Provider {provider.name} failed: {exc}")
            raise translate_provider_error(exc, provider.name) from exc
        return StepObservation(steps=steps, source=source, window_end=window_end)

    @staticmethod
    async def _query(provider: StepProvider, query: Query) -> int:
        steps = await query(provider)
        if isinstance(steps, bool) or not isinstance(steps, int) or steps < 0:
            raise ProviderDataNotAvailable(provider.name, f"invalid step count {steps!r}")
        return steps

    @staticmethod
    def _describe(outcome: object) -> str:
        if isinstance(outcome, BaseException):
            return f"failed: {outcome}"
        return "ok"
