"""Hybrid fetch orchestration and fallback tests"""

import asyncio

import pytest

from stepkit.core.errors import (
    DataNotAvailable,
    NoProviderAvailable,
    PermissionDenied,
    ProviderDataNotAvailable,
    ProviderNotAvailable,
    ProviderUnauthorized,
)
from stepkit.schemas.steps import Route, StepSource, TimeWindow
from stepkit.services.hybrid import HybridFetchOrchestrator
from stepkit.tests.fakes import NOW

WINDOW = TimeWindow(start=NOW.replace(hour=0, minute=0), end=NOW)


def by_window(provider):
    return provider.fetch_steps(WINDOW)


class TestHybridCombination:
    """Both providers succeed"""

    @pytest.fixture
    def orchestrator(self, historical, recent):
        return HybridFetchOrchestrator(historical, recent)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "historical_steps,recent_steps,expected",
        [(100, 120, 120), (150, 120, 150), (80, 80, 80)],
    )
    async def test_larger_reading_wins(self, orchestrator, historical, recent, historical_steps, recent_steps, expected):
        historical.steps_to_return = historical_steps
        recent.steps_to_return = recent_steps

        result = await orchestrator.execute(Route.HYBRID, by_window, WINDOW.end)

        assert result.steps == expected
        assert result.source is StepSource.HYBRID
        assert result.window_end == WINDOW.end

    @pytest.mark.asyncio
    async def test_queries_run_concurrently(self, orchestrator, historical, recent):
        """Both queries are in flight before either completes"""
        gate = asyncio.Event()
        historical.gate = gate
        recent.gate = gate
        historical.steps_to_return = 10
        recent.steps_to_return = 20

        task = asyncio.create_task(orchestrator.execute(Route.HYBRID, by_window, WINDOW.end))
        for _ in range(5):
            await asyncio.sleep(0)

        assert historical.fetch_steps_call_count == 1
        assert recent.fetch_steps_call_count == 1
        assert not task.done()

        gate.set()
        result = await task
        assert result.steps == 20

    @pytest.mark.asyncio
    async def test_join_waits_for_slower_provider(self, orchestrator, historical, recent):
        """A fast failure does not short-circuit the join"""
        historical.error_to_throw = ProviderDataNotAvailable("historical")
        recent.gate = asyncio.Event()
        recent.steps_to_return = 42

        task = asyncio.create_task(orchestrator.execute(Route.HYBRID, by_window, WINDOW.end))
        for _ in range(5):
            await asyncio.sleep(0)
        assert not task.done()
        assert historical.fetch_steps_call_count == 1

        recent.gate.set()
        result = await task
        assert result.steps == 42
        assert result.source is StepSource.RECENT


class TestHybridFallback:
    """At least one provider fails inside a hybrid window"""

    @pytest.fixture
    def orchestrator(self, historical, recent):
        return HybridFetchOrchestrator(historical, recent)

    @pytest.mark.asyncio
    async def test_recent_failure_falls_back_to_history(self, orchestrator, historical, recent):
        historical.steps_to_return = 100
        recent.error_to_throw = ProviderDataNotAvailable("recent")

        result = await orchestrator.execute(Route.HYBRID, by_window, WINDOW.end)

        assert result.steps == 100
        assert result.source is StepSource.HISTORICAL

    @pytest.mark.asyncio
    async def test_history_failure_falls_back_to_recent(self, orchestrator, historical, recent):
        historical.error_to_throw = ProviderUnauthorized("historical")
        recent.steps_to_return = 250

        result = await orchestrator.execute(Route.HYBRID, by_window, WINDOW.end)

        assert result.steps == 250
        assert result.source is StepSource.RECENT
        # concurrent attempt + sequential retry
        assert historical.fetch_steps_call_count == 2

    @pytest.mark.asyncio
    async def test_both_failing_raises_data_not_available(self, orchestrator, historical, recent):
        historical.error_to_throw = RuntimeError("store offline")
        recent.error_to_throw = ProviderDataNotAvailable("recent")

        with pytest.raises(DataNotAvailable) as exc_info:
            await orchestrator.execute(Route.HYBRID, by_window, WINDOW.end)

        assert "historical" in exc_info.value.details
        assert "recent" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_invalid_count_is_treated_as_failure(self, orchestrator, historical, recent):
        historical.steps_to_return = 70
        recent.steps_to_return = -5

        result = await orchestrator.execute(Route.HYBRID, by_window, WINDOW.end)

        assert result.steps == 70
        assert result.source is StepSource.HISTORICAL


class TestSingleProviderRoutes:
    """No fallback outside hybrid windows"""

    @pytest.fixture
    def orchestrator(self, historical, recent):
        return HybridFetchOrchestrator(historical, recent)

    @pytest.mark.asyncio
    async def test_historical_only_does_not_touch_recent(self, orchestrator, historical, recent):
        historical.steps_to_return = 500
        recent.steps_to_return = 999

        result = await orchestrator.execute(Route.HISTORICAL_ONLY, by_window, WINDOW.end)

        assert result.steps == 500
        assert result.source is StepSource.HISTORICAL
        assert recent.fetch_steps_call_count == 0

    @pytest.mark.asyncio
    async def test_recent_only(self, orchestrator, historical, recent):
        recent.steps_to_return = 33

        result = await orchestrator.execute(Route.RECENT_ONLY, by_window, WINDOW.end)

        assert result.source is StepSource.RECENT
        assert historical.fetch_steps_call_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,expected",
        [
            (ProviderUnauthorized("historical"), PermissionDenied),
            (ProviderNotAvailable("historical"), NoProviderAvailable),
            (ProviderDataNotAvailable("historical"), DataNotAvailable),
            (ValueError("corrupt sample"), DataNotAvailable),
        ],
    )
    async def test_single_provider_failure_is_translated(self, orchestrator, historical, error, expected):
        historical.error_to_throw = error

        with pytest.raises(expected):
            await orchestrator.execute(Route.HISTORICAL_ONLY, by_window, WINDOW.end)

    @pytest.mark.asyncio
    async def test_unavailable_route_raises(self, orchestrator, historical, recent):
        with pytest.raises(NoProviderAvailable):
            await orchestrator.execute(Route.UNAVAILABLE, by_window, WINDOW.end)
        assert historical.fetch_steps_call_count == 0
        assert recent.fetch_steps_call_count == 0
