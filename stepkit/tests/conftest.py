"""Shared fixtures."""

import asyncio
from typing import Callable, Optional

import pytest

from stepkit.core.clock import StepCalendar
from stepkit.schemas.steps import StepServiceConfig
from stepkit.services.step_service import StepService
from stepkit.tests.fakes import NOW, MockHistoricalProvider, MockRecentProvider


@pytest.fixture
def calendar():
    """UTC calendar frozen at NOW."""
    return StepCalendar("UTC", clock=lambda: NOW)


@pytest.fixture
def historical():
    return MockHistoricalProvider()


@pytest.fixture
def recent():
    return MockRecentProvider()


@pytest.fixture
def make_service(historical, recent, calendar):
    """Factory for a StepService over the mock providers."""

    def _make(config: Optional[StepServiceConfig] = None, cal: Optional[StepCalendar] = None) -> StepService:
        return StepService(historical, recent, config=config, calendar=cal or calendar)

    return _make


@pytest.fixture
def service(make_service):
    return make_service()


@pytest.fixture
def wait_until():
    """Poll ``predicate`` on the running loop until it holds (or fail after ``timeout``)."""

    async def _wait(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(0.01)

    return _wait
