"""Abstract provider interfaces consumed by the step service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Callable, Iterable, Tuple

from stepkit.schemas.steps import TimeWindow

Sample = Tuple[datetime, int]
UpdateCallback = Callable[[int], None]


class StepProvider(ABC):
    """Common capability surface of both step data providers."""

    name: str

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Capability present on this platform/device. Read fresh on every decision."""

    @abstractmethod
    async def request_permission(self) -> None:
        """Ask for access; raises a ProviderError on failure."""

    @abstractmethod
    async def fetch_steps(self, window: TimeWindow) -> int:
        """Total steps counted inside ``window``."""

    @abstractmethod
    async def fetch_steps_for_date(self, day: date) -> int:
        """Total steps for one calendar day."""

    @staticmethod
    def sum_in_window(samples: Iterable[Sample], window: TimeWindow) -> int:
        return sum(count for ts, count in samples if window.start <= ts < window.end)


class HistoricalStepProvider(StepProvider):
    """Long-retention provider whose access depends on user consent."""

    @property
    @abstractmethod
    def is_authorized(self) -> bool:
        """False only when consent was explicitly denied; "not determined" counts as authorized."""


class RecentStepProvider(StepProvider):
    """Trailing-window provider that can push live step counts."""

    @abstractmethod
    def start_realtime_updates(self, start: datetime, on_update: UpdateCallback) -> None:
        """Invoke ``on_update`` with the cumulative count since ``start`` on every new reading.

        The callback may be invoked from any thread.
        """

    @abstractmethod
    def stop_realtime_updates(self) -> None:
        """Unregister the live update callback."""
