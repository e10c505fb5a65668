"""In-memory recent-window step provider with live updates."""

from __future__ import annotations

import threading
from datetime import date, datetime, timedelta
from typing import List, Optional

from stepkit.core.clock import StepCalendar
from stepkit.core.errors import ProviderDataNotAvailable, ProviderNotAvailable
from stepkit.core.logging import get_logger
from stepkit.schemas.steps import TimeWindow
from .base import RecentStepProvider, Sample, UpdateCallback

log = get_logger("providers.sample_buffer")


class SampleBufferProvider(RecentStepProvider):
    """Pedometer-style buffer that only retains the trailing ``lookback_days``.

    Samples are pushed in with :meth:`record_steps`, from any thread. While a
    live subscription is registered, every sample recorded at or after the
    subscription start triggers the callback with the cumulative count since
    that start. Totals reach the callback in the order they were computed, so
    the live count never goes backwards.
    """

    name = "recent"

    def __init__(
        self,
        lookback_days: int = 7,
        calendar: Optional[StepCalendar] = None,
        enabled: bool = True,
    ):
        self.lookback_days = lookback_days
        self.calendar = calendar or StepCalendar()
        self.enabled = enabled
        self._samples: List[Sample] = []
        self._lock = threading.Lock()
        # Held from computing a live total until its callback returns
        self._delivery_lock = threading.Lock()
        self._subscription_start: Optional[datetime] = None
        self._callback: Optional[UpdateCallback] = None
        self._live_total = 0

    @property
    def is_available(self) -> bool:
        return self.enabled

    async def request_permission(self) -> None:
        if not self.is_available:
            raise ProviderNotAvailable(self.name)

    def record_steps(self, count: int, at: Optional[datetime] = None) -> None:
        if count < 0:
            raise ValueError("step count must be non-negative")
        ts = self.calendar.localize(at) if at else self.calendar.now()

        with self._delivery_lock:
            callback, total = None, 0
            with self._lock:
                self._samples.append((ts, count))
                self._prune()
                if self._callback is not None and ts >= self._subscription_start:
                    self._live_total += count
                    callback, total = self._callback, self._live_total

            if callback is not None:
                callback(total)

    async def fetch_steps(self, window: TimeWindow) -> int:
        if not self.is_available:
            raise ProviderNotAvailable(self.name)
        if window.start < self._horizon():
            raise ProviderDataNotAvailable(
                self.name, f"window starts before the {self.lookback_days}-day retention"
            )
        with self._lock:
            samples = list(self._samples)
        return self.sum_in_window(samples, window)

    async def fetch_steps_for_date(self, day: date) -> int:
        today = self.calendar.local_date(self.calendar.now())
        if (today - day).days > self.lookback_days:
            raise ProviderDataNotAvailable(self.name, f"{day.isoformat()} is outside the lookback window")
        return await self.fetch_steps(self.calendar.day_window(day))

    async def fetch_today_steps(self) -> int:
        now = self.calendar.now()
        return await self.fetch_steps(TimeWindow(start=self.calendar.start_of_day(now), end=now))

    def start_realtime_updates(self, start: datetime, on_update: UpdateCallback) -> None:
        if not self.is_available:
            return
        start = self.calendar.localize(start)
        with self._lock:
            self._subscription_start = start
            self._callback = on_update
            self._live_total = sum(count for ts, count in self._samples if ts >= start)
        log.debug(f"Live updates registered from {start.isoformat()}")

    def stop_realtime_updates(self) -> None:
        with self._lock:
            self._callback = None
            self._subscription_start = None
            self._live_total = 0

    def _horizon(self) -> datetime:
        today = self.calendar.local_date(self.calendar.now())
        return self.calendar.day_start(today - timedelta(days=self.lookback_days))

    def _prune(self) -> None:
        horizon = self._horizon()
        self._samples = [sample for sample in self._samples if sample[0] >= horizon]
