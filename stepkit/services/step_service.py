"""Step service - the public entry point of the aggregation engine."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Dict, Mapping, Optional, Union

from stepkit.core.clock import StepCalendar
from stepkit.core.errors import InvalidRequest, NoProviderAvailable
from stepkit.core.logging import get_logger
from stepkit.providers.base import HistoricalStepProvider, RecentStepProvider
from stepkit.schemas.steps import StepObservation, StepServiceConfig, StepSummary, TimeWindow
from stepkit.services.batcher import FailureMode, RangeBatcher
from stepkit.services.hybrid import HybridFetchOrchestrator, Query
from stepkit.services.permissions import PermissionOrchestrator
from stepkit.services.realtime import RealtimeSessionManager, StepHandler
from stepkit.services.selection import select_route

log = get_logger("step_service")

DateLike = Union[date, datetime]
StepSeries = Dict[datetime, StepObservation]


class StepService:
    """Answers "how many steps in this window?" from two imperfect providers.

    Responsibilities:
    - Route each window to the historical provider, the recent-window
      provider, or both (recent windows only)
    - Combine hybrid readings and fall back when a provider fails
    - Batch multi-day requests day by day
    - Own the single realtime update session
    - Request permissions from every available provider

    Usage:
        service = StepService(historical, recent)
        await service.request_permissions()
        today = await service.fetch_today_steps()
        week = await service.fetch_weekly_steps(datetime.now())
    """

    def __init__(
        self,
        historical: HistoricalStepProvider,
        recent: RecentStepProvider,
        config: Optional[StepServiceConfig] = None,
        calendar: Optional[StepCalendar] = None,
    ):
        self.config = config or StepServiceConfig()
        self.calendar = calendar or StepCalendar(self.config.timezone, self.config.first_weekday)
        self.historical = historical
        self.recent = recent
        self.orchestrator = HybridFetchOrchestrator(historical, recent)
        self.batcher = RangeBatcher(self._fetch_day, self.calendar)
        self.realtime = RealtimeSessionManager(recent, self.calendar)
        self.permissions = PermissionOrchestrator(historical, recent)

    # -------------------------------------------------------------------------
    # Permissions
    # -------------------------------------------------------------------------
    async def request_permissions(self) -> Dict[str, dict]:
        return await self.permissions.request_permissions()

    def has_any_provider_available(self) -> bool:
        return self.permissions.has_any_provider_available()

    # -------------------------------------------------------------------------
    # Single windows
    # -------------------------------------------------------------------------
    async def fetch_today_steps(self) -> StepObservation:
        now = self.calendar.now()
        return await self.fetch_steps(self.calendar.start_of_day(now), now)

    async def fetch_steps(self, start: datetime, end: datetime) -> StepObservation:
        start, end = self.calendar.localize(start), self.calendar.localize(end)
        if start > end:
            raise InvalidRequest(
                "window start must not be after window end",
                details={"start": start.isoformat(), "end": end.isoformat()},
            )
        window = TimeWindow(start=start, end=end)
        return await self._fetch_window(window, lambda provider: provider.fetch_steps(window))

    async def fetch_steps_for_date(self, day: DateLike) -> StepObservation:
        """Steps for one calendar day, via the providers' per-date queries."""
        target = self._as_date(day)
        window = self.calendar.day_window(target)
        return await self._fetch_window(window, lambda provider: provider.fetch_steps_for_date(target))

    async def _fetch_window(self, window: TimeWindow, query: Query) -> StepObservation:
        route = select_route(
            window,
            self.calendar.now(),
            self.config,
            self.historical,
            self.recent,
            calendar=self.calendar,
        )
        return await self.orchestrator.execute(route, query, window.end)

    async def _fetch_day(self, day: date) -> StepObservation:
        window = self.calendar.day_window(day)
        return await self._fetch_window(window, lambda provider: provider.fetch_steps(window))

    # -------------------------------------------------------------------------
    # Multi-day batches
    # -------------------------------------------------------------------------
    async def fetch_last_n_days(self, days: int) -> StepSeries:
        """The last ``days`` days including today; failed days are left out."""
        if days < 0:
            raise InvalidRequest("days must be non-negative", details={"days": days})
        self._require_provider()
        today = self.calendar.local_date(self.calendar.now())
        span = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
        return await self.batcher.run(span, FailureMode.SKIP)

    async def fetch_steps_for_date_range(self, start: DateLike, end: DateLike) -> StepSeries:
        """Every day from ``start`` to ``end`` inclusive; failed days count as zero."""
        self._require_provider()
        return await self.batcher.run_range(self._as_date(start), self._as_date(end), FailureMode.TOLERANT)

    async def fetch_weekly_steps(self, day: DateLike) -> StepSeries:
        first, last = self.calendar.week_bounds(self._as_datetime(day))
        return await self.fetch_steps_for_date_range(first, last)

    async def fetch_monthly_steps(self, day: DateLike) -> StepSeries:
        first, last = self.calendar.month_bounds(self._as_datetime(day))
        return await self.fetch_steps_for_date_range(first, last)

    async def fetch_yearly_steps(self, year: int) -> StepSeries:
        first, last = self.calendar.year_bounds(year)
        return await self.fetch_steps_for_date_range(first, last)

    # -------------------------------------------------------------------------
    # Realtime
    # -------------------------------------------------------------------------
    def start_realtime_updates(self, handler: StepHandler) -> None:
        self.realtime.start(handler)

    def stop_realtime_updates(self) -> None:
        self.realtime.stop()

    @property
    def realtime_active(self) -> bool:
        return self.realtime.active

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _require_provider(self) -> None:
        if not self.has_any_provider_available():
            raise NoProviderAvailable()

    def _as_date(self, value: DateLike) -> date:
        if isinstance(value, datetime):
            return self.calendar.local_date(value)
        return value

    def _as_datetime(self, value: DateLike) -> datetime:
        if isinstance(value, datetime):
            return value
        return self.calendar.day_start(value)


def summarize(series: Mapping[datetime, StepObservation]) -> StepSummary:
    """Totals over the days actually present in ``series``."""
    total = sum(obs.steps for obs in series.values())
    days = len(series)
    sources = Counter(obs.source.value for obs in series.values())
    return StepSummary(
        total_steps=total,
        days=days,
        average_steps=total / days if days else 0.0,
        sources=dict(sources),
    )
