"""Source selection policy: which provider(s) answer a given window."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from stepkit.core.clock import StepCalendar
from stepkit.core.logging import get_logger
from stepkit.providers.base import HistoricalStepProvider, RecentStepProvider
from stepkit.schemas.steps import Route, StepServiceConfig, TimeWindow

log = get_logger("selection")


def classify(
    window: TimeWindow,
    now: datetime,
    config: StepServiceConfig,
    historical_available: bool,
    historical_authorized: bool,
    recent_available: bool,
    calendar: Optional[StepCalendar] = None,
) -> Route:
    """Pure routing decision for ``window``.

    Windows whose start lies within ``recent_window_lookback_days`` calendar
    days of ``now`` may use the recent-window provider; anything older is
    answered by the historical provider alone.
    """
    calendar = calendar or StepCalendar(config.timezone, config.first_weekday)
    age = calendar.days_between(window.start, now)
    historical_usable = historical_available and historical_authorized

    if age <= config.recent_window_lookback_days and recent_available:
        if historical_usable and config.use_hybrid_mode:
            return Route.HYBRID
        if historical_usable:
            return Route.HISTORICAL_ONLY
        return Route.RECENT_ONLY
    if historical_usable:
        return Route.HISTORICAL_ONLY
    return Route.UNAVAILABLE


def select_route(
    window: TimeWindow,
    now: datetime,
    config: StepServiceConfig,
    historical: HistoricalStepProvider,
    recent: RecentStepProvider,
    calendar: Optional[StepCalendar] = None,
) -> Route:
    """Classify ``window`` using the providers' current availability and consent."""
    route = classify(
        window,
        now,
        config,
        historical_available=historical.is_available,
        historical_authorized=historical.is_authorized,
        recent_available=recent.is_available,
        calendar=calendar,
    )
    log.debug(f"Window {window.start.isoformat()}..{window.end.isoformat()} routed to {route.value}")
    return route
