# Providers package
from typing import Tuple

from stepkit.core.clock import StepCalendar
from stepkit.core.config import Settings
from stepkit.providers.base import HistoricalStepProvider, RecentStepProvider, StepProvider
from stepkit.providers.csv_history import CsvHistoryProvider
from stepkit.providers.sample_buffer import SampleBufferProvider


def build_providers(settings: Settings) -> Tuple[CsvHistoryProvider, SampleBufferProvider]:
    """Create the concrete providers described by ``settings``."""
    calendar = StepCalendar(settings.TIMEZONE, settings.FIRST_WEEKDAY)
    historical = CsvHistoryProvider(
        settings.HISTORY_CSV_PATH,
        authorization=settings.HISTORY_AUTHORIZATION,
        calendar=calendar,
    )
    recent = SampleBufferProvider(
        lookback_days=settings.RECENT_WINDOW_LOOKBACK_DAYS,
        calendar=calendar,
        enabled=settings.RECENT_PROVIDER_ENABLED,
    )
    return historical, recent


__all__ = [
    "StepProvider",
    "HistoricalStepProvider",
    "RecentStepProvider",
    "CsvHistoryProvider",
    "SampleBufferProvider",
    "build_providers",
]
