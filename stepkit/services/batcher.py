"""Day-by-day batching of multi-day step queries."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable

from stepkit.core.clock import StepCalendar
from stepkit.core.errors import InvalidRequest, StepServiceError
from stepkit.core.logging import get_logger
from stepkit.schemas.steps import StepObservation, StepSource

log = get_logger("batcher")

DayFetcher = Callable[[date], Awaitable[StepObservation]]


class FailureMode(str, Enum):
    """What a failed day turns into inside a batch."""

    TOLERANT = "tolerant"  # zero steps from the historical provider
    SKIP = "skip"  # day omitted from the result


class RangeBatcher:
    """Fetches one calendar day at a time, in chronological order.

    Each day goes through the single-window pipeline, so routing is decided
    per day. A failed day never aborts the batch.
    """

    def __init__(self, fetch_day: DayFetcher, calendar: StepCalendar):
        self.fetch_day = fetch_day
        self.calendar = calendar

    async def run(self, days: Iterable[date], mode: FailureMode) -> Dict[datetime, StepObservation]:
        results: Dict[datetime, StepObservation] = {}
        failed = 0

        for day in sorted(set(days)):
            key = self.calendar.day_start(day)
            try:
                results[key] = await self.fetch_day(day)
            except StepServiceError as exc:
                failed += 1
                if mode is FailureMode.SKIP:
                    log.warning(f"Skipping {day.isoformat()}: {exc.message}")
                    continue
                log.warning(f"Recording zero steps for {day.isoformat()}: {exc.message}")
                results[key] = StepObservation(
                    steps=0,
                    source=StepSource.HISTORICAL,
                    window_end=self.calendar.day_window(day).end,
                )

        log.info(f"Batch finished mode={mode.value} days={len(results)} failed={failed}")
        return results

    async def run_range(self, start: date, end: date, mode: FailureMode) -> Dict[datetime, StepObservation]:
        """Batch every day from ``start`` to ``end`` inclusive."""
        if start > end:
            raise InvalidRequest(
                "range start must not be after range end",
                details={"start": start.isoformat(), "end": end.isoformat()},
            )
        days = self.calendar.iter_days(self.calendar.day_start(start), self.calendar.day_start(end))
        return await self.run(days, mode)
