"""CSV-backed historical step provider (optional/local data)."""

from __future__ import annotations

import csv
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Literal, Optional

from stepkit.core.clock import StepCalendar
from stepkit.core.errors import ProviderNotAvailable, ProviderUnauthorized
from stepkit.core.logging import get_logger
from stepkit.schemas.steps import TimeWindow
from .base import HistoricalStepProvider, Sample

log = get_logger("providers.csv_history")

AuthorizationStatus = Literal["authorized", "not_determined", "denied"]


class CsvHistoryProvider(HistoricalStepProvider):
    """Reads a CSV with required columns: timestamp,steps (one row per sample)."""

    name = "historical"

    def __init__(
        self,
        file_path: Optional[str],
        authorization: AuthorizationStatus = "not_determined",
        calendar: Optional[StepCalendar] = None,
    ):
        self.file_path = Path(file_path) if file_path else None
        self.authorization = authorization
        self.calendar = calendar or StepCalendar()

    @property
    def is_available(self) -> bool:
        return self.file_path is not None and self.file_path.exists()

    @property
    def is_authorized(self) -> bool:
        return self.authorization != "denied"

    async def request_permission(self) -> None:
        if not self.is_available:
            raise ProviderNotAvailable(self.name, f"CSV file not found: {self.file_path}")
        if self.authorization == "denied":
            raise ProviderUnauthorized(self.name)
        self.authorization = "authorized"

    async def fetch_steps(self, window: TimeWindow) -> int:
        samples = self._load_samples()
        return self.sum_in_window(samples, window)

    async def fetch_steps_for_date(self, day: date) -> int:
        return await self.fetch_steps(self.calendar.day_window(day))

    async def fetch_today_steps(self) -> int:
        now = self.calendar.now()
        return await self.fetch_steps(TimeWindow(start=self.calendar.start_of_day(now), end=now))

    def _load_samples(self) -> List[Sample]:
        if not self.is_available:
            raise ProviderNotAvailable(self.name, f"CSV file not found: {self.file_path}")
        if not self.is_authorized:
            raise ProviderUnauthorized(self.name)

        samples: List[Sample] = []
        skipped = 0
        with self.file_path.open("r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row in reader:
                ts = self._parse_timestamp(row.get("timestamp"))
                steps = self._to_int(row.get("steps"))
                if ts is None or steps is None or steps < 0:
                    skipped += 1
                    continue
                samples.append((self.calendar.localize(ts), steps))
        if skipped:
            log.warning(f"Skipped {skipped} malformed rows in {self.file_path}")
        log.debug(f"Loaded {len(samples)} samples from CSV")
        return samples

    @staticmethod
    def _parse_timestamp(value: Any) -> Optional[datetime]:
        if not value:
            return None
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None

    @staticmethod
    def _to_int(val: Any) -> Optional[int]:
        try:
            return int(val) if val not in (None, "") else None
        except (TypeError, ValueError):
            return None
