"""Calendar-day arithmetic used by the selection policy and the range batcher."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterator, Optional, Tuple
from zoneinfo import ZoneInfo

from stepkit.schemas.steps import TimeWindow

Clock = Callable[[], datetime]


class StepCalendar:
    """Day boundaries in one time zone.

    Boundaries are derived from dates rather than by adding 24h, so days that
    cross a DST transition are 23 or 25 hours long instead of drifting.
    When no zone is configured the host's local time is used.
    """

    def __init__(
        self,
        timezone: Optional[str] = None,
        first_weekday: int = 0,
        clock: Optional[Clock] = None,
    ):
        self.tz = ZoneInfo(timezone) if timezone else None
        self.first_weekday = first_weekday
        self._clock = clock

    def now(self) -> datetime:
        if self._clock is not None:
            return self.localize(self._clock())
        return datetime.now(self.tz) if self.tz else datetime.now().astimezone()

    def localize(self, ts: datetime) -> datetime:
        """Express ``ts`` in this calendar's zone (naive values are wall-clock time)."""
        if self.tz is None:
            return ts.astimezone()
        if ts.tzinfo is None:
            return ts.replace(tzinfo=self.tz)
        return ts.astimezone(self.tz)

    def local_date(self, ts: datetime) -> date:
        return self.localize(ts).date()

    def day_start(self, day: date) -> datetime:
        midnight = datetime.combine(day, time.min)
        if self.tz is None:
            return midnight.astimezone()
        return midnight.replace(tzinfo=self.tz)

    def start_of_day(self, ts: datetime) -> datetime:
        return self.day_start(self.local_date(ts))

    def day_window(self, day: date) -> TimeWindow:
        return TimeWindow(start=self.day_start(day), end=self.day_start(day + timedelta(days=1)))

    def days_between(self, start: datetime, now: datetime) -> int:
        """Whole calendar days from ``start`` to ``now`` (0 for the same day)."""
        return (self.local_date(now) - self.local_date(start)).days

    def iter_days(self, start: datetime, end: datetime) -> Iterator[date]:
        """Every calendar day from start's day to end's day, inclusive, in order."""
        current = self.local_date(start)
        last = self.local_date(end)
        while current <= last:
            yield current
            current += timedelta(days=1)

    def week_bounds(self, ts: datetime) -> Tuple[date, date]:
        day = self.local_date(ts)
        first = day - timedelta(days=(day.weekday() - self.first_weekday) % 7)
        return first, first + timedelta(days=6)

    def month_bounds(self, ts: datetime) -> Tuple[date, date]:
        day = self.local_date(ts)
        last_day = monthrange(day.year, day.month)[1]
        return day.replace(day=1), day.replace(day=last_day)

    @staticmethod
    def year_bounds(year: int) -> Tuple[date, date]:
        return date(year, 1, 1), date(year, 12, 31)
