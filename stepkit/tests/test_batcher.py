"""Multi-day batching tests"""

from datetime import date, timedelta

import pytest

from stepkit.core.clock import StepCalendar
from stepkit.core.errors import NoProviderAvailable
from stepkit.schemas.steps import StepSource
from stepkit.services.step_service import summarize
from stepkit.tests.fakes import NOW

TODAY = NOW.date()


class TestSkipMode:
    """Last-N-days: failed days are omitted"""

    @pytest.mark.asyncio
    async def test_failed_days_are_omitted(self, service, historical, recent):
        historical.steps_to_return = 1000
        recent.steps_to_return = 900
        failing = {TODAY - timedelta(days=2), TODAY - timedelta(days=5)}
        historical.failing_days = set(failing)
        recent.failing_days = set(failing)

        result = await service.fetch_last_n_days(7)

        assert len(result) == 5
        assert {key.date() for key in result}.isdisjoint(failing)
        summary = summarize(result)
        assert summary.days == 5
        assert summary.total_steps == 5000
        assert summary.average_steps == 1000

    @pytest.mark.asyncio
    async def test_days_are_chronological_and_include_today(self, service):
        result = await service.fetch_last_n_days(3)

        keys = list(result)
        assert [key.date() for key in keys] == [TODAY - timedelta(days=2), TODAY - timedelta(days=1), TODAY]
        assert all(key.hour == 0 and key.minute == 0 for key in keys)

    @pytest.mark.asyncio
    async def test_zero_days_is_empty(self, service):
        assert await service.fetch_last_n_days(0) == {}

    @pytest.mark.asyncio
    async def test_negative_days_rejected(self, service):
        with pytest.raises(ValueError):
            await service.fetch_last_n_days(-1)


class TestTolerantMode:
    """Date ranges: failed days count as zero"""

    @pytest.mark.asyncio
    async def test_failed_day_recorded_as_zero(self, service, historical, recent):
        start = TODAY - timedelta(days=30)
        end = start + timedelta(days=9)
        failing = start + timedelta(days=4)
        historical.steps_to_return = 4000
        historical.failing_days = {failing}

        result = await service.fetch_steps_for_date_range(start, end)

        assert len(result) == 10
        by_day = {key.date(): obs for key, obs in result.items()}
        assert by_day[failing].steps == 0
        assert by_day[failing].source is StepSource.HISTORICAL
        assert summarize(result).total_steps == 9 * 4000
        assert recent.fetch_steps_call_count == 0

    @pytest.mark.asyncio
    async def test_age_is_recomputed_per_day(self, service, historical, recent):
        """A 30-day range splits into a historical head and a hybrid tail"""
        historical.steps_to_return = 10
        recent.steps_to_return = 20

        result = await service.fetch_steps_for_date_range(TODAY - timedelta(days=29), TODAY)

        sources = [obs.source for obs in result.values()]
        assert sources.count(StepSource.HYBRID) == 8
        assert sources.count(StepSource.HISTORICAL) == 22
        assert recent.fetch_steps_call_count == 8
        assert sources[-1] is StepSource.HYBRID

    @pytest.mark.asyncio
    async def test_reversed_range_rejected(self, service):
        with pytest.raises(ValueError):
            await service.fetch_steps_for_date_range(TODAY, TODAY - timedelta(days=1))

    @pytest.mark.asyncio
    async def test_weekly_uses_configured_first_weekday(self, service, make_service):
        monday_week = await service.fetch_weekly_steps(NOW)
        assert [key.date() for key in monday_week][0] == date(2026, 10, 12)
        assert len(monday_week) == 7

        sunday_calendar = StepCalendar("UTC", first_weekday=6, clock=lambda: NOW)
        sunday_week = await make_service(cal=sunday_calendar).fetch_weekly_steps(NOW)
        days = [key.date() for key in sunday_week]
        assert days[0] == date(2026, 10, 11)
        assert days[-1] == date(2026, 10, 17)

    @pytest.mark.asyncio
    async def test_monthly_covers_whole_month(self, service):
        result = await service.fetch_monthly_steps(date(2026, 2, 10))

        days = [key.date() for key in result]
        assert len(days) == 28
        assert days[0] == date(2026, 2, 1)
        assert days[-1] == date(2026, 2, 28)

    @pytest.mark.asyncio
    async def test_yearly_uses_history_only_for_past_year(self, service, historical, recent):
        historical.steps_by_day = {date(2025, 3, 1): 12345}

        result = await service.fetch_yearly_steps(2025)

        assert len(result) == 365
        assert recent.fetch_steps_call_count == 0
        by_day = {key.date(): obs.steps for key, obs in result.items()}
        assert by_day[date(2025, 3, 1)] == 12345


class TestBatchGuards:
    """Nothing usable at all"""

    @pytest.mark.asyncio
    async def test_no_provider_raises_up_front(self, service, historical, recent):
        historical.is_available = False
        recent.is_available = False

        with pytest.raises(NoProviderAvailable):
            await service.fetch_last_n_days(7)
        with pytest.raises(NoProviderAvailable):
            await service.fetch_monthly_steps(NOW)
        assert historical.fetch_steps_call_count == 0
