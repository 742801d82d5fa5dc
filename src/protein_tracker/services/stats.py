"""Statistics service for a user's meal history."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Literal, Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from protein_tracker.domain.dates import (
    InvalidPeriodError,
    as_day,
    format_date_range,
    last_n_days,
    local_today,
    month_ranges,
    week_ranges,
)
from protein_tracker.domain.meals import MealRecord
from protein_tracker.domain.models import UserGoals
from protein_tracker.domain.stats import DailyBucket, Insights, PeriodSummary, Streaks
from protein_tracker.services.insights import calculate_streaks, get_insights
from protein_tracker.services.summaries import (
    calculate_monthly_summaries,
    calculate_period_summary,
    calculate_weekly_summaries,
    daily_series,
)
from protein_tracker.services.user_settings import UserSettingsService

logger = logging.getLogger(__name__)

PeriodKind = Literal["week", "month"]


class StatsRepository(Protocol):
    """Persistence interface for meal history queries."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals logged in ``[start, end)``."""


@dataclass
class StatsService:
    """Loads meals and goals for a user and runs the summary engine."""

    repository: StatsRepository
    user_settings_service: UserSettingsService
    max_period_days: int = 366

    def get_weekly(
        self, user_id: UUID, weeks: int, today: date | None = None
    ) -> list[PeriodSummary]:
        """Return the last ``weeks`` weekly summaries, oldest first."""
        goals, tz = self._goals(user_id)
        current = today or local_today(tz)
        ranges = week_ranges(weeks, current)
        if not ranges:
            return []
        meals = self.load_meals(user_id, ranges[0].start, ranges[-1].end, tz)
        return calculate_weekly_summaries(
            meals, weeks, goals.protein_goal, goals.calorie_goal, current, tz
        )

    def get_monthly(
        self, user_id: UUID, months: int, today: date | None = None
    ) -> list[PeriodSummary]:
        """Return the last ``months`` monthly summaries, oldest first."""
        goals, tz = self._goals(user_id)
        current = today or local_today(tz)
        ranges = month_ranges(months, current)
        if not ranges:
            return []
        meals = self.load_meals(user_id, ranges[0].start, ranges[-1].end, tz)
        return calculate_monthly_summaries(
            meals, months, goals.protein_goal, goals.calorie_goal, current, tz
        )

    def get_period(
        self, user_id: UUID, start: date, end: date, label: str | None = None
    ) -> PeriodSummary:
        """Return a summary for an arbitrary inclusive range."""
        first, last = as_day(start), as_day(end)
        if first > last:
            raise InvalidPeriodError(f"Period start {start} is after end {end}")
        if (last - first).days + 1 > self.max_period_days:
            raise InvalidPeriodError(
                f"Period is limited to {self.max_period_days} days"
            )
        goals, tz = self._goals(user_id)
        meals = self.load_meals(user_id, start, end, tz)
        return calculate_period_summary(
            meals,
            start,
            end,
            label or format_date_range(start, end),
            goals.protein_goal,
            goals.calorie_goal,
            tz,
        )

    def get_insights(
        self,
        user_id: UUID,
        period: PeriodKind = "week",
        count: int = 2,
        today: date | None = None,
    ) -> Insights:
        """Return insights over the last ``count`` weeks or months."""
        if period == "month":
            summaries = self.get_monthly(user_id, count, today)
        else:
            summaries = self.get_weekly(user_id, count, today)
        return get_insights(summaries)

    def get_streaks(
        self, user_id: UUID, days: int = 60, today: date | None = None
    ) -> Streaks:
        """Return goal streaks over the last ``days`` days."""
        return calculate_streaks(self.get_daily_series(user_id, days, today))

    def get_daily_series(
        self, user_id: UUID, days: int = 7, today: date | None = None
    ) -> list[DailyBucket]:
        """Return zero-filled daily buckets for the last ``days`` days."""
        goals, tz = self._goals(user_id)
        current = today or local_today(tz)
        window = last_n_days(days, current)
        if not window:
            return []
        meals = self.load_meals(user_id, window[0], window[-1], tz)
        return daily_series(
            meals, days, goals.protein_goal, goals.calorie_goal, current, tz
        )

    def _goals(self, user_id: UUID) -> tuple[UserGoals, ZoneInfo]:
        goals = self.user_settings_service.get_goals(user_id)
        return goals, ZoneInfo(goals.timezone)

    def load_meals(
        self, user_id: UUID, start: date, end: date, tz: ZoneInfo
    ) -> list[MealRecord]:
        """Return meals whose local day falls in the inclusive range."""
        try:
            window_start = datetime.combine(as_day(start), time.min, tzinfo=tz)
            window_end = datetime.combine(
                as_day(end) + timedelta(days=1), time.min, tzinfo=tz
            )
            utc_start = window_start.astimezone(UTC)
            utc_end = window_end.astimezone(UTC)
        except OverflowError as exc:
            raise InvalidPeriodError(
                f"Period {start} - {end} is outside the supported calendar"
            ) from exc
        meals = self.repository.list_meals(user_id, utc_start, utc_end)
        logger.debug("Stats meals loaded: user_id=%s meals=%s", user_id, len(meals))
        return meals
