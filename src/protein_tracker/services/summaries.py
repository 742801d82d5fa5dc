"""Period summaries and trend fitting over meal records.

Every function here is pure: the result depends only on the arguments, and
the caller's meal list is never modified.
"""

import logging
import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, tzinfo

from protein_tracker.domain.dates import (
    as_day,
    days_between,
    last_n_days,
    local_today,
    meal_time_category,
    month_ranges,
    week_ranges,
)
from protein_tracker.domain.meals import MealRecord
from protein_tracker.domain.numbers import safe_number, safe_round, safe_sum
from protein_tracker.domain.stats import (
    DailyBucket,
    MealFrequency,
    PeriodSummary,
    TrendData,
)

logger = logging.getLogger(__name__)

STABLE_SLOPE = 0.1
HIGH_CORRELATION = 0.7
MEDIUM_CORRELATION = 0.4
MIN_TREND_POINTS = 2

MealInput = MealRecord | Mapping[str, object]

_FLAT_TREND = TrendData(slope=0, correlation=0, direction="stable", confidence="low")


@dataclass
class _DayTotals:
    protein: float = 0
    calories: float = 0
    meals: int = 0


def calculate_trend(values: Sequence[object]) -> TrendData:
    """Fit a least-squares line to ``values`` against their indexes.

    Returns a flat, low-confidence trend when there are fewer than two points
    or when either axis has no variance.
    """
    numbers = [safe_number(value) for value in values]
    count = len(numbers)
    if count < MIN_TREND_POINTS:
        return _FLAT_TREND

    x_mean = (count - 1) / 2
    y_mean = sum(numbers) / count
    numerator = 0.0
    spread_x = 0.0
    spread_y = 0.0
    for index, value in enumerate(numbers):
        x_diff = index - x_mean
        y_diff = value - y_mean
        numerator += x_diff * y_diff
        spread_x += x_diff * x_diff
        spread_y += y_diff * y_diff

    if spread_x == 0 or spread_y == 0:
        return _FLAT_TREND

    slope = numerator / spread_x
    correlation = max(-1.0, min(1.0, numerator / math.sqrt(spread_x * spread_y)))

    if abs(slope) < STABLE_SLOPE:
        direction = "stable"
    elif slope > 0:
        direction = "increasing"
    else:
        direction = "decreasing"

    strength = abs(correlation)
    if strength > HIGH_CORRELATION:
        confidence = "high"
    elif strength > MEDIUM_CORRELATION:
        confidence = "medium"
    else:
        confidence = "low"

    return TrendData(
        slope=slope,
        correlation=correlation,
        direction=direction,
        confidence=confidence,
    )


def calculate_period_summary(  # noqa: PLR0913
    meals: Iterable[MealInput],
    start: date,
    end: date,
    label: str,
    protein_goal: float,
    calorie_goal: float = 0,
    tz: tzinfo | None = None,
) -> PeriodSummary:
    """Summarise meals logged between ``start`` and ``end`` inclusive.

    Meals are bucketed by their local day in ``tz``. Every day of the range
    gets a bucket, including days without meals. Totals, extremes, averages
    and trends only consider days with a non-zero value, and averages are
    divided by the number of days with at least one meal.

    Raises ``InvalidPeriodError`` when ``start`` is after ``end``.
    """
    first, last = as_day(start), as_day(end)
    days = days_between(first, last)
    protein_goal = safe_number(protein_goal)
    calorie_goal = safe_number(calorie_goal)

    totals = {day: _DayTotals() for day in days}
    frequency: Counter[str] = Counter()
    period_meals = 0
    for raw in meals:
        record = MealRecord.coerce(raw)
        moment = record.local_timestamp(tz)
        day_totals = totals.get(moment.date())
        if day_totals is None:
            continue
        day_totals.protein += record.protein
        day_totals.calories += record.calories or 0
        day_totals.meals += 1
        frequency[meal_time_category(moment)] += 1
        period_meals += 1

    daily_data = [
        DailyBucket(
            date=day,
            protein=safe_round(day_totals.protein),
            calories=safe_round(day_totals.calories),
            meal_count=day_totals.meals,
            protein_goal_met=day_totals.protein >= protein_goal,
            calorie_goal_met=(
                day_totals.calories >= calorie_goal if calorie_goal > 0 else True
            ),
        )
        for day, day_totals in totals.items()
    ]

    active_days = sum(1 for day_totals in totals.values() if day_totals.meals > 0)
    protein_values = [t.protein for t in totals.values() if t.protein > 0]
    calorie_values = [t.calories for t in totals.values() if t.calories > 0]

    total_protein = safe_sum(*protein_values)
    total_calories = safe_sum(*calorie_values)
    average_protein = total_protein / active_days if active_days else 0
    average_calories = total_calories / active_days if active_days else 0

    logger.debug(
        "Period summary: label=%s days=%s meals=%s", label, len(days), period_meals
    )

    return PeriodSummary(
        label=label,
        start=first,
        end=last,
        total_days=len(days),
        active_days=active_days,
        total_protein=_whole(total_protein),
        average_protein=_whole(average_protein),
        max_protein=_whole(max(protein_values, default=0)),
        min_protein=_whole(min(protein_values, default=0)),
        protein_goal=protein_goal,
        protein_goal_achieved=sum(1 for day in daily_data if day.protein_goal_met),
        protein_goal_percentage=_goal_percentage(
            average_protein, protein_goal, active_days
        ),
        total_calories=_whole(total_calories),
        average_calories=_whole(average_calories),
        max_calories=_whole(max(calorie_values, default=0)),
        min_calories=_whole(min(calorie_values, default=0)),
        calorie_goal=calorie_goal,
        calorie_goal_achieved=sum(1 for day in daily_data if day.calorie_goal_met),
        calorie_goal_percentage=_goal_percentage(
            average_calories, calorie_goal, active_days
        ),
        protein_trend=calculate_trend(protein_values).direction,
        calorie_trend=calculate_trend(calorie_values).direction,
        total_meals=period_meals,
        average_meals_per_day=(
            safe_round(period_meals / active_days) if active_days else 0
        ),
        meal_frequency=MealFrequency(**frequency),
        daily_data=daily_data,
    )


def calculate_weekly_summaries(  # noqa: PLR0913
    meals: Iterable[MealInput],
    weeks: int,
    protein_goal: float,
    calorie_goal: float = 0,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> list[PeriodSummary]:
    """Summaries for the last ``weeks`` Monday-to-Sunday weeks, oldest first."""
    records = [MealRecord.coerce(meal) for meal in meals]
    current = today if today is not None else local_today(tz)
    return [
        calculate_period_summary(
            records, week.start, week.end, week.label, protein_goal, calorie_goal, tz
        )
        for week in week_ranges(weeks, current)
    ]


def calculate_monthly_summaries(  # noqa: PLR0913
    meals: Iterable[MealInput],
    months: int,
    protein_goal: float,
    calorie_goal: float = 0,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> list[PeriodSummary]:
    """Summaries for the last ``months`` calendar months, oldest first."""
    records = [MealRecord.coerce(meal) for meal in meals]
    current = today if today is not None else local_today(tz)
    return [
        calculate_period_summary(
            records,
            month.start,
            month.end,
            month.label,
            protein_goal,
            calorie_goal,
            tz,
        )
        for month in month_ranges(months, current)
    ]


def daily_series(  # noqa: PLR0913
    meals: Iterable[MealInput],
    days: int,
    protein_goal: float = 0,
    calorie_goal: float = 0,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> list[DailyBucket]:
    """Zero-filled buckets for the last ``days`` days, oldest first."""
    window = last_n_days(days, today if today is not None else local_today(tz))
    if not window:
        return []
    summary = calculate_period_summary(
        meals, window[0], window[-1], "", protein_goal, calorie_goal, tz
    )
    return summary.daily_data


def _whole(value: float) -> int:
    return int(safe_round(value, 0))


def _goal_percentage(average: float, goal: float, active_days: int) -> float:
    if active_days == 0 or goal <= 0:
        return 0
    return safe_round(average / goal * 100)
