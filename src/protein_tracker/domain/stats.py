"""Domain models for period statistics."""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

TrendDirection = Literal["increasing", "decreasing", "stable"]
TrendConfidence = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class DailyBucket:
    """Totals for one calendar day of a period."""

    date: date
    protein: float
    calories: float
    meal_count: int
    protein_goal_met: bool
    calorie_goal_met: bool


@dataclass(frozen=True)
class MealFrequency:
    """Meal counts by time of day."""

    morning: int = 0
    afternoon: int = 0
    evening: int = 0
    night: int = 0


@dataclass(frozen=True)
class TrendData:
    """Least-squares fit of a daily series."""

    slope: float
    correlation: float
    direction: TrendDirection
    confidence: TrendConfidence


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregated statistics for an inclusive range of days."""

    label: str
    start: date
    end: date
    total_days: int
    active_days: int

    total_protein: int
    average_protein: int
    max_protein: int
    min_protein: int
    protein_goal: float
    protein_goal_achieved: int
    protein_goal_percentage: float

    total_calories: int
    average_calories: int
    max_calories: int
    min_calories: int
    calorie_goal: float
    calorie_goal_achieved: int
    calorie_goal_percentage: float

    protein_trend: TrendDirection
    calorie_trend: TrendDirection

    total_meals: int
    average_meals_per_day: float
    meal_frequency: MealFrequency
    daily_data: list[DailyBucket] = field(default_factory=list)

    @property
    def active_ratio(self) -> float:
        """Share of days with at least one meal."""
        if self.total_days <= 0:
            return 0
        return self.active_days / self.total_days


@dataclass(frozen=True)
class Insights:
    """Categorised messages derived from period summaries."""

    achievements: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    trends: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Streaks:
    """Consecutive protein-goal days."""

    current: int
    best: int
    level: str | None
