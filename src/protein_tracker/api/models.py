"""Pydantic models for request and response payloads."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model serialised with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class DailyBucketResponse(ApiModel):
    """One day of a period."""

    date: date
    protein: float
    calories: float
    meal_count: int
    protein_goal_met: bool
    calorie_goal_met: bool


class MealFrequencyResponse(ApiModel):
    """Meals per time of day."""

    morning: int
    afternoon: int
    evening: int
    night: int


class PeriodSummaryResponse(ApiModel):
    """Aggregated statistics for a period."""

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
    protein_trend: str
    calorie_trend: str
    total_meals: int
    average_meals_per_day: float
    meal_frequency: MealFrequencyResponse
    daily_data: list[DailyBucketResponse]


class InsightsResponse(ApiModel):
    achievements: list[str]
    improvements: list[str]
    trends: list[str]


class StreaksResponse(ApiModel):
    current: int
    best: int
    level: str | None


class MealResponse(ApiModel):
    """Stored meal entry."""

    id: str | None
    timestamp: datetime
    protein: float
    calories: float | None
    description: str
    source: str | None
    ai_estimated: bool


class GoalsResponse(ApiModel):
    protein_goal: float
    calorie_goal: float
    timezone: str


class GoalsUpdate(ApiModel):
    """Partial update of a user's goals."""

    protein_goal: float | None = Field(default=None, gt=0)
    calorie_goal: float | None = Field(default=None, gt=0)
    timezone: str | None = None


class DeletionResponse(ApiModel):
    deleted: int
