"""Tests for insights and streaks."""

from dataclasses import replace
from datetime import date, timedelta

from protein_tracker.domain.stats import DailyBucket, MealFrequency, PeriodSummary
from protein_tracker.services.insights import (
    calculate_streaks,
    get_insights,
    streak_level,
)

BASE = PeriodSummary(
    label="Cette semaine",
    start=date(2024, 1, 8),
    end=date(2024, 1, 14),
    total_days=7,
    active_days=7,
    total_protein=840,
    average_protein=120,
    max_protein=130,
    min_protein=110,
    protein_goal=120,
    protein_goal_achieved=5,
    protein_goal_percentage=100,
    total_calories=14000,
    average_calories=2000,
    max_calories=2200,
    min_calories=1800,
    calorie_goal=2000,
    calorie_goal_achieved=4,
    calorie_goal_percentage=100,
    protein_trend="stable",
    calorie_trend="stable",
    total_meals=21,
    average_meals_per_day=3,
    meal_frequency=MealFrequency(morning=7, afternoon=7, evening=7),
)


def _days(*flags: tuple[int, bool]) -> list[DailyBucket]:
    start = date(2024, 1, 1)
    return [
        DailyBucket(
            date=start + timedelta(days=index),
            protein=120 if met else 40,
            calories=0,
            meal_count=meals,
            protein_goal_met=met,
            calorie_goal_met=True,
        )
        for index, (meals, met) in enumerate(flags)
    ]


def test_no_summaries_give_empty_insights() -> None:
    insights = get_insights([])

    assert insights.achievements == []
    assert insights.improvements == []
    assert insights.trends == []


def test_good_week_lists_achievements() -> None:
    insights = get_insights([BASE])

    assert insights.achievements == [
        "Objectif protéines atteint à 100%",
        "Calories bien équilibrées",
        "Suivi régulier maintenu",
    ]
    assert insights.improvements == []
    assert insights.trends == []


def test_weak_week_lists_improvements() -> None:
    weak = replace(
        BASE,
        active_days=3,
        protein_goal_percentage=62.5,
        calorie_goal_percentage=70,
        average_meals_per_day=1.3,
        protein_trend="decreasing",
    )

    insights = get_insights([weak])

    assert insights.achievements == []
    assert insights.improvements == [
        "Augmenter l'apport en protéines",
        "Augmenter la fréquence des repas",
        "Améliorer la régularité du suivi",
    ]
    assert insights.trends == ["Tendance à la baisse pour les protéines"]


def test_comparison_with_previous_period() -> None:
    previous = replace(
        BASE, label="Semaine dernière", average_protein=100, active_days=4
    )
    latest = replace(BASE, average_protein=112, protein_trend="increasing")

    insights = get_insights([previous, latest])

    assert insights.trends == [
        "Tendance positive pour les protéines",
        "Amélioration de +12g de protéines",
        "Régularité en hausse",
    ]


def test_fractional_percentage_is_kept_in_message() -> None:
    insights = get_insights([replace(BASE, protein_goal_percentage=104.2)])

    assert insights.achievements[0] == "Objectif protéines atteint à 104.2%"


def test_streaks_count_consecutive_goal_days() -> None:
    days = _days((1, True), (2, True), (1, False), (1, True), (3, True), (1, True))

    streaks = calculate_streaks(days)

    assert streaks.current == 3
    assert streaks.best == 3
    assert streaks.level == "Rookie"


def test_today_without_meals_does_not_break_streak() -> None:
    days = _days((1, True), (1, True), (0, False))

    assert calculate_streaks(days).current == 2


def test_day_without_meals_in_the_past_breaks_streak() -> None:
    days = _days((1, True), (0, False), (1, True), (1, False))

    streaks = calculate_streaks(days)

    assert streaks.current == 0
    assert streaks.best == 1
    assert streaks.level is None


def test_streak_levels() -> None:
    assert streak_level(2) is None
    assert streak_level(3) == "Rookie"
    assert streak_level(7) == "Champion"
    assert streak_level(14) == "Légende"
    assert calculate_streaks([]).current == 0
