"""Rule-based insights and goal streaks derived from period summaries."""

from collections.abc import Sequence

from protein_tracker.domain.stats import DailyBucket, Insights, PeriodSummary, Streaks

PROTEIN_GOAL_REACHED_PCT = 100
PROTEIN_GOAL_LOW_PCT = 80
CALORIE_BALANCE_MIN_PCT = 90
CALORIE_BALANCE_MAX_PCT = 110
REGULAR_TRACKING_RATIO = 0.8
IRREGULAR_TRACKING_RATIO = 0.5
MIN_MEALS_PER_DAY = 2
PROTEIN_IMPROVEMENT_G = 5

STREAK_LEVELS = ((14, "Légende"), (7, "Champion"), (3, "Rookie"))


def get_insights(summaries: Sequence[PeriodSummary]) -> Insights:
    """Derive insights from summaries ordered oldest to newest.

    Rules apply to the latest summary; the comparison rules also look at the
    one before it when available.
    """
    if not summaries:
        return Insights()

    latest = summaries[-1]
    achievements: list[str] = []
    improvements: list[str] = []
    trends: list[str] = []

    if latest.protein_goal_percentage >= PROTEIN_GOAL_REACHED_PCT:
        achievements.append(
            "Objectif protéines atteint à "
            f"{_format_number(latest.protein_goal_percentage)}%"
        )
    if (
        CALORIE_BALANCE_MIN_PCT
        <= latest.calorie_goal_percentage
        <= CALORIE_BALANCE_MAX_PCT
    ):
        achievements.append("Calories bien équilibrées")
    if latest.active_ratio >= REGULAR_TRACKING_RATIO:
        achievements.append("Suivi régulier maintenu")

    if latest.protein_goal_percentage < PROTEIN_GOAL_LOW_PCT:
        improvements.append("Augmenter l'apport en protéines")
    if latest.average_meals_per_day < MIN_MEALS_PER_DAY:
        improvements.append("Augmenter la fréquence des repas")
    if latest.active_ratio < IRREGULAR_TRACKING_RATIO:
        improvements.append("Améliorer la régularité du suivi")

    if latest.protein_trend == "increasing":
        trends.append("Tendance positive pour les protéines")
    elif latest.protein_trend == "decreasing":
        trends.append("Tendance à la baisse pour les protéines")

    if len(summaries) >= 2:  # noqa: PLR2004
        previous = summaries[-2]
        protein_change = latest.average_protein - previous.average_protein
        if protein_change > PROTEIN_IMPROVEMENT_G:
            trends.append(f"Amélioration de +{protein_change}g de protéines")
        if latest.active_ratio > previous.active_ratio:
            trends.append("Régularité en hausse")
        elif latest.active_ratio < previous.active_ratio:
            trends.append("Régularité en baisse")

    return Insights(achievements=achievements, improvements=improvements, trends=trends)


def calculate_streaks(daily_data: Sequence[DailyBucket]) -> Streaks:
    """Return current and best runs of days meeting the protein goal.

    Only days with at least one meal can extend a run. The current run is
    counted back from the most recent day, skipping it once when nothing has
    been logged yet (the day is still in progress).
    """
    best = 0
    run = 0
    for bucket in daily_data:
        run = run + 1 if _goal_day(bucket) else 0
        best = max(best, run)

    recent = list(daily_data)
    if recent and recent[-1].meal_count == 0:
        recent.pop()
    current = 0
    for bucket in reversed(recent):
        if not _goal_day(bucket):
            break
        current += 1

    return Streaks(current=current, best=best, level=streak_level(current))


def streak_level(current: int) -> str | None:
    """Badge name for a streak length."""
    for threshold, name in STREAK_LEVELS:
        if current >= threshold:
            return name
    return None


def _goal_day(bucket: DailyBucket) -> bool:
    return bucket.meal_count > 0 and bucket.protein_goal_met


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)
