"""Calendar helpers for period ranges, labels and day buckets."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Literal

MONTHS_PER_YEAR = 12
DAYS_PER_WEEK = 7

MONTH_NAMES = (
    "Janvier",
    "Février",
    "Mars",
    "Avril",
    "Mai",
    "Juin",
    "Juillet",
    "Août",
    "Septembre",
    "Octobre",
    "Novembre",
    "Décembre",
)

MealTime = Literal["morning", "afternoon", "evening", "night"]


class InvalidPeriodError(ValueError):
    """Raised when a period is inverted or a range count is negative."""


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days with a display label."""

    start: date
    end: date
    label: str

    @property
    def days(self) -> int:
        """Number of days in the range, both ends included."""
        return (self.end - self.start).days + 1


def local_today(tz: tzinfo | None = None) -> date:
    """Return today's date in ``tz`` (server local time when omitted)."""
    return datetime.now(tz=tz).date()


def as_day(value: date) -> date:
    """Drop the time component of a datetime, keep dates as they are."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _check_count(n: int) -> None:
    if n < 0:
        raise InvalidPeriodError(f"Range count must be non-negative, got {n}")


def last_n_days(n: int, today: date | None = None) -> list[date]:
    """Return the last ``n`` days ending today, oldest first."""
    _check_count(n)
    end = as_day(today) if today is not None else local_today()
    return [end - timedelta(days=offset) for offset in range(n - 1, -1, -1)]


def days_between(start: date, end: date) -> list[date]:
    """Return every day of the inclusive range, oldest first."""
    first, last = as_day(start), as_day(end)
    if first > last:
        raise InvalidPeriodError(f"Period start {first} is after end {last}")
    span = (last - first).days + 1
    return [first + timedelta(days=offset) for offset in range(span)]


def week_label(weeks_ago: int) -> str:
    if weeks_ago == 0:
        return "Cette semaine"
    if weeks_ago == 1:
        return "Semaine dernière"
    return f"Il y a {weeks_ago} semaines"


def month_label(months_ago: int, year: int, month: int) -> str:
    if months_ago == 0:
        return "Ce mois"
    if months_ago == 1:
        return "Mois dernier"
    return f"{MONTH_NAMES[month - 1]} {year}"


def week_ranges(n: int, today: date | None = None) -> list[DateRange]:
    """Return ``n`` Monday-to-Sunday weeks, the current week last."""
    _check_count(n)
    current = as_day(today) if today is not None else local_today()
    monday = current - timedelta(days=current.weekday())
    ranges = []
    for weeks_ago in range(n - 1, -1, -1):
        start = monday - timedelta(weeks=weeks_ago)
        ranges.append(
            DateRange(
                start=start,
                end=start + timedelta(days=DAYS_PER_WEEK - 1),
                label=week_label(weeks_ago),
            )
        )
    return ranges


def month_ranges(n: int, today: date | None = None) -> list[DateRange]:
    """Return ``n`` calendar months, the current month last."""
    _check_count(n)
    current = as_day(today) if today is not None else local_today()
    ranges = []
    for months_ago in range(n - 1, -1, -1):
        index = current.year * MONTHS_PER_YEAR + (current.month - 1) - months_ago
        year, month = divmod(index, MONTHS_PER_YEAR)
        month += 1
        last_day = calendar.monthrange(year, month)[1]
        ranges.append(
            DateRange(
                start=date(year, month, 1),
                end=date(year, month, last_day),
                label=month_label(months_ago, year, month),
            )
        )
    return ranges


def is_in_range(value: date, start: date, end: date) -> bool:
    """Inclusive check, compared at calendar-day level."""
    return as_day(start) <= as_day(value) <= as_day(end)


def format_short_date(value: date) -> str:
    """Format as ``D/M``."""
    return f"{value.day}/{value.month}"


def format_date_range(start: date, end: date) -> str:
    """Format as ``D/M - D/M``."""
    return f"{format_short_date(start)} - {format_short_date(end)}"


def format_iso_date(value: date) -> str:
    return as_day(value).isoformat()


def meal_time_category(moment: datetime) -> MealTime:
    """Classify a local time into a meal-time bucket."""
    hour = moment.hour
    if 5 <= hour < 12:  # noqa: PLR2004
        return "morning"
    if 12 <= hour < 17:  # noqa: PLR2004
        return "afternoon"
    if 17 <= hour < 21:  # noqa: PLR2004
        return "evening"
    return "night"
