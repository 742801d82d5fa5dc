"""Personal data export as CSV or print-ready HTML."""

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, tzinfo
from html import escape
from typing import Literal
from uuid import UUID
from zoneinfo import ZoneInfo

from protein_tracker.domain.dates import InvalidPeriodError, as_day, format_date_range
from protein_tracker.domain.meals import MealRecord
from protein_tracker.domain.models import Principal
from protein_tracker.domain.numbers import safe_round
from protein_tracker.domain.stats import PeriodSummary
from protein_tracker.services.stats import StatsService
from protein_tracker.services.summaries import calculate_period_summary
from protein_tracker.services.user_settings import UserSettingsService

logger = logging.getLogger(__name__)

ExportFormat = Literal["csv", "html"]

_MEDIA_TYPES = {"csv": "text/csv; charset=utf-8", "html": "text/html; charset=utf-8"}


@dataclass(frozen=True)
class ExportOptions:
    """What to export and over which days."""

    start: date
    end: date
    format: ExportFormat = "csv"
    include_meals: bool = True
    include_summary: bool = True
    include_personal_info: bool = True


@dataclass(frozen=True)
class ExportStats:
    """Headline figures for the exported range."""

    total_meals: int
    total_protein: int
    total_calories: int
    average_protein: int
    average_calories: int
    active_days: int


@dataclass(frozen=True)
class ExportData:
    """Everything a rendered export needs."""

    user_name: str
    export_date: str
    date_range: str
    protein_goal: float
    calorie_goal: float
    stats: ExportStats
    meals: list[MealRecord] = field(default_factory=list)
    summary: PeriodSummary | None = None
    timezone: tzinfo | None = None


@dataclass(frozen=True)
class ExportDocument:
    """Rendered export ready to be returned to the client."""

    content: str
    media_type: str
    filename: str


def calculate_export_stats(
    meals: list[MealRecord], tz: tzinfo | None = None
) -> ExportStats:
    """Totals over all meals and per-day averages over days with meals."""
    total_protein = sum(meal.protein for meal in meals)
    total_calories = sum(meal.calories or 0 for meal in meals)
    active_days = len({meal.local_timestamp(tz).date() for meal in meals})
    return ExportStats(
        total_meals=len(meals),
        total_protein=_whole(total_protein),
        total_calories=_whole(total_calories),
        average_protein=_whole(total_protein / active_days) if active_days else 0,
        average_calories=(
            _whole(total_calories / active_days) if active_days else 0
        ),
        active_days=active_days,
    )


@dataclass
class ExportService:
    """Builds and renders a user's data export."""

    stats_service: StatsService
    user_settings_service: UserSettingsService
    max_days: int = 366

    def export(
        self,
        principal: Principal,
        options: ExportOptions,
        now: datetime | None = None,
    ) -> ExportDocument:
        """Build the export described by ``options`` and render it."""
        data = self.prepare_export(principal, options, now)
        moment = now or datetime.now(tz=UTC)
        filename = f"nutrition-data-{moment.date().isoformat()}.{options.format}"
        if options.format == "html":
            content = render_html(data)
        else:
            content = render_csv(data)
        logger.info(
            "Export generated: user_id=%s format=%s", principal.id, options.format
        )
        return ExportDocument(
            content=content,
            media_type=_MEDIA_TYPES[options.format],
            filename=filename,
        )

    def prepare_export(
        self,
        principal: Principal,
        options: ExportOptions,
        now: datetime | None = None,
    ) -> ExportData:
        """Collect meals, summary and headline stats for the export."""
        start, end = as_day(options.start), as_day(options.end)
        if start > end:
            raise InvalidPeriodError(f"Period start {start} is after end {end}")
        if (end - start).days + 1 > self.max_days:
            raise InvalidPeriodError(
                f"Export range is limited to {self.max_days} days"
            )

        user_id: UUID = principal.id
        goals = self.user_settings_service.get_goals(user_id)
        tz = ZoneInfo(goals.timezone)
        meals = sorted(
            self.stats_service.load_meals(user_id, start, end, tz),
            key=lambda meal: meal.timestamp,
        )
        summary = None
        if options.include_summary:
            summary = calculate_period_summary(
                meals,
                start,
                end,
                format_date_range(start, end),
                goals.protein_goal,
                goals.calorie_goal,
                tz,
            )
        moment = (now or datetime.now(tz=UTC)).astimezone(tz)
        user_name = (principal.email or "") if options.include_personal_info else ""
        return ExportData(
            user_name=user_name,
            export_date=moment.strftime("%d/%m/%Y à %H:%M"),
            date_range=f"{start:%d/%m/%Y} - {end:%d/%m/%Y}",
            protein_goal=goals.protein_goal,
            calorie_goal=goals.calorie_goal,
            stats=calculate_export_stats(meals, tz),
            meals=meals if options.include_meals else [],
            summary=summary,
            timezone=tz,
        )


def render_csv(data: ExportData) -> str:
    """Render the export as a sectioned CSV document."""
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    title = "Données Nutritionnelles"
    writer.writerow([f"{title} - {data.user_name}" if data.user_name else title])
    writer.writerow([f"Exporté le: {data.export_date}"])
    writer.writerow([f"Période: {data.date_range}"])
    writer.writerow([f"Objectif Protéines: {_number(data.protein_goal)}g/jour"])
    writer.writerow([f"Objectif Calories: {_number(data.calorie_goal)} cal/jour"])
    writer.writerow([])

    stats = data.stats
    writer.writerow(["RÉSUMÉ"])
    writer.writerow(["Total repas", stats.total_meals])
    writer.writerow(["Total protéines", f"{stats.total_protein}g"])
    writer.writerow(["Total calories", f"{stats.total_calories} cal"])
    writer.writerow(["Moyenne protéines/jour", f"{stats.average_protein}g"])
    writer.writerow(["Moyenne calories/jour", f"{stats.average_calories} cal"])
    writer.writerow(["Jours actifs", stats.active_days])
    writer.writerow([])

    if data.meals:
        writer.writerow(["REPAS"])
        writer.writerow(
            [
                "Date",
                "Heure",
                "Description",
                "Protéines (g)",
                "Calories",
                "Source",
                "IA",
            ]
        )
        for meal in data.meals:
            moment = meal.local_timestamp(data.timezone)
            writer.writerow(
                [
                    moment.strftime("%d/%m/%Y"),
                    moment.strftime("%H:%M"),
                    meal.description,
                    _number(meal.protein),
                    _number(meal.calories or 0),
                    meal.source or "Inconnu",
                    "Oui" if meal.ai_estimated else "Non",
                ]
            )
        writer.writerow([])

    summary = data.summary
    if summary is not None:
        writer.writerow(["ANALYSE DÉTAILLÉE"])
        writer.writerow(["Période", summary.label])
        writer.writerow(["Jours totaux", summary.total_days])
        writer.writerow(["Jours actifs", summary.active_days])
        writer.writerow(["Protéines max/jour", f"{summary.max_protein}g"])
        writer.writerow(["Protéines min/jour", f"{summary.min_protein}g"])
        writer.writerow(
            ["Objectif protéines atteint", f"{summary.protein_goal_achieved} jours"]
        )
        writer.writerow(["Tendance protéines", summary.protein_trend])
        writer.writerow(["Repas matin", summary.meal_frequency.morning])
        writer.writerow(["Repas après-midi", summary.meal_frequency.afternoon])
        writer.writerow(["Repas soir", summary.meal_frequency.evening])
        writer.writerow(["Repas nuit", summary.meal_frequency.night])
    return out.getvalue()


def render_html(data: ExportData) -> str:
    """Render the export as a standalone HTML report meant for printing."""
    stats = data.stats
    sections = [
        _stat_grid(
            "Résumé des Objectifs",
            [
                ("Objectif Protéines", f"{_number(data.protein_goal)}g/jour"),
                ("Objectif Calories", f"{_number(data.calorie_goal)} cal/jour"),
            ],
        ),
        _stat_grid(
            "Statistiques de la Période",
            [
                ("Total Repas", str(stats.total_meals)),
                ("Total Protéines", f"{stats.total_protein}g"),
                ("Moyenne Protéines/jour", f"{stats.average_protein}g"),
                ("Jours Actifs", str(stats.active_days)),
            ],
        ),
    ]

    if data.meals:
        rows = []
        for meal in data.meals:
            moment = meal.local_timestamp(data.timezone)
            source = meal.source or "Inconnu"
            if meal.ai_estimated:
                source += " (IA)"
            calories = _number(meal.calories) if meal.calories else "-"
            cells = [
                moment.strftime("%d/%m/%Y"),
                moment.strftime("%H:%M"),
                meal.description,
                _number(meal.protein),
                calories,
                source,
            ]
            row = "".join(f"<td>{escape(cell)}</td>" for cell in cells)
            rows.append(f"<tr>{row}</tr>")
        sections.append(
            '<div class="section"><h2>Historique des Repas</h2><table><thead><tr>'
            "<th>Date</th><th>Heure</th><th>Description</th>"
            "<th>Protéines (g)</th><th>Calories</th><th>Source</th>"
            "</tr></thead><tbody>" + "".join(rows) + "</tbody></table></div>"
        )

    summary = data.summary
    if summary is not None:
        frequency = summary.meal_frequency
        sections.append(
            _stat_grid(
                "Analyse Détaillée",
                [
                    ("Protéines Max/Jour", f"{summary.max_protein}g"),
                    ("Protéines Min/Jour", f"{summary.min_protein}g"),
                    ("Objectif Atteint", f"{summary.protein_goal_achieved} jours"),
                    ("Tendance", summary.protein_trend),
                ],
            )
            + '<div class="section"><h3>Répartition des Repas</h3><table>'
            + _frequency_row("Matin", frequency.morning)
            + _frequency_row("Après-midi", frequency.afternoon)
            + _frequency_row("Soir", frequency.evening)
            + _frequency_row("Nuit", frequency.night)
            + "</table></div>"
        )

    name = escape(data.user_name)
    export_date = escape(data.export_date)
    return (
        _HTML_HEAD.replace("{title}", f"Données Nutritionnelles - {name}")
        + '<div class="header"><h1>Rapport Nutritionnel</h1>'
        f"<p><strong>{name}</strong></p>"
        f"<p>Exporté le {export_date}</p>"
        f"<p>Période: {escape(data.date_range)}</p></div>"
        + "".join(sections)
        + '<div class="footer">'
        f"<p>Rapport généré par Protein Tracker • {export_date}</p></div>"
        "</body></html>"
    )


def _stat_grid(title: str, items: list[tuple[str, str]]) -> str:
    cells = "".join(
        '<div class="stat-item">'
        f'<div class="stat-label">{escape(label)}</div>'
        f'<div class="stat-value">{escape(value)}</div></div>'
        for label, value in items
    )
    return (
        f'<div class="section"><h2>{escape(title)}</h2>'
        f'<div class="stats-grid">{cells}</div></div>'
    )


def _frequency_row(label: str, count: int) -> str:
    return f"<tr><td><strong>{label}</strong></td><td>{count} repas</td></tr>"


def _whole(value: float) -> int:
    return int(safe_round(value, 0))


def _number(value: float | None) -> str:
    if value is None:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


_HTML_HEAD = """<!doctype html>
<html lang="fr">
  <head>
    <meta charset="utf-8" />
    <title>{title}</title>
    <style>
      body { font-family: Arial, sans-serif; margin: 20px; color: #333; }
      .header { text-align: center; margin-bottom: 30px; }
      .header h1 { color: #3b82f6; }
      .section { margin-bottom: 30px; page-break-inside: avoid; }
      table { width: 100%; border-collapse: collapse; margin-top: 10px; }
      th, td { border: 1px solid #d1d5db; padding: 8px; font-size: 12px; }
      th { background-color: #f3f4f6; }
      .stats-grid { display: grid; grid-template-columns: 1fr 1fr; gap: 20px; }
      .stat-item { border: 1px solid #e5e7eb; padding: 15px; border-radius: 8px; }
      .stat-label { font-size: 14px; color: #6b7280; }
      .stat-value { font-size: 18px; font-weight: bold; }
      .footer { text-align: center; color: #6b7280; font-size: 12px; }
      @media print { body { margin: 0; } }
    </style>
  </head>
  <body>
"""
