"""Tests for data exports."""

import csv
import io
from datetime import UTC, date, datetime

import pytest

from protein_tracker.containers import AppContainer
from protein_tracker.domain.dates import InvalidPeriodError
from protein_tracker.domain.meals import MealRecord
from protein_tracker.domain.models import Principal
from protein_tracker.services.exports import ExportOptions, calculate_export_stats
from tests.conftest import InMemoryMealRepository

NOW = datetime(2024, 1, 8, 9, 30, tzinfo=UTC)


@pytest.fixture
def populated(
    meal_repository: InMemoryMealRepository, principal: Principal
) -> InMemoryMealRepository:
    meal_repository.add(
        principal.id,
        MealRecord(
            timestamp=datetime(2024, 1, 3, 19, tzinfo=UTC),
            protein=40,
            calories=600,
            description="Poulet <grillé>",
            source="photo",
            ai_estimated=True,
        ),
    )
    meal_repository.add(
        principal.id,
        MealRecord(
            timestamp=datetime(2024, 1, 1, 8, tzinfo=UTC),
            protein=30,
            calories=400,
            description="Omelette",
        ),
    )
    meal_repository.add(
        principal.id,
        MealRecord(timestamp=datetime(2024, 1, 1, 13, tzinfo=UTC), protein=25.5),
    )
    return meal_repository


def _rows(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


def test_export_stats_average_over_active_days() -> None:
    meals = [
        MealRecord(timestamp=datetime(2024, 1, 1, 8, tzinfo=UTC), protein=30),
        MealRecord(timestamp=datetime(2024, 1, 1, 12, tzinfo=UTC), protein=25),
        MealRecord(
            timestamp=datetime(2024, 1, 3, 19, tzinfo=UTC), protein=40, calories=601
        ),
    ]

    stats = calculate_export_stats(meals)

    assert stats.total_meals == 3
    assert stats.total_protein == 95
    assert stats.average_protein == 48
    assert stats.average_calories == 301
    assert stats.active_days == 2
    assert calculate_export_stats([]).average_protein == 0


def test_csv_export_sections(
    container: AppContainer, principal: Principal, populated: InMemoryMealRepository
) -> None:
    document = container.export_service.export(
        principal,
        ExportOptions(start=date(2024, 1, 1), end=date(2024, 1, 7)),
        now=NOW,
    )

    rows = _rows(document.content)
    assert document.filename == "nutrition-data-2024-01-08.csv"
    assert document.media_type.startswith("text/csv")
    assert rows[0] == ["Données Nutritionnelles - alice@example.com"]
    assert rows[1] == ["Exporté le: 08/01/2024 à 09:30"]
    assert rows[2] == ["Période: 01/01/2024 - 07/01/2024"]
    assert ["Total protéines", "96g"] in rows
    assert ["Jours actifs", "2"] in rows
    meal_rows = rows[rows.index(["REPAS"]) + 2 :]
    assert meal_rows[0][:4] == ["01/01/2024", "08:00", "Omelette", "30"]
    assert meal_rows[1][3] == "25.5"
    assert meal_rows[1][5] == "Inconnu"
    assert meal_rows[2][-1] == "Oui"
    assert ["Période", "1/1 - 7/1"] in rows
    assert ["Repas matin", "1"] in rows


def test_csv_export_respects_options(
    container: AppContainer, principal: Principal, populated: InMemoryMealRepository
) -> None:
    document = container.export_service.export(
        principal,
        ExportOptions(
            start=date(2024, 1, 1),
            end=date(2024, 1, 7),
            include_meals=False,
            include_summary=False,
            include_personal_info=False,
        ),
        now=NOW,
    )

    rows = _rows(document.content)
    assert rows[0] == ["Données Nutritionnelles"]
    assert ["REPAS"] not in rows
    assert ["ANALYSE DÉTAILLÉE"] not in rows
    assert ["Total repas", "3"] in rows


def test_html_export_escapes_content(
    container: AppContainer, principal: Principal, populated: InMemoryMealRepository
) -> None:
    document = container.export_service.export(
        principal,
        ExportOptions(start=date(2024, 1, 1), end=date(2024, 1, 7), format="html"),
        now=NOW,
    )

    assert document.filename == "nutrition-data-2024-01-08.html"
    assert document.media_type.startswith("text/html")
    assert "<title>Données Nutritionnelles - alice@example.com</title>" in (
        document.content
    )
    assert "Poulet &lt;grillé&gt;" in document.content
    assert "image (IA)" in document.content
    assert "Répartition des Repas" in document.content


def test_export_rejects_bad_ranges(
    container: AppContainer, principal: Principal
) -> None:
    with pytest.raises(InvalidPeriodError):
        container.export_service.export(
            principal, ExportOptions(start=date(2024, 2, 1), end=date(2024, 1, 1))
        )
    with pytest.raises(InvalidPeriodError):
        container.export_service.export(
            principal, ExportOptions(start=date(2022, 1, 1), end=date(2024, 1, 1))
        )
