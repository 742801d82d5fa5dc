"""Tests for meal service."""

from datetime import UTC, datetime
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest

from protein_tracker.domain.meals import MealRecord
from protein_tracker.services.meals import MealService
from protein_tracker.services.user_settings import UserSettingsService
from tests.conftest import InMemoryMealRepository, InMemoryUserSettingsRepository


def _service(
    repository: InMemoryMealRepository | None = None,
    timezones: dict[UUID, str] | None = None,
) -> MealService:
    rows = {user_id: {"timezone": tz} for user_id, tz in (timezones or {}).items()}
    return MealService(
        repository or InMemoryMealRepository(),
        UserSettingsService(InMemoryUserSettingsRepository(rows)),
    )


def test_log_meal_assigns_new_id_and_timestamp() -> None:
    repository = InMemoryMealRepository()
    service = _service(repository)
    user_id = uuid4()
    logged_at = datetime(2024, 1, 2, 12, tzinfo=UTC)

    saved = service.log_meal(
        user_id, MealRecord(id="client-id", protein=30), logged_at=logged_at
    )

    assert saved.id is not None
    assert saved.id != "client-id"
    assert saved.timestamp == logged_at
    assert service.get_meal(user_id, saved.id) == saved


def test_list_meals_newest_first() -> None:
    service = _service()
    user_id = uuid4()
    for day in (1, 3, 2):
        service.log_meal(
            user_id, MealRecord(timestamp=datetime(2024, 1, day, tzinfo=UTC))
        )

    meals = service.list_meals(user_id, limit=2)

    assert [meal.timestamp.day for meal in meals] == [3, 2]


def test_delete_meal_only_for_owner() -> None:
    service = _service()
    owner, other = uuid4(), uuid4()
    saved = service.log_meal(owner, MealRecord(protein=10))

    assert service.delete_meal(other, saved.id) is False
    assert service.delete_meal(owner, saved.id) is True
    assert service.get_meal(owner, saved.id) is None


def test_delete_all_meals_counts_rows() -> None:
    service = _service()
    user_id = uuid4()
    service.log_meal(user_id, MealRecord(protein=10))
    service.log_meal(user_id, MealRecord(protein=20))
    service.log_meal(uuid4(), MealRecord(protein=5))

    assert service.delete_all_meals(user_id) == 2
    assert service.list_meals(user_id) == []


def test_meal_record_coerces_loose_input() -> None:
    meal = MealRecord.coerce(
        {
            "timestamp": "garbage",
            "protein": "25.5g",
            "calories": "",
            "description": None,
            "aiEstimated": "oui",
        }
    )

    assert meal.protein == 25.5
    assert meal.calories == 0
    assert meal.description == ""
    assert meal.ai_estimated is True
    assert meal.timestamp.tzinfo is UTC
    assert MealRecord.coerce(None).protein == 0


def test_naive_timestamp_is_read_in_user_timezone() -> None:
    user_id = uuid4()
    service = _service(timezones={user_id: "Europe/Paris"})

    saved = service.log_meal(
        user_id, MealRecord(timestamp="2024-01-01T23:30:00", protein=20)
    )

    assert saved.timestamp.tzinfo == ZoneInfo("Europe/Paris")
    assert saved.timestamp.astimezone(UTC) == datetime(2024, 1, 1, 22, 30, tzinfo=UTC)


def test_naive_logged_at_override_is_localised() -> None:
    user_id = uuid4()
    service = _service(timezones={user_id: "America/New_York"})

    saved = service.log_meal(
        user_id, MealRecord(protein=20), logged_at=datetime(2024, 1, 2, 8)
    )

    assert saved.timestamp.astimezone(UTC) == datetime(2024, 1, 2, 13, tzinfo=UTC)


def test_aware_timestamp_is_kept() -> None:
    user_id = uuid4()
    service = _service(timezones={user_id: "Europe/Paris"})
    moment = datetime(2024, 1, 1, 23, 30, tzinfo=UTC)

    saved = service.log_meal(user_id, MealRecord(timestamp=moment))

    assert saved.timestamp == moment
    assert saved.timestamp.tzinfo is UTC


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("voice", "voice"),
        (" AI_SCAN ", "ai_scan"),
        ("photo", "image"),
        ("barcode", "import"),
        ("carrier-pigeon", None),
        (None, None),
    ],
)
def test_meal_source_maps_onto_stored_types(raw: object, expected: str | None) -> None:
    assert MealRecord.coerce({"source": raw}).source == expected
