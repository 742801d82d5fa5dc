"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

import pytest

from protein_tracker.config import Settings
from protein_tracker.containers import AppContainer
from protein_tracker.domain.meals import MealRecord
from protein_tracker.domain.models import Principal
from protein_tracker.services.auth import AuthService, IdentityProvider
from protein_tracker.services.exports import ExportService
from protein_tracker.services.meals import MealRepository, MealService
from protein_tracker.services.stats import StatsRepository, StatsService
from protein_tracker.services.user_settings import (
    UserSettingsRepository,
    UserSettingsService,
)

TEST_TOKEN = "valid-token"


@dataclass
class InMemoryMealRepository(MealRepository, StatsRepository):
    """In-memory meal store shared by the meal and stats services."""

    meals: dict[str, tuple[UUID, MealRecord]] = field(default_factory=dict)
    queries: list[tuple[UUID, datetime, datetime]] = field(default_factory=list)

    def add(self, user_id: UUID, meal: MealRecord) -> MealRecord:
        return self.create_meal(user_id, meal)

    def create_meal(self, user_id: UUID, meal: MealRecord) -> MealRecord:
        saved = meal.model_copy(update={"id": str(uuid4())})
        self.meals[saved.id] = (user_id, saved)
        return saved

    def get_meal(self, user_id: UUID, meal_id: str) -> MealRecord | None:
        owner, meal = self.meals.get(meal_id, (None, None))
        return meal if owner == user_id else None

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        owned = [meal for owner, meal in self.meals.values() if owner == user_id]
        owned.sort(key=lambda meal: meal.timestamp, reverse=True)
        return owned[:limit]

    def delete_meal(self, user_id: UUID, meal_id: str) -> bool:
        if self.get_meal(user_id, meal_id) is None:
            return False
        del self.meals[meal_id]
        return True

    def delete_all_meals(self, user_id: UUID) -> int:
        owned = [key for key, (owner, _) in self.meals.items() if owner == user_id]
        for key in owned:
            del self.meals[key]
        return len(owned)

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        self.queries.append((user_id, start, end))
        return sorted(
            (
                meal
                for owner, meal in self.meals.values()
                if owner == user_id and start <= meal.timestamp < end
            ),
            key=lambda meal: meal.timestamp,
        )


@dataclass
class InMemoryUserSettingsRepository(UserSettingsRepository):
    """In-memory user settings repository for tests."""

    rows: dict[UUID, dict[str, object]] = field(default_factory=dict)

    def get_settings(self, user_id: UUID) -> dict[str, object] | None:
        row = self.rows.get(user_id)
        return dict(row) if row is not None else None

    def upsert_settings(self, user_id: UUID, values: dict[str, object]) -> None:
        self.rows.setdefault(user_id, {}).update(values)


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Accepts a fixed set of tokens."""

    principals: dict[str, Principal] = field(default_factory=dict)

    def verify(self, token: str) -> Principal | None:
        return self.principals.get(token)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def principal() -> Principal:
    return Principal(id=uuid4(), email="alice@example.com")


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def settings_repository() -> InMemoryUserSettingsRepository:
    return InMemoryUserSettingsRepository()


@pytest.fixture
def user_settings_service(
    settings_repository: InMemoryUserSettingsRepository,
) -> UserSettingsService:
    return UserSettingsService(settings_repository)


@pytest.fixture
def stats_service(
    meal_repository: InMemoryMealRepository,
    user_settings_service: UserSettingsService,
) -> StatsService:
    return StatsService(
        repository=meal_repository, user_settings_service=user_settings_service
    )


@pytest.fixture
def container(
    settings: Settings,
    principal: Principal,
    meal_repository: InMemoryMealRepository,
    user_settings_service: UserSettingsService,
    stats_service: StatsService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        auth_service=AuthService(FakeIdentityProvider({TEST_TOKEN: principal})),
        meal_service=MealService(meal_repository, user_settings_service),
        stats_service=stats_service,
        user_settings_service=user_settings_service,
        export_service=ExportService(
            stats_service=stats_service,
            user_settings_service=user_settings_service,
            max_days=settings.max_export_days,
        ),
    )
