"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from protein_tracker.domain.meals import MealRecord
from protein_tracker.services.user_settings import UserSettingsService

logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meal entries."""

    def create_meal(self, user_id: UUID, meal: MealRecord) -> MealRecord:
        """Insert a meal and return it with its id."""

    def get_meal(self, user_id: UUID, meal_id: str) -> MealRecord | None:
        """Return a meal owned by the user."""

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        """Return the most recent meals, newest first."""

    def delete_meal(self, user_id: UUID, meal_id: str) -> bool:
        """Delete a meal, returning False when it did not exist."""

    def delete_all_meals(self, user_id: UUID) -> int:
        """Delete every meal of the user and return how many were removed."""


@dataclass
class MealService:
    """Service that records and removes meals."""

    repository: MealRepository
    user_settings_service: UserSettingsService

    def log_meal(
        self, user_id: UUID, meal: MealRecord, logged_at: datetime | None = None
    ) -> MealRecord:
        """Persist a meal, optionally overriding its timestamp.

        A timestamp without timezone is read as the user's local time.
        """
        timestamp = logged_at if logged_at is not None else meal.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(
                tzinfo=self.user_settings_service.get_zone(user_id)
            )
        saved = self.repository.create_meal(
            user_id, meal.model_copy(update={"id": None, "timestamp": timestamp})
        )
        logger.info("Meal logged: user_id=%s meal_id=%s", user_id, saved.id)
        return saved

    def get_meal(self, user_id: UUID, meal_id: str) -> MealRecord | None:
        return self.repository.get_meal(user_id, meal_id)

    def list_meals(self, user_id: UUID, limit: int = 50) -> list[MealRecord]:
        """Return recent meals, newest first."""
        return self.repository.list_recent_meals(user_id, limit)

    def delete_meal(self, user_id: UUID, meal_id: str) -> bool:
        deleted = self.repository.delete_meal(user_id, meal_id)
        if deleted:
            logger.info("Meal deleted: user_id=%s meal_id=%s", user_id, meal_id)
        return deleted

    def delete_all_meals(self, user_id: UUID) -> int:
        """Remove the user's whole meal history."""
        count = self.repository.delete_all_meals(user_id)
        logger.info("Meal history deleted: user_id=%s count=%s", user_id, count)
        return count
