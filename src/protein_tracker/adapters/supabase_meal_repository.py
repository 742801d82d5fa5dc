"""Supabase repository for meal entries."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from protein_tracker.domain.meals import MealRecord
from protein_tracker.services.meals import MealRepository

MEAL_COLUMNS = (
    "id, description, meal_timestamp, protein_grams, calories, "
    "source_type, ai_estimated"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal entries."""

    client: Client

    def create_meal(self, user_id: UUID, meal: MealRecord) -> MealRecord:
        """Insert a meal row and return the stored record."""
        response = (
            self.client.table("meal_entries")
            .insert(meal_to_row(user_id, meal))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal entry")
        return meal_from_row(response.data[0])

    def get_meal(self, user_id: UUID, meal_id: str) -> MealRecord | None:
        """Return a meal owned by the user."""
        response = (
            self.client.table("meal_entries")
            .select(MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("id", meal_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return meal_from_row(response.data[0])

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        """Return the most recent meals for a user."""
        response = (
            self.client.table("meal_entries")
            .select(MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .order("meal_timestamp", desc=True)
            .limit(limit)
            .execute()
        )
        return [meal_from_row(row) for row in response.data or []]

    def delete_meal(self, user_id: UUID, meal_id: str) -> bool:
        """Delete one meal and report whether a row was removed."""
        response = (
            self.client.table("meal_entries")
            .delete()
            .eq("user_id", str(user_id))
            .eq("id", meal_id)
            .execute()
        )
        return bool(response.data)

    def delete_all_meals(self, user_id: UUID) -> int:
        """Delete every meal of the user."""
        response = (
            self.client.table("meal_entries")
            .delete()
            .eq("user_id", str(user_id))
            .execute()
        )
        return len(response.data or [])


def meal_to_row(user_id: UUID, meal: MealRecord) -> dict[str, object]:
    return {
        "user_id": str(user_id),
        "description": meal.description,
        "meal_timestamp": meal.timestamp.isoformat(),
        "protein_grams": meal.protein,
        "calories": meal.calories,
        "source_type": meal.source or "manual",
        "ai_estimated": meal.ai_estimated,
    }


def meal_from_row(row: dict[str, object]) -> MealRecord:
    """Map a ``meal_entries`` row onto a coerced MealRecord."""
    return MealRecord.coerce(
        {
            "id": row.get("id"),
            "timestamp": row.get("meal_timestamp"),
            "protein": row.get("protein_grams"),
            "calories": row.get("calories"),
            "description": row.get("description"),
            "source": row.get("source_type"),
            "ai_estimated": row.get("ai_estimated"),
        }
    )
