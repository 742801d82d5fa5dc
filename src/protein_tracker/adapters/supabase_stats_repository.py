"""Supabase repository for meal history statistics."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from protein_tracker.adapters.supabase_meal_repository import (
    MEAL_COLUMNS,
    meal_from_row,
)
from protein_tracker.domain.meals import MealRecord
from protein_tracker.services.stats import StatsRepository


@dataclass
class SupabaseStatsRepository(StatsRepository):
    """Supabase implementation for stats queries."""

    client: Client

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals in the time range, oldest first."""
        response = (
            self.client.table("meal_entries")
            .select(MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("meal_timestamp", start.isoformat())
            .lt("meal_timestamp", end.isoformat())
            .order("meal_timestamp", desc=False)
            .execute()
        )
        return [meal_from_row(row) for row in response.data or []]
