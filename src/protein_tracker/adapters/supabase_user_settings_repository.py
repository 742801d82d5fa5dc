"""Supabase repository for user settings."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from protein_tracker.services.user_settings import UserSettingsRepository

_COLUMNS = {
    "protein_goal": "daily_protein_goal",
    "calorie_goal": "daily_calorie_goal",
    "timezone": "timezone",
}


@dataclass
class SupabaseUserSettingsRepository(UserSettingsRepository):
    """Supabase implementation backed by the ``user_profiles`` table."""

    client: Client

    def get_settings(self, user_id: UUID) -> dict[str, object] | None:
        """Return the stored goals and timezone for a user."""
        response = (
            self.client.table("user_profiles")
            .select("daily_protein_goal, daily_calorie_goal, timezone")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return {key: row.get(column) for key, column in _COLUMNS.items()}

    def upsert_settings(self, user_id: UUID, values: dict[str, object]) -> None:
        """Create or update the user's profile row."""
        payload: dict[str, object] = {
            _COLUMNS[key]: value for key, value in values.items() if key in _COLUMNS
        }
        payload["user_id"] = str(user_id)
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        self.client.table("user_profiles").upsert(
            payload, on_conflict="user_id"
        ).execute()
