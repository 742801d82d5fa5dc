"""User settings service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from protein_tracker.domain.models import UserGoals
from protein_tracker.domain.numbers import is_positive_number, safe_number


class UserSettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def get_settings(self, user_id: UUID) -> dict[str, object] | None:
        """Return the raw settings row for a user, if any."""

    def upsert_settings(self, user_id: UUID, values: dict[str, object]) -> None:
        """Create or update settings for a user."""


@dataclass
class UserSettingsService:
    """Service for goals and timezone preferences."""

    repository: UserSettingsRepository
    default_protein_goal: float = 120
    default_calorie_goal: float = 2000
    default_timezone: str = "UTC"

    def get_goals(self, user_id: UUID) -> UserGoals:
        """Return stored goals, falling back to defaults for unset values."""
        row = self.repository.get_settings(user_id) or {}
        protein_goal = safe_number(row.get("protein_goal"))
        calorie_goal = safe_number(row.get("calorie_goal"))
        timezone = row.get("timezone")
        return UserGoals(
            protein_goal=protein_goal or self.default_protein_goal,
            calorie_goal=calorie_goal or self.default_calorie_goal,
            timezone=(
                timezone
                if isinstance(timezone, str) and is_valid_timezone(timezone)
                else self.default_timezone
            ),
        )

    def set_goals(
        self,
        user_id: UUID,
        protein_goal: float | None = None,
        calorie_goal: float | None = None,
        timezone: str | None = None,
    ) -> UserGoals:
        """Persist the provided values and return the resulting goals."""
        values: dict[str, object] = {}
        if protein_goal is not None:
            if not is_positive_number(protein_goal, allow_zero=False):
                raise ValueError("Protein goal must be a positive number")
            values["protein_goal"] = safe_number(protein_goal)
        if calorie_goal is not None:
            if not is_positive_number(calorie_goal, allow_zero=False):
                raise ValueError("Calorie goal must be a positive number")
            values["calorie_goal"] = safe_number(calorie_goal)
        if timezone is not None:
            if not is_valid_timezone(timezone):
                raise ValueError(f"Unknown timezone: {timezone}")
            values["timezone"] = timezone
        if values:
            self.repository.upsert_settings(user_id, values)
        return self.get_goals(user_id)

    def get_zone(self, user_id: UUID) -> ZoneInfo:
        """Return the user's timezone as a ZoneInfo."""
        return ZoneInfo(self.get_goals(user_id).timezone)


def is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True
