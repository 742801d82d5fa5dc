"""Domain models for the protein tracker."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Principal:
    """Authenticated user as returned by the identity provider."""

    id: UUID
    email: str | None = None


@dataclass(frozen=True)
class UserGoals:
    """Daily targets and timezone used for a user's summaries."""

    protein_goal: float
    calorie_goal: float
    timezone: str
