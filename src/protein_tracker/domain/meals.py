"""Meal records as they cross the system boundary."""

from collections.abc import Mapping
from datetime import UTC, datetime, tzinfo
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from protein_tracker.domain.numbers import safe_date, safe_number

_TRUTHY = {"1", "true", "yes", "oui"}

SourceType = Literal[
    "manual", "voice", "text", "image", "ai_scan", "favorite", "import"
]

_SOURCE_TYPES = frozenset(get_args(SourceType))
_SOURCE_ALIASES = {
    "photo": "image",
    "ai_photo": "ai_scan",
    "barcode": "import",
    "barcode_scan": "import",
}


class MealRecord(BaseModel):
    """A logged meal with coerced numeric and date fields.

    Validation never fails on the nutrition fields: malformed protein falls
    back to 0, malformed calories to 0 (``None`` stays unknown) and a
    malformed timestamp to the current time.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    protein: float = 0
    calories: float | None = None
    description: str = ""
    source: SourceType | None = None
    ai_estimated: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _optional_text(cls, value: object) -> str | None:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("source", mode="before")
    @classmethod
    def _source(cls, value: object) -> str | None:
        """Map entry channels onto the stored source types; unknown gives None."""
        if value is None:
            return None
        name = str(value).strip().lower()
        name = _SOURCE_ALIASES.get(name, name)
        return name if name in _SOURCE_TYPES else None

    @field_validator("description", mode="before")
    @classmethod
    def _text(cls, value: object) -> str:
        return "" if value is None else str(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp(cls, value: object) -> datetime:
        return safe_date(value)

    @field_validator("protein", mode="before")
    @classmethod
    def _protein(cls, value: object) -> float:
        return safe_number(value)

    @field_validator("calories", mode="before")
    @classmethod
    def _calories(cls, value: object) -> float | None:
        if value is None:
            return None
        return safe_number(value)

    @field_validator("ai_estimated", mode="before")
    @classmethod
    def _flag(cls, value: object) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    @classmethod
    def coerce(cls, raw: object) -> "MealRecord":
        """Build a record from a record, a mapping, or anything else."""
        if isinstance(raw, MealRecord):
            return raw
        if isinstance(raw, Mapping):
            return cls.model_validate(dict(raw))
        return cls()

    def local_timestamp(self, tz: tzinfo | None = None) -> datetime:
        """Return the timestamp in ``tz``; naive timestamps are already local."""
        if tz is None or self.timestamp.tzinfo is None:
            return self.timestamp
        return self.timestamp.astimezone(tz)
