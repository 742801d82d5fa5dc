"""Total coercion helpers for loosely-typed numbers and dates.

Meal data arrives from forms, AI extraction and JSON rows, so every value is
treated as untrusted. None of these helpers raise: a value that cannot be
read as a finite number or a valid date falls back to the given default.
"""

import math
import re
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_valid_number(value: object) -> bool:
    """Return True for finite real numbers (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, int | float | Decimal):
        return False
    try:
        return math.isfinite(value)
    except (OverflowError, ValueError):
        return False


def safe_number(value: object, default: float = 0) -> float:
    """Return ``value`` as a finite float, or ``default``.

    Strings are trimmed and read by their leading numeric prefix, so
    ``"12.5g"`` gives 12.5 and ``"abc"`` gives the default.
    """
    if is_valid_number(value):
        return float(value)  # type: ignore[arg-type]
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value.strip())
        if match:
            parsed = float(match.group(0))
            if math.isfinite(parsed):
                return parsed
    return default


def safe_sum(*values: object) -> float:
    """Add values after coercing each one with :func:`safe_number`."""
    return sum((safe_number(value) for value in values), 0.0)


def safe_average(*values: object) -> float:
    """Average the non-zero coerced values, 0 when none remain."""
    numbers = [number for number in map(safe_number, values) if number != 0]
    if not numbers:
        return 0
    return sum(numbers) / len(numbers)


def safe_round(value: object, decimals: int = 1) -> float:
    """Round half away from zero after coercion."""
    number = safe_number(value)
    try:
        rounded = Decimal(str(number)).quantize(
            Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP
        )
    except InvalidOperation:
        # Too many digits for the requested precision; nothing to round.
        return number
    return float(rounded)


def is_positive_number(value: object, allow_zero: bool = True) -> bool:
    """Return True when the coerced value is positive (or zero if allowed)."""
    number = safe_number(value, -1)
    return number >= 0 if allow_zero else number > 0


def sanitize_numeric_mapping(
    mapping: Mapping[str, object], keys: Iterable[str]
) -> dict[str, object]:
    """Return a copy of ``mapping`` with the given keys coerced to numbers."""
    result = dict(mapping)
    for key in keys:
        if key in result:
            result[key] = safe_number(result[key])
    return result


def safe_date(value: object, default: datetime | None = None) -> datetime:
    """Return ``value`` as a datetime, or ``default`` (now, UTC).

    Accepts datetimes, dates (midnight), ISO-8601 strings and epoch
    milliseconds.
    """
    fallback = default if default is not None else datetime.now(tz=UTC)
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return fallback
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return fallback
    if is_valid_number(value):
        try:
            seconds = float(value) / 1000  # type: ignore[arg-type]
            return datetime.fromtimestamp(seconds, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return fallback
    return fallback


def is_valid_date(value: object) -> bool:
    """Return True when :func:`safe_date` can read ``value`` without fallback."""
    if isinstance(value, date):
        return True
    marker = datetime.now(tz=UTC)
    return safe_date(value, default=marker) is not marker
