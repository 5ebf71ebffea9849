"""Field coercion shared by the daily and weekly record codecs."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

YES = "yes"
NO = "no"


class MalformedRecordError(ValueError):
    """Raised when a stored record does not match the expected schema."""

    def __init__(self, message: str, field: str = ""):
        self.field = field
        super().__init__(message)


def check_keys(data: Any, expected: Iterable[str]) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise MalformedRecordError(f"Expected an object, got {type(data).__name__}")
    wanted = set(expected)
    missing = sorted(wanted - set(data))
    unknown = sorted(set(data) - wanted)
    if missing:
        raise MalformedRecordError(f"Missing fields: {', '.join(missing)}", field=missing[0])
    if unknown:
        raise MalformedRecordError(f"Unknown fields: {', '.join(unknown)}", field=unknown[0])
    return data


def as_int(value: Any, field: str) -> int:
    # bool is an int subclass; a stray true/false is not a count.
    if isinstance(value, bool):
        raise MalformedRecordError(f"{field} must be a number", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise MalformedRecordError(f"{field} must be an integer, got {value!r}", field=field)


def as_float(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedRecordError(f"{field} must be a number, got {value!r}", field=field)
    try:
        return float(value)
    except OverflowError as exc:
        raise MalformedRecordError(f"{field} is out of range", field=field) from exc


def as_flag(value: Any, field: str) -> bool:
    if value == YES:
        return True
    if value == NO:
        return False
    raise MalformedRecordError(f"{field} must be 'yes' or 'no', got {value!r}", field=field)


def as_text(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise MalformedRecordError(f"{field} must be text, got {value!r}", field=field)
    return value


def as_date(value: Any, field: str) -> date:
    if not isinstance(value, str):
        raise MalformedRecordError(f"{field} must be a YYYY-MM-DD string", field=field)
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise MalformedRecordError(f"{field} is not a valid date: {value!r}", field=field) from exc


def flag_text(value: bool) -> str:
    return YES if value else NO


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
