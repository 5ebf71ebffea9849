"""Journey clock: elapsed days, week index and progress fraction.

The clock never reads the system time; callers pass ``now`` in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime


DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class JourneyState:
    elapsed_days: int = 0
    week_index: int = 0
    progress: float = 0.0


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_date(value: str) -> date | None:
    """Parse ``YYYY-MM-DD`` (or a full ISO timestamp); None if unparseable."""
    if not value:
        return None
    raw = value.strip()
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def _normalize_total(total_days: int) -> int:
    return max(1, int(total_days))


def total_weeks(total_days: int) -> int:
    """Number of council weeks; leftover days fold into the last week."""
    return max(1, _normalize_total(total_days) // DAYS_PER_WEEK)


def compute_journey_state(
    now: date | datetime,
    start_date: date | datetime,
    total_days: int,
) -> JourneyState:
    """Derive the journey state for ``now``; day one includes the start date."""
    today = _as_date(now)
    start = _as_date(start_date)
    total = _normalize_total(total_days)

    if today < start:
        return JourneyState()

    elapsed = min(total, (today - start).days + 1)
    week = min(math.ceil(elapsed / DAYS_PER_WEEK), total_weeks(total)) if elapsed > 0 else 0
    return JourneyState(elapsed_days=elapsed, week_index=week, progress=elapsed / total)


def week_for_date(day: date | datetime, start_date: date | datetime, total_days: int) -> int | None:
    """Week number a calendar date falls in, or None outside the journey."""
    offset = (_as_date(day) - _as_date(start_date)).days
    total = _normalize_total(total_days)
    if offset < 0 or offset >= total:
        return None
    week = offset // DAYS_PER_WEEK + 1
    return min(total_weeks(total), max(1, week))


def day_label(elapsed_days: int, total_days: int) -> str:
    """Human-facing status line, e.g. "Day 3 of 90".

    The day shown is clamped to [1, total] so a journey that has not yet
    started still reads "Day 1".
    """
    total = _normalize_total(total_days)
    return f"Day {min(total, max(1, elapsed_days))} of {total}"
