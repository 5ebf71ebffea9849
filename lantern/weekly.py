"""Weekly council records and the weekly distance aggregation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from journey.clock import total_weeks, week_for_date

from .daily import DailyRecord
from .schema import as_float, as_flag, as_int, as_text, check_keys, clamp, flag_text
from .store import KeyValueStore, read_collection, upsert_item

logger = logging.getLogger(__name__)

WEEKLY_STORAGE_KEY = "shared-lantern-weekly-summary"

WEEKLY_FIELDS = (
    "week",
    "resolved_conflicts",
    "unresolved_conflicts",
    "lantern_elf",
    "lantern_hobbit",
    "morale_elf",
    "morale_hobbit",
    "worked_well",
    "ceasefire_compliance",
    "distance",
    "story_notes",
    "story_event",
)

RATING_MIN = 1
RATING_MAX = 5


def _rating(value: float) -> float:
    return clamp(value, RATING_MIN, RATING_MAX)


@dataclass(frozen=True)
class WeeklyRecord:
    """One weekly council; at most one per week number."""

    week: int
    resolved_conflicts: int = 0
    unresolved_conflicts: int = 0
    lantern_elf: int = 3  # sense of safety, 1-5
    lantern_hobbit: int = 3
    morale_elf: int = 3  # overall tone, 1-5
    morale_hobbit: int = 3
    worked_well: bool = True
    ceasefire_compliance: float = 1.0  # 0-1
    distance: int = 0
    story_notes: str = ""
    story_event: str = ""

    @property
    def lantern_average(self) -> float:
        return (_rating(self.lantern_elf) + _rating(self.lantern_hobbit)) / 2

    @property
    def morale_average(self) -> float:
        return (_rating(self.morale_elf) + _rating(self.morale_hobbit)) / 2

    def normalized(self, weeks: int | None = None) -> WeeklyRecord:
        """Copy with every numeric field clamped into its valid range."""
        week = max(1, self.week)
        if weeks is not None:
            week = min(week, max(1, weeks))
        return replace(
            self,
            week=week,
            resolved_conflicts=max(0, self.resolved_conflicts),
            unresolved_conflicts=max(0, self.unresolved_conflicts),
            lantern_elf=int(_rating(self.lantern_elf)),
            lantern_hobbit=int(_rating(self.lantern_hobbit)),
            morale_elf=int(_rating(self.morale_elf)),
            morale_hobbit=int(_rating(self.morale_hobbit)),
            ceasefire_compliance=clamp(self.ceasefire_compliance, 0.0, 1.0),
        )

    @classmethod
    def from_dict(cls, data: Any) -> WeeklyRecord:
        data = check_keys(data, WEEKLY_FIELDS)
        return cls(
            week=as_int(data["week"], "week"),
            resolved_conflicts=as_int(data["resolved_conflicts"], "resolved_conflicts"),
            unresolved_conflicts=as_int(data["unresolved_conflicts"], "unresolved_conflicts"),
            lantern_elf=as_int(data["lantern_elf"], "lantern_elf"),
            lantern_hobbit=as_int(data["lantern_hobbit"], "lantern_hobbit"),
            morale_elf=as_int(data["morale_elf"], "morale_elf"),
            morale_hobbit=as_int(data["morale_hobbit"], "morale_hobbit"),
            worked_well=as_flag(data["worked_well"], "worked_well"),
            ceasefire_compliance=as_float(data["ceasefire_compliance"], "ceasefire_compliance"),
            distance=as_int(data["distance"], "distance"),
            story_notes=as_text(data["story_notes"], "story_notes"),
            story_event=as_text(data["story_event"], "story_event"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "week": self.week,
            "resolved_conflicts": self.resolved_conflicts,
            "unresolved_conflicts": self.unresolved_conflicts,
            "lantern_elf": self.lantern_elf,
            "lantern_hobbit": self.lantern_hobbit,
            "morale_elf": self.morale_elf,
            "morale_hobbit": self.morale_hobbit,
            "worked_well": flag_text(self.worked_well),
            "ceasefire_compliance": self.ceasefire_compliance,
            "distance": self.distance,
            "story_notes": self.story_notes,
            "story_event": self.story_event,
        }


def compute_distance_for_week(
    week: int,
    daily_records: Iterable[DailyRecord],
    start_date: date,
    total_days: int,
) -> int:
    """Sum of daily points for the records dated inside ``week``."""
    return sum(
        record.score
        for record in daily_records
        if week_for_date(record.date, start_date, total_days) == week
    )


def refresh_distance(
    record: WeeklyRecord,
    daily_records: Iterable[DailyRecord],
    start_date: date,
    total_days: int,
) -> WeeklyRecord:
    """Copy of ``record`` with distance recomputed from the daily log."""
    distance = compute_distance_for_week(record.week, daily_records, start_date, total_days)
    return replace(record, distance=distance)


def resolve_ratio(record: WeeklyRecord) -> float | None:
    """Share of the week's conflicts that were resolved; None if there were none."""
    resolved = max(0, record.resolved_conflicts)
    total = resolved + max(0, record.unresolved_conflicts)
    if total == 0:
        return None
    return resolved / total


def load_all_weekly(store: KeyValueStore) -> list[WeeklyRecord]:
    return read_collection(store, WEEKLY_STORAGE_KEY, WeeklyRecord.from_dict)


def get_weekly(store: KeyValueStore, week: int) -> WeeklyRecord | None:
    for record in load_all_weekly(store):
        if record.week == week:
            return record
    return None


def latest_weekly(records: Iterable[WeeklyRecord]) -> WeeklyRecord | None:
    """Record with the highest week number, regardless of save order."""
    return max(records, key=lambda r: r.week, default=None)


def upsert_weekly(store: KeyValueStore, record: WeeklyRecord, total_days: int | None = None) -> WeeklyRecord:
    """Save ``record``, replacing any entry for the same week."""
    weeks = total_weeks(total_days) if total_days is not None else None
    record = record.normalized(weeks)
    upsert_item(
        store,
        WEEKLY_STORAGE_KEY,
        record,
        identity=lambda r: r.week,
        decode=WeeklyRecord.from_dict,
        encode=WeeklyRecord.to_dict,
    )
    logger.info("Saved weekly council for week %d (distance=%d)", record.week, record.distance)
    return record
