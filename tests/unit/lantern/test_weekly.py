"""Tests for weekly council records and distance."""

from __future__ import annotations

import json
from datetime import date, timedelta

from lantern.daily import DailyRecord
from lantern.store import MemoryStore
from lantern.weekly import (
    WEEKLY_STORAGE_KEY,
    WeeklyRecord,
    compute_distance_for_week,
    get_weekly,
    latest_weekly,
    load_all_weekly,
    refresh_distance,
    resolve_ratio,
    upsert_weekly,
)

START = date(2025, 11, 16)


def _day(offset: int, light: int) -> DailyRecord:
    return DailyRecord(date=START + timedelta(days=offset), tokens_of_light=light)


def test_distance_sums_only_days_inside_the_week():
    daily = [_day(-1, 10), _day(0, 1), _day(6, 2), _day(7, 4), _day(90, 8)]
    assert compute_distance_for_week(1, daily, START, 90) == 3
    assert compute_distance_for_week(2, daily, START, 90) == 4
    assert compute_distance_for_week(3, daily, START, 90) == 0


def test_trailing_days_count_toward_the_last_week():
    daily = [_day(80, 1), _day(84, 2), _day(89, 3)]
    assert compute_distance_for_week(12, daily, START, 90) == 6


def test_distance_can_be_negative():
    daily = [DailyRecord(date=START, shadows=2)]
    assert compute_distance_for_week(1, daily, START, 90) == -2


def test_refresh_distance_overwrites_stored_value():
    record = WeeklyRecord(week=1, distance=42)
    assert refresh_distance(record, [_day(2, 3)], START, 90).distance == 3


def test_averages_clamp_ratings():
    record = WeeklyRecord(week=1, lantern_elf=9, lantern_hobbit=0, morale_elf=4, morale_hobbit=5)
    assert record.lantern_average == 3.0
    assert record.morale_average == 4.5


def test_normalized_clamps_fields():
    record = WeeklyRecord(
        week=20,
        resolved_conflicts=-1,
        lantern_elf=7,
        morale_hobbit=0,
        ceasefire_compliance=1.5,
    ).normalized(weeks=12)
    assert record.week == 12
    assert record.resolved_conflicts == 0
    assert record.lantern_elf == 5
    assert record.morale_hobbit == 1
    assert record.ceasefire_compliance == 1.0


def test_resolve_ratio():
    assert resolve_ratio(WeeklyRecord(week=1, resolved_conflicts=3, unresolved_conflicts=1)) == 0.75
    assert resolve_ratio(WeeklyRecord(week=1)) is None


def test_upsert_replaces_same_week():
    store = MemoryStore()
    upsert_weekly(store, WeeklyRecord(week=2, story_notes="first"))
    upsert_weekly(store, WeeklyRecord(week=1))
    upsert_weekly(store, WeeklyRecord(week=2, story_notes="second"))

    records = load_all_weekly(store)
    assert [r.week for r in records] == [1, 2]
    assert get_weekly(store, 2).story_notes == "second"
    assert get_weekly(store, 5) is None


def test_upsert_clamps_week_to_journey_length():
    store = MemoryStore()
    saved = upsert_weekly(store, WeeklyRecord(week=30), total_days=90)
    assert saved.week == 12


def test_latest_weekly_uses_highest_week_not_save_order():
    store = MemoryStore()
    upsert_weekly(store, WeeklyRecord(week=3, lantern_elf=5))
    upsert_weekly(store, WeeklyRecord(week=1))
    assert latest_weekly(load_all_weekly(store)).week == 3
    assert latest_weekly([]) is None


def test_round_trip_preserves_fields():
    store = MemoryStore()
    record = WeeklyRecord(
        week=4,
        resolved_conflicts=2,
        unresolved_conflicts=1,
        lantern_elf=4,
        lantern_hobbit=5,
        morale_elf=3,
        morale_hobbit=2,
        worked_well=False,
        ceasefire_compliance=0.5,
        distance=7,
        story_notes="A quiet week.",
        story_event="Crossed the river.",
    )
    upsert_weekly(store, record)
    assert load_all_weekly(store) == [record]
    assert json.loads(store.get(WEEKLY_STORAGE_KEY))[0]["worked_well"] == "no"


def test_unknown_field_makes_collection_empty():
    raw = WeeklyRecord(week=1).to_dict()
    raw["extra"] = 1
    store = MemoryStore({WEEKLY_STORAGE_KEY: json.dumps([raw])})
    assert load_all_weekly(store) == []


def test_out_of_range_number_makes_collection_empty():
    raw = WeeklyRecord(week=1).to_dict()
    raw["ceasefire_compliance"] = 10**400
    store = MemoryStore({WEEKLY_STORAGE_KEY: json.dumps([raw])})
    assert load_all_weekly(store) == []
