"""Tests for the daily log and its score."""

from __future__ import annotations

import json
import logging
from datetime import date

import pytest

from lantern.daily import (
    DAILY_STORAGE_KEY,
    DailyRecord,
    compute_daily_score,
    get_daily,
    load_all_daily,
    upsert_daily,
)
from lantern.schema import MalformedRecordError
from lantern.store import UNREADABLE_SUFFIX, MemoryStore

DAY = date(2025, 11, 20)


def _payload(**overrides) -> dict:
    data = {
        "date": "2025-11-20",
        "tokens_of_light": 2,
        "shadows": 1,
        "ceasefire": "yes",
        "permission_given": 1,
        "borders_crossed": 0,
        "acts_of_restoration": "yes",
        "daily_points": 5,
    }
    data.update(overrides)
    return data


def test_score_counts_every_field():
    record = DailyRecord(
        date=DAY,
        tokens_of_light=2,
        shadows=0,
        ceasefire=True,
        permission_given=1,
        borders_crossed=1,
        acts_of_restoration=True,
    )
    assert compute_daily_score(record) == 5
    assert record.score == 5


def test_score_can_be_negative():
    assert DailyRecord(date=DAY, shadows=3, borders_crossed=1).score == -4


def test_negative_counts_are_treated_as_zero():
    record = DailyRecord(date=DAY, tokens_of_light=-2, shadows=-5)
    assert record.score == 0
    assert record.normalized().tokens_of_light == 0


def test_upsert_replaces_same_date():
    store = MemoryStore()
    upsert_daily(store, DailyRecord(date=DAY, tokens_of_light=1))
    upsert_daily(store, DailyRecord(date=date(2025, 11, 21), tokens_of_light=4))
    upsert_daily(store, DailyRecord(date=DAY, tokens_of_light=3))

    records = load_all_daily(store)
    assert [r.date for r in records] == [date(2025, 11, 21), DAY]
    assert get_daily(store, DAY).tokens_of_light == 3


def test_upsert_is_idempotent():
    store = MemoryStore()
    record = DailyRecord(date=DAY, tokens_of_light=2, ceasefire=True)
    upsert_daily(store, record)
    first = store.get(DAILY_STORAGE_KEY)
    upsert_daily(store, record)
    assert store.get(DAILY_STORAGE_KEY) == first


def test_saved_records_read_back_unchanged():
    store = MemoryStore()
    saved = upsert_daily(store, DailyRecord.from_dict(_payload()))
    assert load_all_daily(store) == [saved]
    stored = json.loads(store.get(DAILY_STORAGE_KEY))
    assert stored == [_payload()]


def test_stored_points_are_recomputed():
    store = MemoryStore({DAILY_STORAGE_KEY: json.dumps([_payload(daily_points=99)])})
    assert load_all_daily(store)[0].score == 5


def test_get_daily_missing_is_none():
    assert get_daily(MemoryStore(), DAY) is None


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        json.dumps({"date": "2025-11-20"}),
        json.dumps([{"date": "2025-11-20"}]),
        json.dumps([{**_payload(), "mood": "fine"}]),
        json.dumps([_payload(ceasefire=True)]),
        json.dumps([_payload(date="20-11-2025")]),
    ],
)
def test_malformed_payload_reads_as_empty(raw: str):
    assert load_all_daily(MemoryStore({DAILY_STORAGE_KEY: raw})) == []


def test_from_dict_names_the_bad_field():
    with pytest.raises(MalformedRecordError) as exc_info:
        DailyRecord.from_dict(_payload(shadows="two"))
    assert exc_info.value.field == "shadows"


def test_upsert_over_unreadable_log_keeps_the_old_payload(caplog: pytest.LogCaptureFixture):
    raw = json.dumps(
        [
            _payload(date="2025-11-17"),
            _payload(date="2025-11-18"),
            _payload(date="2025-11-19", shadows=1.5),
        ]
    )
    store = MemoryStore({DAILY_STORAGE_KEY: raw})

    with caplog.at_level(logging.WARNING, logger="lantern.store"):
        upsert_daily(store, DailyRecord(date=DAY, tokens_of_light=1))

    assert store.get(f"{DAILY_STORAGE_KEY}{UNREADABLE_SUFFIX}") == raw
    assert [r.date for r in load_all_daily(store)] == [DAY]
    assert "unreadable" in caplog.text
