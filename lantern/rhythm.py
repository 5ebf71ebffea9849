"""Series views over the daily log: the daily rhythm and weekly distances."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from journey.clock import total_weeks, week_for_date

from .daily import DailyRecord


def daily_rhythm(records: Iterable[DailyRecord], today: date, days: int = 30) -> list[tuple[date, int]]:
    """Points for each of the ``days`` days ending on ``today``, oldest first.

    Days without a log entry count as zero.
    """
    days = max(1, days)
    points = {record.date: record.score for record in records}
    first = today - timedelta(days=days - 1)
    return [(first + timedelta(days=i), points.get(first + timedelta(days=i), 0)) for i in range(days)]


def weekly_distances(records: Iterable[DailyRecord], start_date: date, total_days: int) -> list[int]:
    """Distance for every week of the journey, index 0 being week 1."""
    totals = [0] * total_weeks(total_days)
    for record in records:
        week = week_for_date(record.date, start_date, total_days)
        if week is not None:
            totals[week - 1] += record.score
    return totals
