"""Daily log records and their score."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from .schema import as_date, as_flag, as_int, check_keys, flag_text
from .store import KeyValueStore, read_collection, upsert_item

logger = logging.getLogger(__name__)

DAILY_STORAGE_KEY = "shared-lantern-daily-log"

DAILY_FIELDS = (
    "date",
    "tokens_of_light",
    "shadows",
    "ceasefire",
    "permission_given",
    "borders_crossed",
    "acts_of_restoration",
    "daily_points",
)


@dataclass(frozen=True)
class DailyRecord:
    """One day of the shared log; at most one per date."""

    date: date
    tokens_of_light: int = 0  # thank-you / appreciation moments
    shadows: int = 0  # moments of tension or feeling attacked
    ceasefire: bool = False  # paused when tension rose
    permission_given: int = 0  # check-ins before sensitive topics
    borders_crossed: int = 0  # personal limits crossed
    acts_of_restoration: bool = False  # actively repaired a difficult moment

    @property
    def score(self) -> int:
        return compute_daily_score(self)

    def normalized(self) -> DailyRecord:
        """Copy with every count clamped to zero or more."""
        return replace(
            self,
            tokens_of_light=max(0, self.tokens_of_light),
            shadows=max(0, self.shadows),
            permission_given=max(0, self.permission_given),
            borders_crossed=max(0, self.borders_crossed),
        )

    @classmethod
    def from_dict(cls, data: Any) -> DailyRecord:
        data = check_keys(data, DAILY_FIELDS)
        # daily_points is derived; it is validated but always recomputed.
        as_int(data["daily_points"], "daily_points")
        return cls(
            date=as_date(data["date"], "date"),
            tokens_of_light=as_int(data["tokens_of_light"], "tokens_of_light"),
            shadows=as_int(data["shadows"], "shadows"),
            ceasefire=as_flag(data["ceasefire"], "ceasefire"),
            permission_given=as_int(data["permission_given"], "permission_given"),
            borders_crossed=as_int(data["borders_crossed"], "borders_crossed"),
            acts_of_restoration=as_flag(data["acts_of_restoration"], "acts_of_restoration"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "tokens_of_light": self.tokens_of_light,
            "shadows": self.shadows,
            "ceasefire": flag_text(self.ceasefire),
            "permission_given": self.permission_given,
            "borders_crossed": self.borders_crossed,
            "acts_of_restoration": flag_text(self.acts_of_restoration),
            "daily_points": self.score,
        }


def compute_daily_score(record: DailyRecord) -> int:
    """Signed daily points; negative counts are treated as zero."""
    r = record.normalized()
    return (
        r.tokens_of_light
        + (2 if r.acts_of_restoration else 0)
        + (1 if r.ceasefire else 0)
        + r.permission_given
        - r.borders_crossed
        - r.shadows
    )


def load_all_daily(store: KeyValueStore) -> list[DailyRecord]:
    return read_collection(store, DAILY_STORAGE_KEY, DailyRecord.from_dict)


def get_daily(store: KeyValueStore, day: date) -> DailyRecord | None:
    for record in load_all_daily(store):
        if record.date == day:
            return record
    return None


def upsert_daily(store: KeyValueStore, record: DailyRecord) -> DailyRecord:
    """Save ``record``, replacing any entry for the same date."""
    record = record.normalized()
    items = upsert_item(
        store,
        DAILY_STORAGE_KEY,
        record,
        identity=lambda r: r.date,
        decode=DailyRecord.from_dict,
        encode=DailyRecord.to_dict,
    )
    logger.info("Saved daily log for %s (points=%d, %d days logged)", record.date, record.score, len(items))
    return record
