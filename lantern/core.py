"""Core orchestrator - wires the journey clock, path and the shared log.

Nothing here reads the wall clock: the caller hands in a ``clock`` that
returns today's date. Each public method recomputes from the store, so the
caller decides when to refresh (on load, after a save, on navigation).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from journey.animation import ProgressAnimator
from journey.checkpoints import CheckpointTracker
from journey.clock import JourneyState, compute_journey_state, day_label, total_weeks
from journey.landmarks import CHECKPOINTS, is_goal, journey_curve, landmark_points, week_marker_points
from journey.path import ArcLengthTable, Point

from .chronicle import ChronicleError, ChronicleWriter, build_weekly_summary
from .config import journey_settings, load_config
from .daily import DailyRecord, load_all_daily, upsert_daily
from .history import ChronicleDB
from .rhythm import daily_rhythm, weekly_distances
from .scribe import build_narrative
from .store import JsonFileStore, KeyValueStore
from .weekly import WeeklyRecord, get_weekly, latest_weekly, load_all_weekly, refresh_distance, upsert_weekly

logger = logging.getLogger(__name__)


@dataclass
class CheckpointView:
    name: str
    at: float
    point: Point
    reached: bool


@dataclass
class WeekMarker:
    week: int
    point: Point
    current: bool = False


@dataclass
class JourneyOverview:
    """Everything the journey map and its summary cards need."""

    state: JourneyState
    day_label: str
    lantern: Point
    progress: float = 0.0  # fraction shown on the map; may lag state.progress
    goal: bool = False
    checkpoints: list[CheckpointView] = field(default_factory=list)
    landmarks: dict[str, Point] = field(default_factory=dict)
    week_markers: list[WeekMarker] = field(default_factory=list)
    lantern_average: float = 0.0
    morale_average: float = 0.0


@dataclass
class CouncilResult:
    record: WeeklyRecord
    note: str


class SharedLantern:
    """The shared journey: one path, one daily log, one weekly council."""

    def __init__(
        self,
        clock: Callable[[], date],
        config: dict | None = None,
        store: KeyValueStore | None = None,
        writer: ChronicleWriter | None = None,
    ):
        self._cfg = config if config is not None else load_config()
        self._clock = clock
        self._journey = journey_settings(self._cfg)

        root = Path(__file__).resolve().parent.parent
        storage = self._cfg.get("storage", {}) or {}
        if store is None:
            store = JsonFileStore(root / storage.get("store_file", "data/lantern.json"))
        self._store = store
        self._chronicle_db_path = root / storage.get("chronicle_db", "data/chronicles.db")
        self._writer = writer

        self._table = ArcLengthTable.build(journey_curve(), self._journey.samples_per_segment)
        self._tracker = CheckpointTracker(CHECKPOINTS)
        self._animator = ProgressAnimator(duration=self._journey.animation_seconds)

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def tracker(self) -> CheckpointTracker:
        return self._tracker

    @property
    def animator(self) -> ProgressAnimator:
        return self._animator

    @property
    def total_weeks(self) -> int:
        return total_weeks(self._journey.total_days)

    # ── Journey ─────────────────────────────────────────────────

    def journey_state(self) -> JourneyState:
        return compute_journey_state(self._clock(), self._journey.start_date, self._journey.total_days)

    def overview(self, progress: float | None = None) -> JourneyOverview:
        """Snapshot of the map at ``progress`` (defaults to the true progress).

        Checkpoint flags are updated from whatever progress is shown, so an
        animation passing a checkpoint lights it and it stays lit.
        """
        state = self.journey_state()
        shown = state.progress if progress is None else progress
        self._tracker.update(shown)

        checkpoints = [
            CheckpointView(
                name=cp.name,
                at=cp.at,
                point=self._table.point_at_fraction(cp.at),
                reached=self._tracker.is_reached(cp.name),
            )
            for cp in self._tracker.checkpoints
        ]
        markers = [
            WeekMarker(week=i, point=pt, current=(i == state.week_index))
            for i, pt in enumerate(week_marker_points(self._table, self.total_weeks), start=1)
        ]

        overview = JourneyOverview(
            state=state,
            day_label=day_label(state.elapsed_days, self._journey.total_days),
            lantern=self._table.point_at_fraction(shown),
            progress=shown,
            goal=is_goal(shown),
            checkpoints=checkpoints,
            landmarks=landmark_points(self._table),
            week_markers=markers,
        )

        latest = latest_weekly(load_all_weekly(self._store))
        if latest is not None:
            overview.lantern_average = latest.lantern_average
            overview.morale_average = latest.morale_average
        return overview

    async def animate_progress(self, on_frame: Callable[[JourneyOverview], None]) -> bool:
        """Sweep the lantern from the start of the path to today's progress."""
        target = self.journey_state().progress
        return await self._animator.run(target, lambda value: on_frame(self.overview(progress=value)))

    # ── Daily log ───────────────────────────────────────────────

    def log_day(self, record: DailyRecord) -> DailyRecord:
        return upsert_daily(self._store, record)

    def daily_records(self) -> list[DailyRecord]:
        return load_all_daily(self._store)

    def rhythm(self, days: int = 30) -> list[tuple[date, int]]:
        return daily_rhythm(self.daily_records(), self._clock(), days=days)

    def weekly_distances(self) -> list[int]:
        return weekly_distances(self.daily_records(), self._journey.start_date, self._journey.total_days)

    # ── Weekly council ──────────────────────────────────────────

    def weekly_record(self, week: int) -> WeeklyRecord | None:
        """Stored council for ``week`` with a freshly computed distance."""
        record = get_weekly(self._store, week)
        if record is None:
            return None
        return refresh_distance(record, self.daily_records(), self._journey.start_date, self._journey.total_days)

    def hold_council(self, record: WeeklyRecord) -> CouncilResult:
        """Save a council with its distance taken from the daily log."""
        record = refresh_distance(
            record.normalized(self.total_weeks),
            self.daily_records(),
            self._journey.start_date,
            self._journey.total_days,
        )
        saved = upsert_weekly(self._store, record, total_days=self._journey.total_days)
        return CouncilResult(record=saved, note=self._note_for(saved))

    def scribe_note(self, week: int) -> str | None:
        record = get_weekly(self._store, week)
        if record is None:
            return None
        return self._note_for(record)

    def _note_for(self, record: WeeklyRecord) -> str:
        previous = get_weekly(self._store, record.week - 1) if record.week > 1 else None
        return build_narrative(record.week, record.lantern_average, record.morale_average, previous)

    # ── Chronicle ───────────────────────────────────────────────

    async def write_chronicle(self, week: int) -> str:
        """Generate a story scene for a saved council and log it."""
        record = self.weekly_record(week)
        if record is None:
            raise ChronicleError(f"No weekly council saved for week {week}", week=week)

        writer = self._writer or ChronicleWriter.from_config(self._cfg)
        summary = build_weekly_summary(record, self._note_for(record))
        story = writer.generate(summary, week=week)

        async with ChronicleDB(self._chronicle_db_path) as db:
            await db.log_chronicle(week, story, summary=summary, model=writer.model)
        logger.info("Chronicle written for week %d (%d chars)", week, len(story))
        return story

    async def latest_chronicle(self, week: int) -> dict | None:
        async with ChronicleDB(self._chronicle_db_path) as db:
            return await db.get_latest_chronicle(week)

    async def recent_chronicles(self, limit: int = 12) -> tuple[int, list[dict]]:
        """Total number of chronicles written and the newest ``limit`` of them."""
        async with ChronicleDB(self._chronicle_db_path) as db:
            return await db.get_chronicle_count(), await db.get_recent_chronicles(limit)
