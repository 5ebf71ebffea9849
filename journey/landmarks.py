"""The canonical journey: path shape, checkpoints and named landmarks."""

from __future__ import annotations

from .checkpoints import Checkpoint
from .path import ArcLengthTable, PathCurve, Point


# Two gentle S-curves from the Shire edge down to the Grey Havens.
JOURNEY_PATH_DATA = (
    "M 40 180 "
    "C 120 140, 190 220, 250 180 "
    "S 360 260, 300 320 "
    "S 180 390, 260 460 "
    "S 360 510, 200 500"
)

# Glowing points that light up as the lantern passes them.
CHECKPOINTS: tuple[Checkpoint, ...] = (
    Checkpoint("leaf", 0.10),
    Checkpoint("star", 0.35),
    Checkpoint("rune", 0.70),
    Checkpoint("goal", 1.0),
)

LANDMARKS: tuple[Checkpoint, ...] = (
    Checkpoint("Rivendell Departure", 0.02),
    Checkpoint("Whispering Grove", 0.16),
    Checkpoint("Moonlit Hill", 0.30),
    Checkpoint("Starwatch Ridge", 0.44),
    Checkpoint("Ancient Runes' Pass", 0.58),
    Checkpoint("Silverwood Crossing", 0.72),
    Checkpoint("Shimmering Coast", 0.86),
    Checkpoint("Grey Havens", 1.0),
)


def journey_curve() -> PathCurve:
    return PathCurve.from_path_data(JOURNEY_PATH_DATA)


def anchor_points(table: ArcLengthTable, anchors: tuple[Checkpoint, ...]) -> dict[str, Point]:
    return {anchor.name: table.point_at_fraction(anchor.at) for anchor in anchors}


def landmark_points(table: ArcLengthTable) -> dict[str, Point]:
    return anchor_points(table, LANDMARKS)


def week_marker_points(table: ArcLengthTable, weeks: int) -> list[Point]:
    """One marker per week, placed at ``week / weeks`` along the path."""
    if weeks <= 0:
        return []
    return [table.point_at_fraction(i / weeks) for i in range(1, weeks + 1)]


def is_goal(progress: float) -> bool:
    return progress >= 1.0
