"""Journey system: path geometry, clock, checkpoints."""

from .animation import ProgressAnimator, ProgressTween
from .checkpoints import Checkpoint, CheckpointTracker
from .clock import (
    JourneyState,
    compute_journey_state,
    day_label,
    parse_date,
    total_weeks,
    week_for_date,
)
from .landmarks import CHECKPOINTS, LANDMARKS, journey_curve, week_marker_points
from .path import ArcLengthTable, CubicSegment, PathCurve, fraction_is_at_or_past, parse_path_data

__all__ = [
    "ArcLengthTable",
    "CHECKPOINTS",
    "Checkpoint",
    "CheckpointTracker",
    "CubicSegment",
    "JourneyState",
    "LANDMARKS",
    "PathCurve",
    "ProgressAnimator",
    "ProgressTween",
    "compute_journey_state",
    "day_label",
    "fraction_is_at_or_past",
    "journey_curve",
    "parse_date",
    "parse_path_data",
    "total_weeks",
    "week_for_date",
    "week_marker_points",
]
