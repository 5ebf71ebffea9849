"""Tests for the canonical journey layout."""

import pytest

from journey.landmarks import (
    CHECKPOINTS,
    LANDMARKS,
    is_goal,
    journey_curve,
    landmark_points,
    week_marker_points,
)
from journey.path import ArcLengthTable


def _table() -> ArcLengthTable:
    return ArcLengthTable(journey_curve())


def test_checkpoint_fractions():
    assert [(cp.name, cp.at) for cp in CHECKPOINTS] == [
        ("leaf", 0.10),
        ("star", 0.35),
        ("rune", 0.70),
        ("goal", 1.0),
    ]


def test_landmarks_are_ordered_along_the_path():
    fractions = [lm.at for lm in LANDMARKS]
    assert fractions == sorted(fractions)
    assert LANDMARKS[-1].name == "Grey Havens"


def test_grey_havens_sits_at_the_end_of_the_path():
    points = landmark_points(_table())
    assert len(points) == len(LANDMARKS)
    x, y = points["Grey Havens"]
    assert x == pytest.approx(200.0)
    assert y == pytest.approx(500.0)


def test_week_markers_one_per_week():
    table = _table()
    markers = week_marker_points(table, 12)
    assert len(markers) == 12
    assert markers[-1] == table.point_at_fraction(1.0)
    assert markers[5] == table.point_at_fraction(6 / 12)
    assert week_marker_points(table, 0) == []


def test_is_goal():
    assert is_goal(1.0)
    assert not is_goal(0.99)
