"""Arc-length parameterised journey path built from cubic Bezier segments.

The path is stored as plain control points, so it can be sampled headless:
each segment is sampled at a fixed step count and the chord lengths are
accumulated into a monotonic lookup table. Fractions along the path are
then answered by a binary search over that table.
"""

from __future__ import annotations

import bisect
import logging
import math
import re
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

Point = tuple[float, float]

DEFAULT_SAMPLES_PER_SEGMENT = 200

# Below this total length a curve is treated as a single point.
DEGENERATE_LENGTH = 1e-9

_PATH_TOKEN_RE = re.compile(r"[A-Za-z]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


class Anchor(Protocol):
    at: float


def clamp_fraction(t: float) -> float:
    """Clamp ``t`` into [0, 1]; NaN counts as the start of the path."""
    if math.isnan(t):
        return 0.0
    return max(0.0, min(1.0, float(t)))


@dataclass(frozen=True)
class CubicSegment:
    start: Point
    control1: Point
    control2: Point
    end: Point

    def point_at(self, u: float) -> Point:
        mt = 1.0 - u
        a = mt * mt * mt
        b = 3.0 * mt * mt * u
        c = 3.0 * mt * u * u
        d = u * u * u
        x = a * self.start[0] + b * self.control1[0] + c * self.control2[0] + d * self.end[0]
        y = a * self.start[1] + b * self.control1[1] + c * self.control2[1] + d * self.end[1]
        return (x, y)


@dataclass(frozen=True)
class PathCurve:
    """One continuous path: a start point followed by cubic segments."""

    start: Point = (0.0, 0.0)
    segments: tuple[CubicSegment, ...] = ()

    @property
    def end(self) -> Point:
        if not self.segments:
            return self.start
        return self.segments[-1].end

    @classmethod
    def from_path_data(cls, data: str) -> PathCurve:
        return parse_path_data(data)


def _line_as_cubic(start: Point, end: Point) -> CubicSegment:
    c1 = (start[0] + (end[0] - start[0]) / 3.0, start[1] + (end[1] - start[1]) / 3.0)
    c2 = (start[0] + 2.0 * (end[0] - start[0]) / 3.0, start[1] + 2.0 * (end[1] - start[1]) / 3.0)
    return CubicSegment(start, c1, c2, end)


def parse_path_data(data: str) -> PathCurve:
    """Parse the M/C/S/L subset of SVG path data into a PathCurve.

    Both absolute and relative forms are accepted. ``S`` reflects the
    previous segment's second control point about the current point, as in
    SVG. A path with no drawing commands yields a single-point curve.
    """
    tokens = _PATH_TOKEN_RE.findall(data or "")
    if not tokens:
        return PathCurve()

    start: Point | None = None
    current: Point = (0.0, 0.0)
    last_control: Point | None = None
    segments: list[CubicSegment] = []
    command = ""
    idx = 0

    def take(count: int) -> list[float]:
        nonlocal idx
        values = tokens[idx:idx + count]
        if len(values) < count or any(v.isalpha() for v in values):
            raise ValueError(f"Command {command!r} expects {count} numbers near token {idx}")
        idx += count
        return [float(v) for v in values]

    while idx < len(tokens):
        token = tokens[idx]
        if token.isalpha():
            command = token
            idx += 1
        elif not command:
            raise ValueError("Path data must start with a command")

        relative = command.islower()
        ox, oy = current if relative else (0.0, 0.0)
        op = command.upper()

        if op == "M":
            if segments:
                raise ValueError("Only a single subpath is supported")
            x, y = take(2)
            current = (ox + x, oy + y)
            start = current
            last_control = None
            # Extra coordinate pairs after a moveto are implicit linetos.
            command = "l" if relative else "L"
        elif op == "L":
            x, y = take(2)
            end = (ox + x, oy + y)
            segments.append(_line_as_cubic(current, end))
            current = end
            last_control = None
        elif op == "C":
            x1, y1, x2, y2, x, y = take(6)
            c1 = (ox + x1, oy + y1)
            c2 = (ox + x2, oy + y2)
            end = (ox + x, oy + y)
            segments.append(CubicSegment(current, c1, c2, end))
            current = end
            last_control = c2
        elif op == "S":
            x2, y2, x, y = take(4)
            if last_control is None:
                c1 = current
            else:
                c1 = (2.0 * current[0] - last_control[0], 2.0 * current[1] - last_control[1])
            c2 = (ox + x2, oy + y2)
            end = (ox + x, oy + y)
            segments.append(CubicSegment(current, c1, c2, end))
            current = end
            last_control = c2
        else:
            raise ValueError(f"Unsupported path command: {command!r}")

    return PathCurve(start=start if start is not None else (0.0, 0.0), segments=tuple(segments))


class ArcLengthTable:
    """Sampled arc-length lookup for a fixed PathCurve."""

    def __init__(self, curve: PathCurve, samples_per_segment: int = DEFAULT_SAMPLES_PER_SEGMENT):
        self._curve = curve
        steps = max(1, int(samples_per_segment))

        points: list[Point] = [curve.start]
        lengths: list[float] = [0.0]
        for segment in curve.segments:
            for i in range(1, steps + 1):
                pt = segment.point_at(i / steps)
                lengths.append(lengths[-1] + math.dist(points[-1], pt))
                points.append(pt)

        if lengths[-1] < DEGENERATE_LENGTH:
            # Collapsed curve; sampling noise alone would give it a length.
            points, lengths = [curve.start], [0.0]

        self._points = points
        self._lengths = lengths
        logger.debug(
            "Arc-length table: %d segments, %d samples, length=%.2f",
            len(curve.segments),
            len(points),
            lengths[-1],
        )

    @classmethod
    def build(cls, curve: PathCurve, samples_per_segment: int = DEFAULT_SAMPLES_PER_SEGMENT) -> ArcLengthTable:
        return cls(curve, samples_per_segment)

    @property
    def curve(self) -> PathCurve:
        return self._curve

    @property
    def total_length(self) -> float:
        return self._lengths[-1]

    def point_at_length(self, length: float) -> Point:
        total = self.total_length
        if total <= 0.0 or length <= 0.0 or math.isnan(length):
            return self._points[0]
        if length >= total:
            return self._points[-1]

        i = bisect.bisect_left(self._lengths, length)
        l0, l1 = self._lengths[i - 1], self._lengths[i]
        p0, p1 = self._points[i - 1], self._points[i]
        span = l1 - l0
        ratio = (length - l0) / span if span > 0.0 else 0.0
        return (p0[0] + (p1[0] - p0[0]) * ratio, p0[1] + (p1[1] - p0[1]) * ratio)

    def point_at_fraction(self, t: float) -> Point:
        """Point at fraction ``t`` of the total length; ``t`` is clamped."""
        return self.point_at_length(self.total_length * clamp_fraction(t))


def fraction_is_at_or_past(anchor: Anchor, t: float) -> bool:
    """True once progress ``t`` has reached the anchor's fraction."""
    return clamp_fraction(t) >= anchor.at
