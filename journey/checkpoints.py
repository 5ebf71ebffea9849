"""Checkpoint reached-state tracking.

Flags only ever move from unreached to reached. The tracker is the single
place that evaluates them, so a drop in progress (for example an animation
restarting from zero) can never clear a checkpoint that already lit up.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .path import fraction_is_at_or_past

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Checkpoint:
    name: str
    at: float


class CheckpointTracker:
    """Session-scoped, monotonic set of reached flags."""

    def __init__(self, checkpoints: Iterable[Checkpoint], reached: Iterable[str] = ()):
        self._checkpoints = tuple(checkpoints)
        known = {cp.name for cp in self._checkpoints}
        self._reached: dict[str, bool] = {cp.name: False for cp in self._checkpoints}
        for name in reached:
            if name in known:
                self._reached[name] = True

    @property
    def checkpoints(self) -> tuple[Checkpoint, ...]:
        return self._checkpoints

    @property
    def reached(self) -> dict[str, bool]:
        return dict(self._reached)

    def is_reached(self, name: str) -> bool:
        return self._reached.get(name, False)

    def reached_names(self) -> set[str]:
        return {name for name, flag in self._reached.items() if flag}

    def update(self, progress: float) -> list[Checkpoint]:
        """Apply ``progress`` and return the checkpoints that just became reached."""
        newly: list[Checkpoint] = []
        for cp in self._checkpoints:
            if self._reached[cp.name]:
                continue
            if fraction_is_at_or_past(cp, progress):
                self._reached[cp.name] = True
                newly.append(cp)
        if newly:
            logger.info("Checkpoints reached: %s", ", ".join(cp.name for cp in newly))
        return newly

    def reset(self) -> None:
        for name in self._reached:
            self._reached[name] = False
