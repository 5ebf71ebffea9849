"""Cancellable progress tween.

A tween moves a displayed value from a start value to a target over a fixed
duration. It does not schedule itself: something else ticks it, either a
UI loop calling :meth:`ProgressAnimator.tick` or :meth:`ProgressAnimator.run`
on an asyncio loop. Restarting the animator cancels whatever tween was in
flight, so a superseded loop exits on its next tick.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 1.5
DEFAULT_FRAME_INTERVAL = 1 / 60


@dataclass
class ProgressTween:
    start_value: float
    target: float
    duration: float
    started_at: float
    cancelled: bool = False

    def fraction_at(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.started_at) / self.duration))

    def value_at(self, now: float) -> float:
        return self.start_value + (self.target - self.start_value) * self.fraction_at(now)

    def is_done(self, now: float) -> bool:
        return self.cancelled or self.fraction_at(now) >= 1.0

    def cancel(self) -> None:
        self.cancelled = True


class ProgressAnimator:
    """Owns at most one live tween at a time."""

    def __init__(
        self,
        duration: float = DEFAULT_DURATION,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._duration = max(0.0, float(duration))
        self._clock = clock
        self._current: ProgressTween | None = None

    @property
    def current(self) -> ProgressTween | None:
        return self._current

    @property
    def active(self) -> bool:
        return self._current is not None and not self._current.is_done(self._clock())

    def restart(self, target: float, start_value: float = 0.0) -> ProgressTween:
        if self._current is not None:
            self._current.cancel()
        self._current = ProgressTween(
            start_value=start_value,
            target=target,
            duration=self._duration,
            started_at=self._clock(),
        )
        logger.debug("Tween %.3f -> %.3f over %.2fs", start_value, target, self._duration)
        return self._current

    def tick(self) -> float | None:
        """Current displayed value, or None when nothing was ever started."""
        if self._current is None:
            return None
        return self._current.value_at(self._clock())

    def cancel(self) -> None:
        if self._current is not None:
            self._current.cancel()

    async def run(
        self,
        target: float,
        on_frame: Callable[[float], None],
        start_value: float = 0.0,
        interval: float = DEFAULT_FRAME_INTERVAL,
    ) -> bool:
        """Drive a fresh tween to completion, calling ``on_frame`` each tick.

        Returns True when the tween finished, False when it was superseded
        or cancelled before reaching its target.
        """
        tween = self.restart(target, start_value=start_value)
        while True:
            if tween.cancelled:
                return False
            now = self._clock()
            on_frame(tween.value_at(now))
            if tween.is_done(now):
                return not tween.cancelled
            await asyncio.sleep(interval)
