"""wmagent/clock.py

Explicit time sources for the context vector.

The agent never reads a global timer; the host scheduler owns a clock and
advances it between ticks.
"""

from __future__ import annotations

import time


class FixedStepClock:
    """Deterministic clock: each ``advance()`` moves time by a fixed step."""

    def __init__(self, step: float = 0.02, start: float = 0.0):
        if step < 0.0:
            raise ValueError("step must be >= 0")
        self.step = float(step)
        self._time = float(start)
        self._delta = 0.0

    @property
    def time(self) -> float:
        return self._time

    @property
    def delta_time(self) -> float:
        return self._delta

    def advance(self, dt: float | None = None) -> float:
        """Move time forward by `dt` (default: the fixed step). Returns the new time."""
        self._delta = self.step if dt is None else float(dt)
        self._time += self._delta
        return self._time


class WallClock:
    """Monotonic wall time, measured from construction."""

    def __init__(self) -> None:
        self._start = time.monotonic()
        self._last = self._start
        self._delta = 0.0

    @property
    def time(self) -> float:
        return self._last - self._start

    @property
    def delta_time(self) -> float:
        return self._delta

    def advance(self) -> float:
        now = time.monotonic()
        self._delta = now - self._last
        self._last = now
        return self.time
