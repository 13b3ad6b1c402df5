"""
Empirical period measurement from upward zero crossings of the angle.

A crossing is counted when the angle goes from negative to non-negative while
the angular velocity is positive, i.e. once per full oscillation. The time
between two consecutive crossings is one measured period.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional, Tuple

log = logging.getLogger(__name__)

MIN_PERIOD = 0.1  # s, shorter spans are numerical double triggers
MAX_PERIOD = 20.0  # s, longer spans come from pauses or resets
PERIOD_WINDOW = 10  # accepted periods kept for the rolling average


class PeriodDetector:
    """Tracks crossings, the last measured period, a rolling window and a cycle count."""

    def __init__(self, window: int = PERIOD_WINDOW) -> None:
        self.window = int(window)
        self.last_crossing_time: Optional[float] = None
        self.period: Optional[float] = None
        self._periods: Deque[float] = deque(maxlen=self.window)
        self.cycles = 0

    def observe(self, prev_theta: float, theta: float, omega: float, t: float) -> bool:
        """Feed one integrator step; return True when a period was accepted."""
        if not (prev_theta < 0 and theta >= 0 and omega > 0):
            return False

        accepted = False
        if self.last_crossing_time is not None:
            T = t - self.last_crossing_time
            if MIN_PERIOD < T < MAX_PERIOD:
                self.period = T
                self._periods.append(T)
                self.cycles += 1
                accepted = True
                log.debug("period accepted: T=%.4f s (cycle %d)", T, self.cycles)
            else:
                log.debug("period discarded: T=%.4f s outside (%.1f, %.1f)", T, MIN_PERIOD, MAX_PERIOD)
        self.last_crossing_time = t
        return accepted

    def reset(self) -> None:
        self.last_crossing_time = None
        self.period = None
        self._periods.clear()
        self.cycles = 0

    @property
    def periods(self) -> Tuple[float, ...]:
        return tuple(self._periods)

    @property
    def average_period(self) -> Optional[float]:
        if not self._periods:
            return None
        return sum(self._periods) / len(self._periods)
