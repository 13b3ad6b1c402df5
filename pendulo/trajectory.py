from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, Optional, Tuple

WINDOW_SECONDS = 20.0  # s of history kept for plots and export
TABLE_ROWS = 10


@dataclass(frozen=True)
class Sample:
    """One point of the trajectory: time, angle, angular velocity and acceleration."""

    t: float
    theta: float
    omega: float
    alpha: float


class TrajectoryBuffer:
    """Rolling history of samples bounded by a trailing time window.

    Samples are kept in insertion (= time) order. After each append every sample
    older than ``latest.t - window`` is dropped from the front.
    """

    def __init__(self, window: float = WINDOW_SECONDS) -> None:
        self.window = float(window)
        self._samples: Deque[Sample] = deque()

    def append(self, sample: Sample) -> None:
        self._samples.append(sample)
        t_min = sample.t - self.window
        while self._samples and self._samples[0].t < t_min:
            self._samples.popleft()

    def clear(self) -> None:
        self._samples.clear()

    @property
    def samples(self) -> Tuple[Sample, ...]:
        return tuple(self._samples)

    @property
    def last(self) -> Optional[Sample]:
        return self._samples[-1] if self._samples else None

    def latest(self, n: int = TABLE_ROWS) -> Tuple[Sample, ...]:
        """Return the most recent ``n`` samples, oldest first."""
        if n <= 0:
            return ()
        start = max(0, len(self._samples) - n)
        return tuple(self._samples[i] for i in range(start, len(self._samples)))

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(tuple(self._samples))
