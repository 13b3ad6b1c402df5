from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from pendulo.measurement import PeriodDetector
from pendulo.physics import (
    DT,
    PendulumParams,
    angular_acceleration,
    energy,
    pendulum_derivatives,
    rk4_step,
    theoretical_frequency,
    theoretical_period,
)
from pendulo.trajectory import Sample, TrajectoryBuffer

log = logging.getLogger(__name__)

DEFAULT_THETA0_DEG = 20.0


@dataclass
class SimulationSession:
    """Holds the per-session simulation state, trajectory and period measurement.

    ``params`` is shared by reference with the configuration layer and read on
    every step.
    """

    params: PendulumParams = field(default_factory=PendulumParams)
    theta0: float = math.radians(DEFAULT_THETA0_DEG)

    time: float = 0.0
    theta: float = 0.0
    omega: float = 0.0

    trajectory: TrajectoryBuffer = field(default_factory=TrajectoryBuffer)
    detector: PeriodDetector = field(default_factory=PeriodDetector)

    def __post_init__(self) -> None:
        self.reset(self.theta0)

    def step(self) -> Sample:
        """Advance the simulation by one fixed step and record the result."""
        prev_theta = self.theta
        self.theta, self.omega = rk4_step([self.theta, self.omega], DT, self.params, pendulum_derivatives)
        self.time += DT

        sample = Sample(self.time, self.theta, self.omega, self.alpha)
        self.trajectory.append(sample)
        self.detector.observe(prev_theta, self.theta, self.omega, self.time)
        return sample

    def tick(self, running: bool, dragging: bool = False) -> bool:
        """One scheduler tick: step once if running and not dragged. No catch-up."""
        if not running or dragging:
            return False
        self.step()
        return True

    def reset(self, initial_angle: Optional[float] = None) -> None:
        """Restart at t=0 from ``initial_angle`` (rad) at rest."""
        if initial_angle is not None:
            self.theta0 = float(initial_angle)
        self.time = 0.0
        self.theta = self.theta0
        self.omega = 0.0

        self.detector.reset()
        self.trajectory.clear()
        self.trajectory.append(Sample(self.time, self.theta, self.omega, self.alpha))
        log.info("session reset: theta0=%.2f deg", math.degrees(self.theta0))

    def override_state(self, theta: float, omega: float = 0.0) -> None:
        """Force angle and velocity (manual drag). Time and measurements are kept."""
        self.theta = float(theta)
        self.omega = float(omega)
        log.debug("state overridden: theta=%.4f rad omega=%.4f rad/s", self.theta, self.omega)

    def reset_measurement(self) -> None:
        self.detector.reset()
        log.debug("period measurement reset at t=%.3f s", self.time)

    @property
    def alpha(self) -> float:
        return angular_acceleration(self.theta, self.omega, self.params)

    @property
    def period(self) -> Optional[float]:
        return self.detector.period

    @property
    def cycles(self) -> int:
        return self.detector.cycles

    @property
    def average_period(self) -> Optional[float]:
        return self.detector.average_period

    @property
    def theoretical_period(self) -> float:
        return theoretical_period(self.params)

    @property
    def theoretical_frequency(self) -> float:
        return theoretical_frequency(self.params)

    def energy(self) -> Tuple[float, float, float]:
        return energy(self.theta, self.omega, self.params)
