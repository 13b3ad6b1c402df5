"""
Numerical physics utilities for the damped simple pendulum.

This module provides:
- The parameter set of the pendulum (length, mass, gravity, damping)
- The angular acceleration and derivative function (linear or nonlinear restoring term)
- A classical RK4 integrator with a fixed 120 Hz step
- Energy, theoretical period and frequency helpers
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

State = List[float]

DT = 1.0 / 120.0  # s, fixed integration step


@dataclass
class PendulumParams:
    """Physical configuration of the pendulum.

    Read on every derivative evaluation, so changes take effect on the next step.
    """

    length: float = 1.0  # m
    mass: float = 1.0  # kg
    g: float = 9.8  # m/s^2
    beta: float = 0.0  # 1/s
    nonlinear: bool = True
    damping_enabled: bool = False

    @property
    def effective_beta(self) -> float:
        return float(self.beta) if self.damping_enabled else 0.0

    def validate(self) -> None:
        if not self.length > 0:
            raise ValueError(f"length must be positive, got {self.length!r}")
        if not self.mass > 0:
            raise ValueError(f"mass must be positive, got {self.mass!r}")
        if not self.g > 0:
            raise ValueError(f"gravity must be positive, got {self.g!r}")
        if self.beta < 0:
            raise ValueError(f"damping coefficient must be non-negative, got {self.beta!r}")


def angular_acceleration(theta: float, omega: float, params: PendulumParams) -> float:
    """Return the angular acceleration for angle ``theta`` and velocity ``omega``.

    Angles are measured from the vertical (downwards is 0 rad). Damping is linear:
    alpha = -2 beta omega - (g / L) * r, with r = sin(theta) or theta (small-angle).
    """
    g = float(params.g)  # m/s^2
    l = float(params.length)  # m
    restoring = math.sin(theta) if params.nonlinear else theta
    return -2.0 * params.effective_beta * omega - (g / l) * restoring


def pendulum_derivatives(state: Sequence[float], params: PendulumParams) -> State:
    """Return derivatives [dtheta, domega] for the pendulum."""
    theta, omega = state[:2]
    return [omega, angular_acceleration(theta, omega, params)]


def rk4_step(state: Sequence[float], dt: float, params: PendulumParams, deriv_func: Callable[[Sequence[float], PendulumParams], State] = pendulum_derivatives) -> State:
    """Perform one classical RK4 step for arbitrary state dimension."""
    s1 = list(state)
    k1 = deriv_func(s1, params)
    s2 = [s1[i] + 0.5 * dt * k1[i] for i in range(len(s1))]
    k2 = deriv_func(s2, params)
    s3 = [s1[i] + 0.5 * dt * k2[i] for i in range(len(s1))]
    k3 = deriv_func(s3, params)
    s4 = [s1[i] + dt * k3[i] for i in range(len(s1))]
    k4 = deriv_func(s4, params)
    return [s1[i] + dt * (k1[i] + 2.0 * k2[i] + 2.0 * k3[i] + k4[i]) / 6.0 for i in range(len(s1))]


def energy(theta: float, omega: float, params: PendulumParams) -> Tuple[float, float, float]:
    """Mechanical energy (kinetic, potential, total) in joules.

    Potential reference is the lowest point of the bob. In small-angle mode the
    potential uses the same quadratic approximation as the restoring term.
    """
    m = float(params.mass) ; l = float(params.length) ; g = float(params.g)
    if params.nonlinear:
        U = m * g * l * (1.0 - math.cos(theta))
    else:
        U = 0.5 * m * g * l * theta * theta
    v = l * omega
    K = 0.5 * m * v * v
    return K, U, K + U


def theoretical_period(params: PendulumParams) -> float:
    """Small-angle period 2*pi*sqrt(L/g) in seconds."""
    return 2.0 * math.pi * math.sqrt(float(params.length) / float(params.g))


def theoretical_frequency(params: PendulumParams) -> float:
    return 1.0 / theoretical_period(params)


def bob_position(theta: float, params: PendulumParams) -> Tuple[float, float]:
    """Bob position in meters relative to the pivot at (0, 0), y downwards."""
    l = float(params.length)
    return l * math.sin(theta), l * math.cos(theta)
