"""Damped pendulum simulator: RK4 core, trajectory buffer and period measurement."""
