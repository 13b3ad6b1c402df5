"""
CSV export and table rows for the recorded trajectory.

The CSV layout (header names, 6 decimals for time, 10 for angle, velocity and
acceleration, ``,`` separators, ``\\n`` line breaks, no trailing newline) is
read by external tools and must stay stable.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, Iterator, List, Tuple

from pendulo.sim_session import SimulationSession
from pendulo.trajectory import TABLE_ROWS, Sample

CSV_HEADER = ("t(s)", "theta(rad)", "omega(rad/s)", "alpha(rad/s^2)")
CSV_FILENAME = "pendulo_datos.csv"
MISSING = "—"


def csv_rows(samples: Iterable[Sample]) -> Iterator[Tuple[str, ...]]:
    yield CSV_HEADER
    for s in samples:
        yield (f"{s.t:.6f}", f"{s.theta:.10f}", f"{s.omega:.10f}", f"{s.alpha:.10f}")


def to_csv(samples: Iterable[Sample]) -> str:
    return "\n".join(",".join(row) for row in csv_rows(samples))


def table_rows(sim: SimulationSession, n: int = TABLE_ROWS) -> List[Dict[str, str]]:
    """Last ``n`` samples formatted for display, with the current period and cycle count."""
    period = MISSING if sim.period is None else f"{sim.period:.3f}"
    rows = []
    for s in sim.trajectory.latest(n):
        rows.append({
            "t (s)": f"{s.t:.2f}",
            "θ (°)": f"{math.degrees(s.theta):.2f}",
            "ω (rad/s)": f"{s.omega:.3f}",
            "T medido (s)": period,
            "ciclos": f"{sim.cycles}",
        })
    return rows
