from __future__ import annotations

import logging
import math
import sys
import time
from dataclasses import fields
from typing import Sequence

import plotly.graph_objects as go
import streamlit as st

from pendulo.export import CSV_FILENAME, MISSING, table_rows, to_csv
from pendulo.physics import PendulumParams, bob_position
from pendulo.sim_session import DEFAULT_THETA0_DEG, SimulationSession

LOG_FMT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
logging.basicConfig(level=logging.INFO, format=LOG_FMT, stream=sys.stdout)
log = logging.getLogger(__name__)

FRAME_INTERVAL = 1.0 / 60.0  # s between reruns while running
MAX_DRAG_DEG = 85.0


def _ensure_session() -> SimulationSession:
    if "sim" not in st.session_state:
        st.session_state.sim = SimulationSession(theta0=math.radians(DEFAULT_THETA0_DEG))
    if "running" not in st.session_state:
        st.session_state.running = False
    if "theta0_deg" not in st.session_state:
        st.session_state.theta0_deg = DEFAULT_THETA0_DEG
    return st.session_state.sim


def _update_params_from_sidebar(sim: SimulationSession) -> None:
    defaults = PendulumParams()
    st.sidebar.header("Parámetros")

    length = st.sidebar.slider("Longitud L (m)", min_value=0.2, max_value=3.0, value=defaults.length, step=0.01, key="L")
    mass = st.sidebar.slider("Masa m (kg)", min_value=0.1, max_value=5.0, value=defaults.mass, step=0.1, key="m")
    theta0_deg = st.sidebar.slider("Ángulo inicial θ0 (°)", min_value=1.0, max_value=80.0, value=DEFAULT_THETA0_DEG, step=1.0, key="th0")
    g = st.sidebar.slider("Gravedad g (m/s²)", min_value=1.0, max_value=25.0, value=defaults.g, step=0.01, key="g")
    beta = st.sidebar.slider("Amortiguamiento β (1/s)", min_value=0.0, max_value=2.0, value=defaults.beta, step=0.01, key="beta")
    nonlinear = st.sidebar.checkbox("No lineal (sin θ)", value=defaults.nonlinear, key="nonlinear")
    damping_enabled = st.sidebar.checkbox("Amortiguamiento activo", value=defaults.damping_enabled, key="damping")

    new = PendulumParams(
        length=float(length),
        mass=float(mass),
        g=float(g),
        beta=float(beta),
        nonlinear=bool(nonlinear),
        damping_enabled=bool(damping_enabled),
    )
    try:
        new.validate()
    except ValueError as exc:
        st.error(f"Parámetros inválidos: {exc}")
        st.stop()

    params_changed = new != sim.params
    theta0_changed = float(theta0_deg) != float(st.session_state.theta0_deg)
    if not (params_changed or theta0_changed):
        return

    # update in place, the session holds the same params object
    for f in fields(new):
        setattr(sim.params, f.name, getattr(new, f.name))
    st.session_state.theta0_deg = float(theta0_deg)
    log.info("parameters changed: %s", sim.params)
    sim.reset(math.radians(float(theta0_deg)))


def _build_pendulum_figure(sim: SimulationSession) -> go.Figure:
    x_m, y_m = bob_position(sim.theta, sim.params)
    # Invert y for plotting (upwards positive)
    x, y = x_m, -y_m

    max_len = max(1.0, float(sim.params.length))
    pad = max_len * 0.2
    bob_size = min(26.0, max(12.0, 12.0 + 10.0 * math.sqrt(sim.params.mass))) * 2.0

    fig = go.Figure()

    # rest position
    fig.add_trace(go.Scatter(x=[0.0, 0.0], y=[0.0, -sim.params.length], mode="lines", line=dict(color="rgba(107,114,128,0.5)", width=2, dash="dot"), hoverinfo="skip", showlegend=False))
    # rod
    fig.add_trace(go.Scatter(x=[0.0, x], y=[0.0, y], mode="lines", line=dict(color="#374151", width=3), hoverinfo="skip", showlegend=False))
    # bob
    fig.add_trace(go.Scatter(x=[x], y=[y], mode="markers", marker=dict(size=bob_size, color="rgba(34,197,94,0.25)", line=dict(color="rgba(34,197,94,0.85)", width=3)), hoverinfo="skip", showlegend=False))
    # pivot
    fig.add_trace(go.Scatter(x=[0.0], y=[0.0], mode="markers", marker=dict(size=10, color="#22c55e"), hoverinfo="skip", showlegend=False))

    fig.update_layout(
        template="plotly_white",
        margin=dict(l=20, r=20, t=30, b=20),
        title=dict(text=f"θ = {math.degrees(sim.theta):.1f}°   t = {sim.time:.2f} s", font=dict(size=13)),
        xaxis=dict(scaleanchor="y", scaleratio=1.0, range=[-max_len - pad, max_len + pad], showgrid=True, zeroline=False),
        yaxis=dict(range=[-max_len - pad, pad], showgrid=True, zeroline=False),
        dragmode=False,
    )
    return fig


def _build_series_figure(xs: Sequence[float], ys: Sequence[float], y_label: str) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=list(xs), y=list(ys), mode="lines", line=dict(color="rgba(34,197,94,0.85)", width=2), hoverinfo="skip", showlegend=False))
    fig.update_layout(
        template="plotly_white",
        height=220,
        margin=dict(l=20, r=20, t=10, b=20),
        xaxis=dict(title="t (s)", showgrid=False),
        yaxis=dict(title=y_label, showgrid=True),
    )
    return fig


def _fmt_seconds(value: float | None) -> str:
    return MISSING if value is None else f"{value:.3f} s"


def _controls(sim: SimulationSession) -> None:
    col_a, col_b, col_c, col_d = st.columns([1, 1, 1, 1])
    with col_a:
        if not st.session_state.running:
            if st.button("Iniciar", type="primary"):
                st.session_state.running = True
                log.info("simulation started at t=%.3f s", sim.time)
        else:
            if st.button("Pausar", type="secondary"):
                st.session_state.running = False
                log.info("simulation paused at t=%.3f s", sim.time)
    with col_b:
        if st.button("Reiniciar"):
            st.session_state.running = False
            sim.reset(math.radians(float(st.session_state.theta0_deg)))
    with col_c:
        if st.button("Reiniciar medición"):
            sim.reset_measurement()
    with col_d:
        st.download_button("Descargar CSV", data=to_csv(sim.trajectory.samples), file_name=CSV_FILENAME, mime="text/csv")

    with st.expander("Fijar ángulo manualmente", expanded=False):
        drag_deg = st.slider("Ángulo (°)", min_value=-MAX_DRAG_DEG, max_value=MAX_DRAG_DEG, value=0.0, step=0.5, key="drag_deg")
        if st.button("Fijar"):
            st.session_state.running = False
            sim.override_state(math.radians(float(drag_deg)), 0.0)


def _metrics(sim: SimulationSession) -> None:
    _, _, total = sim.energy()
    row1 = st.columns(5)
    row1[0].metric("T teórico", f"{sim.theoretical_period:.3f} s")
    row1[1].metric("f teórica", f"{sim.theoretical_frequency:.3f} Hz")
    row1[2].metric("θ", f"{math.degrees(sim.theta):.2f} °")
    row1[3].metric("ω", f"{sim.omega:.3f} rad/s")
    row1[4].metric("E", f"{total:.4f} J")
    row2 = st.columns(3)
    row2[0].metric("T medido", _fmt_seconds(sim.period))
    row2[1].metric("Ciclos", f"{sim.cycles}")
    row2[2].metric("T promedio", _fmt_seconds(sim.average_period))


def main() -> None:
    st.set_page_config(page_title="Péndulo simple", layout="wide")
    sim = _ensure_session()

    st.title("Péndulo simple")
    st.caption("RK4 a 120 Hz, periodo medido por cruces del equilibrio, exportación CSV")

    _update_params_from_sidebar(sim)
    _controls(sim)

    # one step per rerun, no catch-up
    try:
        sim.tick(st.session_state.running)
    except (ArithmeticError, ValueError):
        log.exception("integration failed at t=%.3f s, pausing", sim.time)
        st.session_state.running = False
        st.error("La integración numérica falló; simulación en pausa. Reinicie para continuar.")

    _metrics(sim)

    col_left, col_right = st.columns([1, 1])
    with col_left:
        st.plotly_chart(_build_pendulum_figure(sim), use_container_width=True, config={"staticPlot": False, "displayModeBar": False})
    with col_right:
        samples = sim.trajectory.samples
        ts = [s.t for s in samples]
        st.plotly_chart(_build_series_figure(ts, [math.degrees(s.theta) for s in samples], "θ (°)"), use_container_width=True, config={"displayModeBar": False})
        st.plotly_chart(_build_series_figure(ts, [s.omega for s in samples], "ω (rad/s)"), use_container_width=True, config={"displayModeBar": False})

    st.subheader("Últimas muestras")
    st.dataframe(table_rows(sim), use_container_width=True, hide_index=True)

    if st.session_state.running:
        time.sleep(FRAME_INTERVAL)
        st.rerun()


if __name__ == "__main__":
    main()
