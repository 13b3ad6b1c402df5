"""
Tests for the time-windowed trajectory buffer.
"""

import pytest

from pendulo.trajectory import WINDOW_SECONDS, Sample, TrajectoryBuffer


def _sample(t):
    return Sample(t=float(t), theta=0.1 * t, omega=0.0, alpha=0.0)


def test_empty_buffer():
    buf = TrajectoryBuffer()
    assert len(buf) == 0
    assert buf.last is None
    assert buf.samples == ()
    assert buf.latest() == ()


def test_append_preserves_order():
    buf = TrajectoryBuffer()
    for t in range(5):
        buf.append(_sample(t))
    assert [s.t for s in buf] == [0.0, 1.0, 2.0, 3.0, 4.0]
    assert buf.last.t == 4.0


def test_evicts_samples_older_than_window():
    buf = TrajectoryBuffer()
    assert buf.window == WINDOW_SECONDS == 20.0
    for t in range(26):
        buf.append(_sample(t))
    # t=5 sits exactly on the window edge and is kept
    assert buf.samples[0].t == 5.0
    assert len(buf) == 21
    for s in buf:
        assert s.t >= buf.last.t - 20.0


def test_latest_returns_most_recent_oldest_first():
    buf = TrajectoryBuffer()
    for t in range(15):
        buf.append(_sample(t))
    latest = buf.latest(10)
    assert [s.t for s in latest] == [float(t) for t in range(5, 15)]
    assert buf.latest(0) == ()


def test_latest_with_fewer_samples():
    buf = TrajectoryBuffer()
    buf.append(_sample(0))
    buf.append(_sample(1))
    assert [s.t for s in buf.latest(10)] == [0.0, 1.0]


def test_clear():
    buf = TrajectoryBuffer()
    buf.append(_sample(0))
    buf.clear()
    assert len(buf) == 0


def test_samples_are_immutable():
    s = _sample(1)
    with pytest.raises(AttributeError):
        s.t = 2.0
