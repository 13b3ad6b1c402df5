"""
Tests for the zero-crossing period detector.
"""

import pytest

from pendulo.measurement import MAX_PERIOD, MIN_PERIOD, PERIOD_WINDOW, PeriodDetector


def _cross(detector, t):
    return detector.observe(-0.01, 0.02, 0.5, t)


def test_initial_state():
    d = PeriodDetector()
    assert d.last_crossing_time is None
    assert d.period is None
    assert d.periods == ()
    assert d.cycles == 0
    assert d.average_period is None


def test_first_crossing_only_seeds_crossing_time():
    d = PeriodDetector()
    assert _cross(d, 2.0) is False
    assert d.last_crossing_time == 2.0
    assert d.period is None
    assert d.cycles == 0


def test_second_crossing_measures_period():
    d = PeriodDetector()
    _cross(d, 2.0)
    assert _cross(d, 4.0) is True
    assert d.period == pytest.approx(2.0)
    assert d.cycles == 1
    assert d.periods == pytest.approx((2.0,))
    assert d.average_period == pytest.approx(2.0)
    assert d.last_crossing_time == 4.0


def test_short_interval_rejected_but_crossing_time_updated():
    d = PeriodDetector()
    _cross(d, 2.0)
    _cross(d, 4.0)
    assert _cross(d, 4.05) is False
    assert d.cycles == 1
    assert d.period == pytest.approx(2.0)
    assert d.last_crossing_time == 4.05


def test_long_interval_rejected():
    d = PeriodDetector()
    _cross(d, 1.0)
    assert _cross(d, 1.0 + MAX_PERIOD) is False
    assert d.period is None
    assert d.cycles == 0
    assert d.last_crossing_time == 1.0 + MAX_PERIOD


def test_thresholds():
    assert MIN_PERIOD == 0.1
    assert MAX_PERIOD == 20.0
    assert PERIOD_WINDOW == 10


@pytest.mark.parametrize(
    "prev_theta, theta, omega",
    [
        (-0.01, 0.02, 0.0),  # not moving upwards
        (-0.01, 0.02, -0.5),  # moving the wrong way
        (0.01, 0.02, 0.5),  # already positive
        (-0.02, -0.01, 0.5),  # still negative
        (0.02, -0.01, -0.5),  # downward crossing
    ],
)
def test_non_crossings_are_ignored(prev_theta, theta, omega):
    d = PeriodDetector()
    d.observe(prev_theta, theta, omega, 1.0)
    assert d.last_crossing_time is None


def test_landing_exactly_on_zero_counts_as_crossing():
    d = PeriodDetector()
    d.observe(-0.01, 0.0, 0.5, 1.0)
    assert d.last_crossing_time == 1.0


def test_rolling_window_keeps_last_ten_periods():
    d = PeriodDetector()
    spans = [1.0 + 0.1 * k for k in range(12)]
    t = 0.0
    _cross(d, t)
    for span in spans:
        t += span
        _cross(d, t)

    assert d.cycles == 12
    assert len(d.periods) == PERIOD_WINDOW
    assert d.periods == pytest.approx(tuple(spans[-10:]))
    assert d.period == pytest.approx(spans[-1])
    assert d.average_period == pytest.approx(sum(spans[-10:]) / 10)


def test_reset_clears_everything():
    d = PeriodDetector()
    _cross(d, 2.0)
    _cross(d, 4.0)
    d.reset()
    assert d.last_crossing_time is None
    assert d.period is None
    assert d.periods == ()
    assert d.cycles == 0
    assert d.average_period is None

    # after a reset the next crossing only seeds again
    _cross(d, 6.0)
    assert d.cycles == 0
