"""Unit tests for TimeSeries and SeriesGroup."""

from datetime import timedelta

import pytest

from latencyplot.timeseries import Outcome, Sample, SeriesGroup, TimeSeries


def test_time_series_add_and_iterate(t0):
    """Samples come back in insertion order; iteration is restartable."""
    ts = TimeSeries("A", Outcome.OK, t0)
    ts.add(0, 50.0)
    ts.add(1000, 75.0)
    assert len(ts) == 2
    assert list(ts) == [Sample(0, 50.0), Sample(1000, 75.0)]
    assert list(ts) == list(ts)
    assert list(ts.points()) == [(0.0, 50.0), (1.0, 75.0)]


def test_time_series_finish_is_idempotent_and_freezes(t0):
    """finish() may be called twice; appends afterwards raise."""
    ts = TimeSeries("A", Outcome.ERROR, t0)
    ts.add(5, 1.5)
    ts.finish()
    ts.finish()
    assert ts.finished
    assert list(ts) == [Sample(5, 1.5)]
    with pytest.raises(RuntimeError):
        ts.add(6, 2.0)


def test_time_series_label(t0):
    assert TimeSeries("A", Outcome.OK, t0).label == "A: OK"
    assert TimeSeries("A", Outcome.ERROR, t0).label == "A: Error"


def test_group_creates_series_lazily(make_measurement):
    """Only outcomes that were observed get a series."""
    group = SeriesGroup("A")
    assert group.series() == []
    group.route(make_measurement("A", 0, 10))
    assert group.ok is not None
    assert group.error is None
    assert group.series() == [group.ok]


def test_group_routes_by_error_text(make_measurement):
    """Empty error text means OK; anything else goes to the Error series."""
    group = SeriesGroup("A")
    group.route(make_measurement("A", 0, 10, error="timeout"))
    group.route(make_measurement("A", 10, 20))
    assert len(group.error) == 1
    assert len(group.ok) == 1
    assert group.series() == [group.ok, group.error]


def test_group_origin_is_first_sample(make_measurement, t0):
    """Each series measures elapsed time from its own first sample."""
    group = SeriesGroup("A")
    group.route(make_measurement("A", 0, 10))
    group.route(make_measurement("A", 500, 10, error="boom"))
    group.route(make_measurement("A", 1500, 10, error="boom"))
    assert group.ok.began == t0
    assert group.error.began == t0 + timedelta(milliseconds=500)
    assert [s.elapsed_ms for s in group.error] == [0, 1000]


def test_elapsed_is_truncated_not_rounded(make_measurement):
    """1999.9 ms after the origin is recorded as 1999."""
    group = SeriesGroup("A")
    group.route(make_measurement("A", 0, 10))
    group.route(make_measurement("A", 1999.9, 10))
    assert [s.elapsed_ms for s in group.ok] == [0, 1999]


def test_value_is_latency_in_ms(make_measurement):
    group = SeriesGroup("A")
    group.route(make_measurement("A", 0, 12.5))
    assert list(group.ok)[0].value == pytest.approx(12.5)
