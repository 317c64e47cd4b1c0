"""Tests for the Strongin optimization loop and its entry points."""
import math
import sys

import pytest

from strongin_app.core.comm import CommunicationError, run_threaded
from strongin_app.core.engine import OptimizationEngine
from strongin_app.core.functions import FUNCTIONS, f1, f2, f3
from strongin_app.core.segment import Segment
from strongin_app.core.strategies import SequentialStrategy
from strongin_app.core.strongin import (
    STOP_DEGENERATE,
    STOP_NAN,
    StronginMethod,
    minimize,
    minimize_distributed,
    run_strongin,
    run_strongin_group,
)

TIMEOUT = 60.0


def _distributed(comm, f, a, b, epsilon):
    """Helper target: distributed entry point with comm as the first argument."""
    return minimize_distributed(f, a, b, epsilon, comm)


def _nan_function(x):
    return math.nan


def _raising_function(x):
    raise ZeroDivisionError("bad point")


# ==========================================
# Sequential minimize
# ==========================================


class TestMinimize:
    """Test the single-worker entry point on known functions."""

    def test_parabola(self):
        """(x-2)^2 on [0,5] reaches ~0."""
        assert minimize(f1, 0.0, 5.0, 1e-4) == pytest.approx(0.0, abs=1e-3)

    def test_sine(self):
        """sin on [0, 2*pi] reaches ~-1."""
        assert minimize(f2, 0.0, 2.0 * math.pi, 1e-5) == pytest.approx(-1.0, abs=1e-3)

    def test_returns_float(self):
        """Result is a plain float."""
        assert isinstance(minimize(f1, 0.0, 5.0, 1e-3), float)

    def test_deterministic(self):
        """Two calls with identical inputs agree exactly."""
        assert minimize(f3, 2.7, 7.5, 1e-4) == minimize(f3, 2.7, 7.5, 1e-4)

    def test_epsilon_wider_than_interval(self):
        """First iteration stops and returns f(b)."""
        result = run_strongin(f1, 0.0, 5.0, 10.0)
        assert result.n_iter == 1
        assert result.f_star == f1(5.0) == 9.0
        assert result.x_star == 5.0
        assert result.stopped_by == "epsilon"

    def test_iteration_cap_returns_nan(self):
        """Hitting max_iter is reported as NaN, not an exception."""
        result = run_strongin(f1, 0.0, 5.0, 1e-12, max_iter=10)
        assert math.isnan(result.f_star)
        assert math.isnan(result.x_star)
        assert result.n_iter == 10
        assert result.stopped_by == "max_iter"
        assert not result.converged

    def test_nan_function_stops_with_nan(self):
        """No finite characteristic ends the run with NaN."""
        result = run_strongin(_nan_function, 0.0, 1.0, 1e-3)
        assert math.isnan(result.f_star)
        assert result.stopped_by == STOP_NAN
        assert result.n_iter == 1

    def test_function_errors_propagate(self):
        """Exceptions raised by f are not swallowed."""
        with pytest.raises(ZeroDivisionError):
            minimize(_raising_function, 0.0, 1.0, 1e-3)

    def test_calls_are_independent(self):
        """No state leaks between runs on different functions."""
        first = minimize(f1, 0.0, 5.0, 1e-3)
        minimize(f2, 0.0, 2.0 * math.pi, 1e-3)
        assert minimize(f1, 0.0, 5.0, 1e-3) == first


# ==========================================
# Invalid input
# ==========================================


class TestValidation:
    """Test argument checks."""

    def test_reversed_interval(self):
        """a must be strictly less than b."""
        with pytest.raises(ValueError):
            minimize(f1, 5.0, 0.0, 1e-3)

    def test_empty_interval(self):
        """a == b is rejected."""
        with pytest.raises(ValueError):
            minimize(f1, 1.0, 1.0, 1e-3)

    @pytest.mark.parametrize("epsilon", [0.0, -1e-3])
    def test_non_positive_epsilon(self, epsilon):
        """epsilon must be positive."""
        with pytest.raises(ValueError):
            minimize(f1, 0.0, 5.0, epsilon)

    def test_reliability_must_exceed_one(self):
        """r <= 1 is rejected when the method is built."""
        with pytest.raises(ValueError):
            StronginMethod(f1, options={"r": 1.0})

    def test_non_positive_max_iter(self):
        """The iteration cap must be positive."""
        with pytest.raises(ValueError):
            run_strongin(f1, 0.0, 5.0, 1e-3, max_iter=0)

    def test_unknown_backend(self):
        """Only threads and processes are supported."""
        with pytest.raises(ValueError):
            run_strongin_group(f1, 0.0, 5.0, 1e-3, workers=2, backend="gpu")


# ==========================================
# Partition invariants
# ==========================================


class TestPartition:
    """Test the segment list maintained by the method."""

    def test_segments_tile_the_interval(self):
        """Segments stay disjoint and cover [a, b] exactly."""
        method = StronginMethod(f3)
        OptimizationEngine().run(method, 2.7, 7.5, 1e-3)

        ordered = sorted(method.segments, key=lambda s: s.begin)
        assert ordered[0].begin == 2.7
        assert ordered[-1].end == 7.5
        for left, right in zip(ordered, ordered[1:]):
            assert left.end == right.begin
        assert all(s.begin < s.end for s in ordered)

    def test_one_new_segment_per_split(self):
        """n iterations ending on epsilon leave n segments."""
        result = run_strongin(f3, 2.7, 7.5, 1e-3)
        assert result.converged
        assert result.n_segments == result.n_iter

    def test_first_iteration_uses_whole_interval(self):
        """Iteration 1 splits [a, b] at the midpoint-corrected point."""
        result = run_strongin(f1, 0.0, 5.0, 1e-3)
        first = result.iterations[0]
        assert first.segment == (0.0, 5.0)
        # M = |9 - 4| / 5 = 1, m = 2, yₙ = 2.5 + 5/4
        assert first.M == pytest.approx(1.0)
        assert first.m == pytest.approx(2.0)
        assert first.x == pytest.approx(3.75)

    def test_degenerate_split_stops(self):
        """A segment one ulp wide cannot be split further."""
        method = StronginMethod(lambda x: 0.0)
        method.reset()
        method.initialize(0.0, 2.0, 1e-300)
        method.segments = [Segment(1.0, 1.0 + sys.float_info.epsilon)]

        step = method.step()

        assert step.meta["stopped_by"] == STOP_DEGENERATE
        assert math.isnan(step.x_new)
        assert len(method.segments) == 1


# ==========================================
# Distributed minimize
# ==========================================


class TestDistributed:
    """Test that every group size reproduces the sequential result."""

    @pytest.mark.parametrize("workers", [1, 2, 3, 4])
    def test_all_workers_agree_with_sequential(self, workers):
        """Every worker returns exactly the sequential value."""
        expected = minimize(f3, 2.7, 7.5, 1e-4)
        results = run_threaded(workers, _distributed, f3, 2.7, 7.5, 1e-4, timeout=TIMEOUT)
        assert results == [expected] * workers

    @pytest.mark.parametrize("workers", [2, 4])
    def test_group_trace_matches_sequential(self, workers):
        """Coordinator trace has the same iterations and trial points."""
        seq = run_strongin(f2, 0.0, 2.0 * math.pi, 1e-4, strategy=SequentialStrategy())
        par, f_stars = run_strongin_group(f2, 0.0, 2.0 * math.pi, 1e-4, workers=workers, timeout=TIMEOUT)

        assert par.n_iter == seq.n_iter
        assert [it.x for it in par.iterations] == [it.x for it in seq.iterations]
        assert f_stars == [seq.f_star] * workers

    def test_more_workers_than_segments(self):
        """Early iterations with idle workers still agree."""
        expected = minimize(f1, 0.0, 5.0, 1e-3)
        results = run_threaded(6, _distributed, f1, 0.0, 5.0, 1e-3, timeout=TIMEOUT)
        assert results == [expected] * 6

    def test_nan_function_on_group(self):
        """All workers agree on the NaN result."""
        results = run_threaded(3, _distributed, _nan_function, 0.0, 1.0, 1e-3, timeout=TIMEOUT)
        assert all(math.isnan(value) for value in results)

    def test_worker_error_reaches_launcher(self):
        """An exception in f on any worker fails the whole group."""
        with pytest.raises(CommunicationError):
            run_threaded(2, _distributed, _raising_function, 0.0, 1.0, 1e-3, timeout=5.0)

    def test_process_group(self):
        """Process-backed group agrees with the sequential run."""
        tf = FUNCTIONS["f1"]
        expected = minimize(tf.func, tf.a, tf.b, 1e-3)
        result, f_stars = run_strongin_group(
            tf.func, tf.a, tf.b, 1e-3, workers=2, backend="processes", timeout=TIMEOUT,
        )
        assert result.f_star == expected
        assert f_stars == [expected, expected]
