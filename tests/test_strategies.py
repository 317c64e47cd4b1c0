"""Tests for the per-iteration subcomputations and their execution strategies."""
import math

import pytest

from strongin_app.core.comm import SoloCommunicator, run_threaded
from strongin_app.core.functions import f3
from strongin_app.core.segment import CharacteristicRecord, Segment
from strongin_app.core.strategies import (
    ExecutionMode,
    ParallelStrategy,
    SequentialStrategy,
    calculate_m,
    calculate_M,
    characteristic,
    index_of_max_R,
    make_strategy,
)

TIMEOUT = 30.0
R = 2.0


def _segments(points):
    """Helper: adjacent segments between consecutive points."""
    return [Segment(b, e) for b, e in zip(points[:-1], points[1:])]


def _shuffled_f3_segments():
    """Helper: a realistic, non-sorted partition of [2.7, 7.5]."""
    points = [2.7, 3.1, 3.35, 4.0, 4.6, 5.05, 5.2, 5.9, 6.4, 7.0, 7.5]
    segs = _segments(points)
    # Порядок у списку не збігається з порядком на осі
    return segs[::2] + segs[1::2]


def _constant(x):
    return 0.0


def _parallel_round(comm, f, segments, r):
    """Helper target: one M + max-R round on a worker group."""
    strategy = ParallelStrategy(comm)
    M = strategy.broadcast_M(strategy.calculate_M(f, segments))
    m = calculate_m(M, r)
    record = strategy.broadcast_record(strategy.index_of_max_R(f, segments, m))
    return M, record


def _sequential_round(f, segments, r):
    M = calculate_M(f, segments)
    return M, index_of_max_R(f, segments, calculate_m(M, r))


# ==========================================
# Sequential forms
# ==========================================


class TestCalculateM:
    """Test the Lipschitz estimate."""

    def test_linear_function(self):
        """Slope of a line is its Lipschitz constant."""
        assert calculate_M(lambda x: 3.0 * x - 1.0, _segments([0.0, 1.0, 3.0])) == pytest.approx(3.0)

    def test_takes_the_steepest_segment(self):
        """For x^2 on [0,1],[1,2] slopes are 1 and 3."""
        assert calculate_M(lambda x: x * x, _segments([0.0, 1.0, 2.0])) == pytest.approx(3.0)

    def test_absolute_value_of_slope(self):
        """Decreasing segments count by magnitude."""
        assert calculate_M(lambda x: -5.0 * x, _segments([0.0, 2.0])) == pytest.approx(5.0)

    def test_empty_list_is_zero(self):
        """No segments, no slope."""
        assert calculate_M(_constant, []) == 0.0

    def test_nan_terms_are_skipped(self):
        """NaN slopes never win the strict comparison."""
        assert calculate_M(lambda x: math.nan, _segments([0.0, 1.0, 2.0])) == 0.0


class TestCalculateLowerM:
    """Test the corrected estimate m."""

    def test_zero_M_gives_one(self):
        """Flat function falls back to m = 1."""
        assert calculate_m(0.0, R) == 1.0

    def test_scaled_by_r(self):
        """m = r * M otherwise."""
        assert calculate_m(1.5, 2.0) == 3.0
        assert calculate_m(1.5, 3.0) == 4.5

    def test_negative_M_is_a_precondition_failure(self):
        """M < 0 violates an internal precondition."""
        with pytest.raises(AssertionError):
            calculate_m(-1.0, R)

    def test_r_not_above_one_is_a_precondition_failure(self):
        """r <= 1 violates an internal precondition."""
        with pytest.raises(AssertionError):
            calculate_m(1.0, 1.0)


class TestCharacteristic:
    """Test the characteristic R of a single segment."""

    def test_linear_segment(self):
        """f(x)=x on [0,1], m=2: 2 + 1/2 - 2*(1+0) = 0.5."""
        assert characteristic(lambda x: x, 0.0, 1.0, 2.0) == pytest.approx(0.5)

    def test_flat_segment(self):
        """Constant zero function: R = m * length."""
        assert characteristic(_constant, 1.0, 4.0, 1.0) == pytest.approx(3.0)

    def test_lower_values_give_larger_R(self):
        """Segments over lower function values are more promising."""
        low = characteristic(lambda x: -10.0, 0.0, 1.0, 1.0)
        high = characteristic(lambda x: 10.0, 0.0, 1.0, 1.0)
        assert low > high


class TestIndexOfMaxR:
    """Test the sequential selector."""

    def test_longest_flat_segment_wins(self):
        """With constant f the longest segment has the largest R."""
        record = index_of_max_R(_constant, _segments([0.0, 1.0, 3.5, 4.0]), 1.0)
        assert record.index == 1
        assert record.value == pytest.approx(2.5)

    def test_ties_go_to_first_segment(self):
        """Strict comparison keeps the earliest of equal maxima."""
        record = index_of_max_R(_constant, _segments([0.0, 1.0, 2.0, 3.0]), 1.0)
        assert record.index == 0

    def test_empty_list_not_found(self):
        """Nothing to select gives the sentinel record."""
        assert index_of_max_R(_constant, [], 1.0) == CharacteristicRecord()

    def test_all_nan_not_found(self):
        """NaN characteristics never beat the initial record."""
        record = index_of_max_R(lambda x: math.nan, _segments([0.0, 1.0, 2.0]), 1.0)
        assert not record.found


# ==========================================
# Parallel strategy
# ==========================================


class TestParallelStrategy:
    """Test that the distributed round matches the sequential one exactly."""

    @pytest.mark.parametrize("workers", [1, 2, 3, 4, 5])
    def test_matches_sequential(self, workers):
        """Same M and same record on every worker, for any group size."""
        segments = _shuffled_f3_segments()
        expected = _sequential_round(f3, segments, R)

        results = run_threaded(workers, _parallel_round, f3, segments, R, timeout=TIMEOUT)

        assert results == [expected] * workers

    @pytest.mark.parametrize("workers", [3, 5, 8])
    def test_more_workers_than_segments(self, workers):
        """Idle workers neither send nor receive slices."""
        segments = _segments([0.0, 1.0, 3.0])
        expected = _sequential_round(_constant, segments, R)

        results = run_threaded(workers, _parallel_round, _constant, segments, R, timeout=TIMEOUT)

        assert results == [expected] * workers
        assert results[0][1].index == 1

    def test_winner_in_later_slice_gets_global_index(self):
        """Local index is shifted by the work of the preceding workers."""
        # Розподіл (2, 2, 2): максимум на третьому воркері, локальний індекс 0
        segments = _segments([0.0, 1.0, 2.0, 3.0, 4.0, 6.0, 8.0])
        results = run_threaded(3, _parallel_round, _constant, segments, R, timeout=TIMEOUT)
        assert results[0][1].index == 4

    def test_tie_across_workers_goes_to_lowest_index(self):
        """Equal maxima on several workers resolve to the first segment."""
        segments = _segments([0.0, 1.0, 2.0, 3.0, 4.0, 5.0])
        results = run_threaded(4, _parallel_round, _constant, segments, R, timeout=TIMEOUT)
        assert all(record.index == 0 for _, record in results)

    def test_nan_function_not_found_everywhere(self):
        """All-NaN characteristics give index -1 on every worker."""
        nan_f = lambda x: math.nan  # noqa: E731
        segments = _segments([0.0, 1.0, 2.0, 3.0])
        results = run_threaded(2, _parallel_round, nan_f, segments, R, timeout=TIMEOUT)
        assert all(not record.found for _, record in results)

    def test_solo_group_behaves_sequentially(self):
        """A parallel strategy over one worker is the sequential computation."""
        segments = _shuffled_f3_segments()
        assert _parallel_round(SoloCommunicator(), f3, segments, R) == _sequential_round(f3, segments, R)


# ==========================================
# Factory
# ==========================================


class TestMakeStrategy:
    """Test strategy construction from a mode."""

    def test_sequential(self):
        """Mode string maps to SequentialStrategy."""
        assert isinstance(make_strategy("sequential"), SequentialStrategy)

    def test_parallel_without_comm_uses_solo(self):
        """Parallel mode defaults to a one-worker group."""
        strategy = make_strategy(ExecutionMode.PARALLEL)
        assert isinstance(strategy, ParallelStrategy)
        assert isinstance(strategy.comm, SoloCommunicator)

    def test_unknown_mode_raises(self):
        """Unknown mode names are rejected."""
        with pytest.raises(ValueError):
            make_strategy("gpu")
