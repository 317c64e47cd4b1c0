"""Tests for ResultsSummary across execution modes."""
import math

import pytest

from strongin_app.core.engine import OptimizationRunResult
from strongin_app.core.results_summary import ResultsSummary, RunRecord


def _make_result(f_star=0.5, x_star=1.25, stopped_by="epsilon", n_iter=40) -> OptimizationRunResult:
    """Helper to create a run result without running the method."""
    return OptimizationRunResult(
        method_name="Strongin",
        iterations=[],
        x_star=x_star,
        f_star=f_star,
        n_iter=n_iter,
        func_evals=4 * n_iter,
        n_segments=n_iter,
        stopped_by=stopped_by,
    )


class TestRunRecord:
    """Test labels of individual runs."""

    def test_sequential_label(self):
        """Sequential runs show only the mode."""
        assert RunRecord("sequential", 1, _make_result()).label == "Strongin (sequential)"

    def test_parallel_label(self):
        """Distributed runs show workers and backend."""
        record = RunRecord("parallel", 4, _make_result(), backend="threads")
        assert record.label == "Strongin (parallel, 4 × threads)"


class TestResultsSummary:
    """Test table rows and best-run selection."""

    def test_rows(self):
        """One row per run with the summary columns."""
        summary = ResultsSummary()
        summary.add_run(RunRecord("sequential", 1, _make_result()))
        summary.add_run(RunRecord("parallel", 2, _make_result(), backend="threads"))

        rows = summary.as_rows()

        assert len(rows) == 2
        assert rows[1]["workers"] == 2
        assert rows[1]["backend"] == "threads"
        assert rows[0]["f_star"] == 0.5
        assert rows[0]["func_evals"] == 160
        assert rows[0]["stopped_by"] == "epsilon"

    def test_best_ignores_nan(self):
        """Runs without convergence never win."""
        summary = ResultsSummary()
        summary.add_run(RunRecord("sequential", 1, _make_result(f_star=math.nan, stopped_by="max_iter")))
        summary.add_run(RunRecord("parallel", 2, _make_result(f_star=0.3), backend="threads"))
        summary.add_run(RunRecord("parallel", 4, _make_result(f_star=0.7), backend="threads"))

        best = summary.best_by_f()

        assert best is not None
        assert best.workers == 2

    def test_best_of_all_nan_is_none(self):
        """Nothing converged, nothing to pick."""
        summary = ResultsSummary()
        summary.add_run(RunRecord("sequential", 1, _make_result(f_star=math.nan, stopped_by="nan")))
        assert summary.best_by_f() is None

    def test_to_dataframe(self):
        """pandas export mirrors as_rows()."""
        pytest.importorskip("pandas")
        summary = ResultsSummary()
        summary.add_run(RunRecord("sequential", 1, _make_result()))
        df = summary.to_dataframe()
        assert list(df["mode"]) == ["sequential"]
