"""Tests for the iteration engine: trace, callback and stop reasons."""
import logging
import math

import pytest

from strongin_app.core.engine import MAX_ITERATIONS, OptimizationEngine
from strongin_app.core.functions import f1
from strongin_app.core.iteration_result import IterationResult
from strongin_app.core.optimizer_base import Optimizer, StepResult
from strongin_app.core.strongin import StronginMethod


class _Endless(Optimizer):
    """Helper optimizer that never stops on its own."""

    def _step_impl(self):
        return StepResult(x_new=self.a, f_new=None, segment_length=1.0)


class _Broken(Optimizer):
    """Helper optimizer returning the wrong type."""

    def _step_impl(self):
        return {"x": 1.0}


# ==========================================
# Trace and callback
# ==========================================


class TestTrace:
    """Test per-iteration records."""

    def test_callback_sees_every_iteration(self):
        """Callback receives the same records kept in the trace."""
        seen = []
        result = OptimizationEngine().run(StronginMethod(f1), 0.0, 5.0, 1e-3, callback=seen.append)
        assert seen == result.iterations
        assert [it.index for it in seen] == list(range(1, result.n_iter + 1))

    def test_records_carry_method_quantities(self):
        """M, m, R and the chosen segment are lifted out of meta."""
        result = OptimizationEngine().run(StronginMethod(f1), 0.0, 5.0, 1e-3)
        for it in result.iterations:
            assert isinstance(it, IterationResult)
            assert it.M >= 0.0
            assert it.m > 0.0
            assert math.isfinite(it.R)
            assert it.segment_length > 0.0
            assert "M" not in it.meta
            assert "segment" not in it.meta

    def test_last_record_marks_stop(self):
        """Only the final record carries stopped_by."""
        result = OptimizationEngine().run(StronginMethod(f1), 0.0, 5.0, 1e-3)
        assert result.iterations[-1].meta["stopped_by"] == "epsilon"
        assert all("stopped_by" not in it.meta for it in result.iterations[:-1])
        assert result.iterations[-1].segment_length < 1e-3

    def test_func_evals_counted(self):
        """Every call of f on this worker is counted."""
        calls = []

        def counted(x):
            calls.append(x)
            return f1(x)

        result = OptimizationEngine().run(StronginMethod(counted), 0.0, 5.0, 1e-2)
        assert result.func_evals == len(calls)


# ==========================================
# Stop reasons
# ==========================================


class TestStopReasons:
    """Test how the engine ends a run."""

    def test_default_cap(self):
        """Default cap is 100000 iterations."""
        assert OptimizationEngine().max_iter_default == MAX_ITERATIONS == 100000

    def test_max_iter_override(self):
        """run(max_iter=...) overrides the constructor default."""
        result = OptimizationEngine(max_iter=50).run(_Endless(f1), 0.0, 1.0, 1e-3, max_iter=7)
        assert result.n_iter == 7
        assert result.stopped_by == "max_iter"
        assert math.isnan(result.f_star)

    def test_exhaustion_logged_as_warning(self, caplog):
        """Running out of iterations is a warning."""
        with caplog.at_level(logging.WARNING, logger="strongin_app.core.engine"):
            OptimizationEngine(max_iter=3).run(_Endless(f1), 0.0, 1.0, 1e-3)
        assert any("max_iter" in rec.getMessage() for rec in caplog.records)

    def test_convergence_logged_as_info(self, caplog):
        """Convergence is reported at INFO."""
        with caplog.at_level(logging.INFO, logger="strongin_app.core.engine"):
            OptimizationEngine().run(StronginMethod(f1), 0.0, 5.0, 1e-2)
        assert any(rec.levelno == logging.INFO for rec in caplog.records)

    def test_wrong_step_type_raises(self):
        """A step must return StepResult."""
        with pytest.raises(TypeError):
            OptimizationEngine().run(_Broken(f1), 0.0, 1.0, 1e-3)

    def test_segment_count_without_segments(self):
        """Optimizers without a partition report zero segments."""
        result = OptimizationEngine().run(_Endless(f1), 0.0, 1.0, 1e-3, max_iter=2)
        assert result.n_segments == 0
