"""
results_summary.py

Зведена таблиця результатів запусків методу Стронгіна для однієї цільової
функції в різних режимах виконання (послідовно / N воркерів).

Працює поверх об'єктів RunRecord, які обгортають OptimizationRunResult
разом з описом режиму.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .engine import OptimizationRunResult


@dataclass
class RunRecord:
    """
    Один запуск у зведенні.

    Атрибути:
        mode    - режим виконання ("sequential" / "parallel")
        workers - кількість воркерів
        backend - "threads" / "processes" / None для послідовного режиму
        result  - OptimizationRunResult координатора
    """
    mode: str
    workers: int
    result: OptimizationRunResult
    backend: Optional[str] = None

    @property
    def label(self) -> str:
        if self.workers == 1 and self.backend is None:
            return f"{self.result.method_name} ({self.mode})"
        return f"{self.result.method_name} ({self.mode}, {self.workers} × {self.backend})"


@dataclass
class ResultsSummary:
    """
    Зведення результатів кількох запусків.

    Приклад використання:
        summary = ResultsSummary()
        summary.add_run(RunRecord("sequential", 1, run_seq))
        summary.add_run(RunRecord("parallel", 4, run_par, backend="threads"))
        rows = summary.as_rows()  # для GUI / pandas / CSV
    """
    runs: List[RunRecord] = field(default_factory=list)

    def add_run(self, run: RunRecord) -> None:
        """Додати результат одного запуску до зведення."""
        self.runs.append(run)

    # ------------------------------------------------------------------
    # Перетворення в "табличний" вигляд
    # ------------------------------------------------------------------

    def as_rows(self) -> List[Dict[str, Any]]:
        """
        Повернути список dict-рядків з полями:
            label, mode, workers, backend, x_star, f_star, n_iter,
            func_evals, n_segments, stopped_by
        """
        rows: List[Dict[str, Any]] = []

        for run in self.runs:
            res = run.result
            rows.append(
                {
                    "label": run.label,
                    "mode": run.mode,
                    "workers": int(run.workers),
                    "backend": run.backend,
                    "x_star": float(res.x_star),
                    "f_star": float(res.f_star),
                    "n_iter": int(res.n_iter),
                    "func_evals": int(res.func_evals),
                    "n_segments": int(res.n_segments),
                    "stopped_by": res.stopped_by,
                }
            )

        return rows

    # ------------------------------------------------------------------
    # Вибір "найкращого" запуску
    # ------------------------------------------------------------------

    def best_by_f(self) -> Optional[RunRecord]:
        """
        Повернути запуск з найменшим f_star.
        Запуски, що не зійшлися (f_star = NaN), ігноруються.
        """
        best_run = None
        best_f = None

        for run in self.runs:
            f_val = float(run.result.f_star)
            if math.isnan(f_val):
                continue
            if best_f is None or f_val < best_f:
                best_f = f_val
                best_run = run

        return best_run

    def to_dataframe(self):
        """
        Повернути pandas.DataFrame зі зведеною таблицею.

        Вимога: встановлений пакет pandas.
        """
        try:
            import pandas as pd  # type: ignore
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError(
                "Для використання ResultsSummary.to_dataframe() "
                "потрібно встановити пакет 'pandas'."
            ) from exc

        return pd.DataFrame(self.as_rows())


__all__ = ["RunRecord", "ResultsSummary"]
