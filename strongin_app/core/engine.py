"""
engine.py

Ітераційний двигун для запуску методів одномірної оптимізації (Optimizer).

Функціонал:
    - виконує step() до зупинки методу або до max_iter ітерацій;
    - формує трасу ітерацій (для таблиць і графіків);
    - рахує кількість викликів цільової функції;
    - фіксує причину зупинки ("epsilon", "max_iter", "nan", "degenerate");
    - підтримує callback для оновлення GUI / логів на кожній ітерації.

Якщо метод не зійшовся, x_star та f_star дорівнюють NaN — це сигнал про
невдалий розрахунок, а не виняток.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from .iteration_result import IterationResult
from .optimizer_base import Optimizer, StepResult

logger = logging.getLogger(__name__)

# Гранична кількість ітерацій за замовчуванням
MAX_ITERATIONS = 100000

STOP_EPSILON = "epsilon"
STOP_MAX_ITER = "max_iter"


@dataclass
class OptimizationRunResult:
    """
    Підсумок одного запуску оптимізації.

    Атрибути:
        method_name - назва методу (Optimizer.name)
        iterations  - список IterationResult (траса процесу)
        x_star      - кінець відрізка, на якому метод зупинився (NaN без збіжності)
        f_star      - оцінка мінімуму f(x_star) (NaN без збіжності)
        n_iter      - кількість виконаних ітерацій
        func_evals  - кількість викликів цільової функції на цьому воркері
        n_segments  - кількість відрізків розбиття на момент зупинки
        stopped_by  - причина зупинки
    """
    method_name: str
    iterations: List[IterationResult]
    x_star: float
    f_star: float
    n_iter: int
    func_evals: int
    n_segments: int
    stopped_by: str

    @property
    def converged(self) -> bool:
        return self.stopped_by == STOP_EPSILON


# Тип callback'а для GUI/логів
IterationCallback = Callable[[IterationResult], None]


class OptimizationEngine:
    """
    Движок, який керує ітераційним процесом для заданого Optimizer.

    Налаштування за замовчуванням (можуть бути переозначені у run()):
        max_iter : максимальна кількість ітерацій (default: 100000)
    """

    def __init__(self, max_iter: int = MAX_ITERATIONS) -> None:
        self.max_iter_default = max_iter

    def run(
        self,
        optimizer: Optimizer,
        a: float,
        b: float,
        epsilon: float,
        max_iter: Optional[int] = None,
        callback: Optional[IterationCallback] = None,
    ) -> OptimizationRunResult:
        """
        Запустити пошук мінімуму на [a, b] з точністю epsilon.
        """
        max_iter = max_iter if max_iter is not None else self.max_iter_default
        if max_iter <= 0:
            raise ValueError(f"max_iter повинно бути додатним, отримано {max_iter}.")

        optimizer.reset()
        optimizer.initialize(a, b, epsilon)

        iterations: List[IterationResult] = []
        stopped_by: str = STOP_MAX_ITER
        x_star = math.nan
        f_star = math.nan

        for k in range(1, max_iter + 1):
            step_res: StepResult = optimizer.step()
            meta = dict(step_res.meta or {})

            rec = IterationResult(
                index=k,
                x=float(step_res.x_new),
                f=step_res.f_new,
                segment=meta.pop("segment", (math.nan, math.nan)),
                M=float(meta.pop("M", math.nan)),
                m=float(meta.pop("m", math.nan)),
                R=float(meta.pop("R", math.nan)),
                meta=meta,
            )
            iterations.append(rec)

            if callback is not None:
                callback(rec)

            method_stopped = meta.get("stopped_by")
            if method_stopped is not None:
                stopped_by = str(method_stopped)
                if stopped_by == STOP_EPSILON:
                    x_star = float(step_res.x_new)
                    f_star = float(step_res.f_new)
                break

        if stopped_by == STOP_EPSILON:
            logger.info(
                "%s: збіжність за %d ітерацій, f* = %.6e, x* = %.6f",
                optimizer.name, len(iterations), f_star, x_star,
            )
        else:
            logger.warning(
                "%s: розрахунок не зійшовся (stopped_by=%s) після %d ітерацій",
                optimizer.name, stopped_by, len(iterations),
            )

        return OptimizationRunResult(
            method_name=optimizer.name,
            iterations=iterations,
            x_star=x_star,
            f_star=f_star,
            n_iter=len(iterations),
            func_evals=optimizer.func_evals,
            n_segments=len(getattr(optimizer, "segments", ())),
            stopped_by=stopped_by,
        )


__all__ = [
    "MAX_ITERATIONS",
    "STOP_EPSILON",
    "STOP_MAX_ITER",
    "IterationCallback",
    "OptimizationRunResult",
    "OptimizationEngine",
]
