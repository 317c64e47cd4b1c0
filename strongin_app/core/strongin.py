"""
strongin.py

Метод Стронгіна (інформаційно-статистичний алгоритм глобального пошуку)
для одномірної функції на відрізку [a, b].

Одна ітерація:
    1) M   – оцінка константи Ліпшиця за поточним розбиттям (всі воркери),
             результат розсилається всім;
    2) m   – скоригована оцінка: 1, якщо M = 0, інакше r*M;
    3) R   – максимальна характеристика та індекс відрізка [y_begin, y_end]
             (всі воркери), запис розсилається всім;
    4) якщо y_end - y_begin < epsilon – зупинка, результат f(y_end);
    5) інакше нова точка
           yₙ = y_begin + (y_end - y_begin)/2 + (f(y_end) - f(y_begin)) / (2m),
       у кінець списку додається [y_begin, yₙ], а обраний відрізок стає [yₙ, y_end].

Кожен воркер тримає власну копію списку відрізків і змінює її однаково,
бо M та запис характеристики в усіх воркерів однакові.

Публічні точки входу:
    minimize(f, a, b, epsilon)                   – один воркер;
    minimize_distributed(f, a, b, epsilon, comm) – викликається кожним
                                                   воркером групи comm.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from .comm import Communicator, run_multiprocess, run_threaded
from .engine import MAX_ITERATIONS, STOP_EPSILON, OptimizationEngine, OptimizationRunResult
from .optimizer_base import Optimizer, ScalarFunction, StepResult
from .segment import Segment, SegmentList
from .strategies import (
    ExecutionStrategy,
    ParallelStrategy,
    SequentialStrategy,
    calculate_m,
)

logger = logging.getLogger(__name__)

# Коефіцієнт надійності r > 1 за замовчуванням
R_DEFAULT = 2.0

STOP_NAN = "nan"
STOP_DEGENERATE = "degenerate"


class StronginMethod(Optimizer):
    """
    Метод Стронгіна як стратегія Optimizer.

    Параметри:
        func     – цільова функція f: float -> float (чиста, без побічних ефектів);
        strategy – як рахувати M та max R (SequentialStrategy за замовчуванням);
        options  – словник налаштувань:
            r : коефіцієнт надійності, r > 1 (default: 2.0)
    """

    def __init__(
        self,
        func: ScalarFunction,
        strategy: Optional[ExecutionStrategy] = None,
        options: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(func=func, options=options, name=name or "Strongin")
        self.strategy: ExecutionStrategy = strategy if strategy is not None else SequentialStrategy()

        self.r: float = float(self.options.get("r", R_DEFAULT))
        if not self.r > 1:
            raise ValueError(f"{self.name}: коефіцієнт r повинен бути > 1, отримано {self.r}.")

        self.segments: SegmentList = []

    def reset(self) -> None:
        super().reset()
        self.segments = []

    def initialize(self, a: float, b: float, epsilon: float) -> None:
        super().initialize(a, b, epsilon)
        self.segments = [Segment(self.a, self.b)]

    def _stop(self, reason: str, meta: Dict[str, Any]) -> StepResult:
        meta["stopped_by"] = reason
        return StepResult(x_new=math.nan, f_new=math.nan, segment_length=math.nan, meta=meta)

    def _step_impl(self) -> StepResult:
        f = self.eval_f
        strategy = self.strategy
        segments = self.segments

        M = strategy.broadcast_M(strategy.calculate_M(f, segments))
        m = calculate_m(M, self.r)
        record = strategy.broadcast_record(strategy.index_of_max_R(f, segments, m))
        logger.debug("M = %r, m = %r, max R = %r (відрізок %d)", M, m, record.value, record.index)

        meta: Dict[str, Any] = {"M": M, "m": m, "R": record.value, "segment_index": record.index}

        if not record.found:
            # Жодна характеристика не скінченна (наприклад, f повертає NaN)
            return self._stop(STOP_NAN, meta)

        current = segments[record.index]
        y_begin = current.begin
        y_end = current.end
        meta["segment"] = (y_begin, y_end)

        if y_end - y_begin < self.epsilon:
            f_end = f(y_end)
            meta["stopped_by"] = STOP_EPSILON
            return StepResult(x_new=y_end, f_new=f_end, segment_length=y_end - y_begin, meta=meta)

        yn = y_begin + (y_end - y_begin) / 2 + (f(y_end) - f(y_begin)) / (2 * m)
        if not y_begin < yn < y_end:
            # Точність float64 вичерпана: нова точка не ділить відрізок
            return self._stop(STOP_DEGENERATE, meta)

        segments.append(Segment(y_begin, yn))
        current.begin = yn
        logger.debug("Поділ [%r, %r] у точці %r, відрізків: %d", y_begin, y_end, yn, len(segments))

        return StepResult(x_new=yn, f_new=None, segment_length=y_end - y_begin, meta=meta)


# ---------------------------------------------------------------------------
# Точки входу
# ---------------------------------------------------------------------------

def run_strongin(
    f: ScalarFunction,
    a: float,
    b: float,
    epsilon: float,
    strategy: Optional[ExecutionStrategy] = None,
    max_iter: int = MAX_ITERATIONS,
    r: float = R_DEFAULT,
    callback=None,
) -> OptimizationRunResult:
    """
    Повний запуск з трасою ітерацій (для GUI та звітів).

    Кожен виклик створює новий StronginMethod, тому стан між викликами
    не зберігається.
    """
    method = StronginMethod(func=f, strategy=strategy, options={"r": r})
    engine = OptimizationEngine(max_iter=max_iter)
    return engine.run(method, a, b, epsilon, callback=callback)


def minimize(f: ScalarFunction, a: float, b: float, epsilon: float) -> float:
    """
    Оцінка глобального мінімуму f на [a, b] одним воркером.

    Повертає NaN, якщо розрахунок не зійшовся за MAX_ITERATIONS ітерацій.
    """
    return run_strongin(f, a, b, epsilon, strategy=SequentialStrategy()).f_star


def minimize_distributed(
    f: ScalarFunction,
    a: float,
    b: float,
    epsilon: float,
    comm: Communicator,
) -> float:
    """
    Розподілена оцінка глобального мінімуму.

    Викликається кожним воркером групи comm з однаковими f, a, b, epsilon;
    усі воркери отримують однаковий результат (NaN, якщо не зійшлось).
    """
    return run_strongin(f, a, b, epsilon, strategy=ParallelStrategy(comm)).f_star


# ---------------------------------------------------------------------------
# Запуск групи воркерів (потоки / процеси)
# ---------------------------------------------------------------------------

BACKEND_THREADS = "threads"
BACKEND_PROCESSES = "processes"


def _group_worker(
    comm: Communicator,
    f: ScalarFunction,
    a: float,
    b: float,
    epsilon: float,
    max_iter: int,
    r: float,
):
    result = run_strongin(f, a, b, epsilon, strategy=ParallelStrategy(comm), max_iter=max_iter, r=r)
    # Повну трасу повертає лише координатор, решта повертає f*
    return result if comm.is_coordinator else result.f_star


def run_strongin_group(
    f: ScalarFunction,
    a: float,
    b: float,
    epsilon: float,
    workers: int,
    backend: str = BACKEND_THREADS,
    max_iter: int = MAX_ITERATIONS,
    r: float = R_DEFAULT,
    timeout: Optional[float] = None,
) -> Tuple[OptimizationRunResult, List[float]]:
    """
    Запустити розподілений метод на групі з workers воркерів.

    Повертає (результат координатора, список f* усіх воркерів за рангами).
    Для backend="processes" функція f повинна серіалізуватись pickle.
    """
    if backend == BACKEND_THREADS:
        launcher = run_threaded
    elif backend == BACKEND_PROCESSES:
        launcher = run_multiprocess
    else:
        raise ValueError(f"Невідомий backend: {backend}")

    results = launcher(
        workers, _group_worker, f, a, b, epsilon, max_iter, r, timeout=timeout,
    )
    coordinator_result: OptimizationRunResult = results[0]
    f_stars = [coordinator_result.f_star] + [float(value) for value in results[1:]]
    return coordinator_result, f_stars


__all__ = [
    "R_DEFAULT",
    "STOP_NAN",
    "STOP_DEGENERATE",
    "StronginMethod",
    "run_strongin",
    "minimize",
    "minimize_distributed",
    "BACKEND_THREADS",
    "BACKEND_PROCESSES",
    "run_strongin_group",
]
