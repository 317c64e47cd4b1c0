"""
optimizer_base.py

Базові класи та типи для методів одномірної глобальної оптимізації (Strategy).

Ідея:
    - Є абстрактний клас Optimizer, від якого наслідуються конкретні методи
      (StronginMethod у strongin.py).
    - Стан методу (розбиття відрізка [a, b] на підвідрізки) живе всередині
      об'єкта; initialize(a, b, epsilon) його створює, step() виконує одну
      ітерацію.
    - Кожен метод реалізує _step_impl(), а движок викликає step().

Формат:
    step() -> StepResult
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

ScalarFunction = Callable[[float], float]


# ---------------------------------------------------------------------------
# Результат одного кроку методу
# ---------------------------------------------------------------------------

@dataclass
class StepResult:
    """
    Результат однієї ітерації.

    Атрибути:
        x_new          - нова точка випробування yₙ; на зупинці — кінець
                         обраного відрізка (або NaN, якщо відрізок не обрано)
        f_new          - f(x_new), якщо значення обчислювалось на цьому кроці
        segment_length - довжина обраного відрізка
        meta           - додаткова інформація (M, m, R, індекс відрізка,
                         причина зупинки "stopped_by", ...)
    """
    x_new: float
    f_new: Optional[float]
    segment_length: float
    meta: Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Базовий клас Optimizer (Strategy)
# ---------------------------------------------------------------------------

class Optimizer(ABC):
    """
    Абстрактний базовий клас для методів пошуку мінімуму на відрізку.

    Використання:
        opt = StronginMethod(func=..., strategy=..., options={...})
        opt.reset()
        opt.initialize(a, b, epsilon)
        res = opt.step()  # StepResult
    """

    def __init__(
        self,
        func: ScalarFunction,
        options: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        self.func = func
        self.options: Dict[str, Any] = options or {}
        self.name: str = name or self.__class__.__name__

        # Лічильник викликів цільової функції (на цьому воркері)
        self.func_evals: int = 0

        self.a: float = math.nan
        self.b: float = math.nan
        self.epsilon: float = math.nan

        self.state: Dict[str, Any] = {}

    def eval_f(self, x: float) -> float:
        """Обчислити f(x) та збільшити лічильник викликів функції."""
        self.func_evals += 1
        return float(self.func(x))

    # ------------------------------------------------------------------
    # Життєвий цикл методу
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Скинути лічильники та внутрішній стан перед новим запуском."""
        self.func_evals = 0
        self.state.clear()

    def initialize(self, a: float, b: float, epsilon: float) -> None:
        """
        Перевірити вхідні дані та запам'ятати відрізок пошуку.

        Дочірні класи доповнюють цей метод створенням власного стану.
        """
        a = float(a)
        b = float(b)
        epsilon = float(epsilon)

        if not a < b:
            raise ValueError(
                f"{self.name}: ліва межа інтервалу повинна бути меншою за праву (a < b), "
                f"отримано a={a}, b={b}."
            )
        if not epsilon > 0:
            raise ValueError(f"{self.name}: точність epsilon повинна бути додатною, отримано {epsilon}.")

        self.a = a
        self.b = b
        self.epsilon = epsilon

    def step(self) -> StepResult:
        """Виконати одну ітерацію методу."""
        result = self._step_impl()

        if not isinstance(result, StepResult):
            raise TypeError(
                f"{self.__class__.__name__}._step_impl() "
                f"повинен повертати StepResult, отримано: {type(result)}"
            )

        return result

    @abstractmethod
    def _step_impl(self) -> StepResult:
        raise NotImplementedError


__all__ = [
    "ScalarFunction",
    "StepResult",
    "Optimizer",
]
