"""
functions.py

Тестові одномірні цільові функції для методу глобального пошуку.

Формат:
    - усі функції працюють зі скаляром x: float і повертають float;
    - для кожної функції задано відрізок пошуку [a, b] за замовчуванням;
    - є реєстр FUNCTIONS для зручного вибору функції в GUI/движку.

Функції визначені на рівні модуля, тому їх можна передавати
у воркери-процеси (pickle).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

import numpy as np

ScalarFunction = Callable[[float], float]


# ---------------------------------------------------------------------------
# Цільові функції f1–f6
# ---------------------------------------------------------------------------

def f1(x: float) -> float:
    """
    f1(x) = (x - 2)^2
    (унімодальна парабола, мінімум 0 у x = 2)
    """
    return (x - 2.0) ** 2


def f2(x: float) -> float:
    """
    f2(x) = sin(x)
    (на [0, 2π] мінімум -1 у x = 3π/2)
    """
    return float(np.sin(x))


def f3(x: float) -> float:
    """
    f3(x) = sin(x) + sin(10x/3)
    (на [2.7, 7.5] кілька локальних мінімумів, глобальний ≈ -1.8996 у x ≈ 5.1457)
    """
    return float(np.sin(x) + np.sin(10.0 * x / 3.0))


def f4(x: float) -> float:
    """
    f4(x) = x * sin(x)
    (на [0, 8] глобальний мінімум ≈ -4.8145 у x ≈ 4.9132)
    """
    return float(x * np.sin(x))


def f5(x: float) -> float:
    """
    f5(x) = x^2 - 10*cos(2πx) + 10
    (одномірна функція Растрігіна, мінімум 0 у x = 0)
    """
    return float(x ** 2 - 10.0 * np.cos(2.0 * np.pi * x) + 10.0)


def f6(x: float) -> float:
    """
    f6(x) = -Σ_{k=1..5} k * sin((k + 1)x + k)
    (функція Шуберта, багато локальних мінімумів на [-10, 10])
    """
    return float(-sum(k * np.sin((k + 1) * x + k) for k in range(1, 6)))


# ---------------------------------------------------------------------------
# Реєстр функцій для вибору в GUI / движку
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TargetFunction:
    key: str
    name: str
    func: ScalarFunction
    a: float
    b: float


FUNCTIONS: Dict[str, TargetFunction] = {
    "f1": TargetFunction(
        key="f1",
        name="f1(x) = (x - 2)^2",
        func=f1,
        a=0.0,
        b=5.0,
    ),
    "f2": TargetFunction(
        key="f2",
        name="f2(x) = sin(x)",
        func=f2,
        a=0.0,
        b=2.0 * np.pi,
    ),
    "f3": TargetFunction(
        key="f3",
        name="f3(x) = sin(x) + sin(10x/3)",
        func=f3,
        a=2.7,
        b=7.5,
    ),
    "f4": TargetFunction(
        key="f4",
        name="f4(x) = x * sin(x)",
        func=f4,
        a=0.0,
        b=8.0,
    ),
    "f5": TargetFunction(
        key="f5",
        name="f5(x) = x^2 - 10*cos(2πx) + 10",
        func=f5,
        a=-5.12,
        b=5.12,
    ),
    "f6": TargetFunction(
        key="f6",
        name="f6(x) = -Σ k*sin((k+1)x + k), k = 1..5",
        func=f6,
        a=-10.0,
        b=10.0,
    ),
}

__all__ = [
    "ScalarFunction",
    "f1", "f2", "f3", "f4", "f5", "f6",
    "TargetFunction",
    "FUNCTIONS",
]
