"""
iteration_result.py

Структура даних для представлення окремих ітерацій методу Стронгіна.
Використовується як у движку, так і в GUI (таблиця, графіки).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass
class IterationResult:
    """
    Опис однієї ітерації.

    Атрибути:
        index    - номер ітерації (1, 2, ...)
        x        - нова точка випробування yₙ (на зупинці — кінець відрізка)
        f        - f(x), якщо обчислювалось на цій ітерації, інакше None
        segment  - обраний відрізок (begin, end) до поділу
        M        - оцінка константи Ліпшиця
        m        - скоригована оцінка r*M (або 1)
        R        - максимальна характеристика
        meta     - довільна додаткова інформація (індекс відрізка, stopped_by, ...)
    """
    index: int
    x: float
    f: Optional[float]
    segment: Tuple[float, float] = (math.nan, math.nan)
    M: float = math.nan
    m: float = math.nan
    R: float = math.nan
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def segment_length(self) -> float:
        return self.segment[1] - self.segment[0]


__all__ = [
    "IterationResult",
]
