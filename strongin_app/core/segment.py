"""
segment.py

Базові структури даних методу Стронгіна:

    Segment              – відрізок [begin, end] між двома сусідніми точками
                           випробувань;
    CharacteristicRecord – пара (значення характеристики R, індекс відрізка).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List

# Початкове значення для пошуку максимуму характеристики
# (аналог -DBL_MAX: будь-яке скінченне R його перевищує).
LOWEST_CHARACTERISTIC = -sys.float_info.max


@dataclass
class Segment:
    """
    Відрізок пошукової області між двома вже обчисленими точками.

    Атрибути:
        begin - ліва межа
        end   - права межа (begin < end)
    """
    begin: float
    end: float

    @property
    def length(self) -> float:
        return self.end - self.begin


@dataclass(frozen=True)
class CharacteristicRecord:
    """
    Найкраща характеристика та позиція її відрізка.

    Атрибути:
        value - значення характеристики R
        index - індекс відрізка (-1, якщо жодна характеристика не знайдена)
    """
    value: float = LOWEST_CHARACTERISTIC
    index: int = -1

    @property
    def found(self) -> bool:
        return self.index >= 0


SegmentList = List[Segment]


__all__ = [
    "LOWEST_CHARACTERISTIC",
    "Segment",
    "CharacteristicRecord",
    "SegmentList",
]
