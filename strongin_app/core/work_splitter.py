"""
work_splitter.py

Детермінований розподіл "одиниць роботи" (відрізків) між воркерами.

Ідея:
    - якщо одиниць роботи не більше, ніж воркерів, перші unit_count воркерів
      отримують по одній одиниці, решта — нуль;
    - інакше воркери обходяться по черзі, і кожен отримує
      (залишок роботи) // (кількість воркерів, що залишились).

Розподіл залежить лише від двох чисел, тому кожен воркер може незалежно
відтворити ті самі межі слайсів без жодного обміну повідомленнями.
"""

from __future__ import annotations

from typing import List, Tuple


class WorkSplitter:
    """
    Розбиття unit_count одиниць роботи між worker_count воркерами.

    Приклад:
        splitter = WorkSplitter(7, 3)
        splitter.distribution          # (2, 2, 3)
        splitter.get_part_work(1)      # 2
        splitter.get_prev_part_work(2) # 4
    """

    def __init__(self, unit_count: int, worker_count: int) -> None:
        if worker_count <= 0:
            raise ValueError(
                f"WorkSplitter: кількість воркерів повинна бути додатною, отримано {worker_count}."
            )
        if unit_count < 0:
            raise ValueError(
                f"WorkSplitter: обсяг роботи не може бути від'ємним, отримано {unit_count}."
            )

        self.unit_count = int(unit_count)
        self.worker_count = int(worker_count)
        self._distribution: List[int] = [0] * self.worker_count

        work = self.unit_count
        workers_left = self.worker_count

        if work <= workers_left:
            for worker in range(work):
                self._distribution[worker] = 1
        else:
            worker = 0
            while work != 0:
                part = work // workers_left
                self._distribution[worker] = part
                work -= part
                workers_left -= 1
                worker += 1

    @property
    def distribution(self) -> Tuple[int, ...]:
        return tuple(self._distribution)

    def get_part_work(self, worker: int) -> int:
        """Скільки одиниць роботи належить воркеру worker."""
        return self._distribution[worker]

    def get_prev_part_work(self, worker: int) -> int:
        """
        Скільки одиниць роботи належить воркерам 0..worker-1.

        Це зсув локального індексу воркера worker у глобальній нумерації;
        get_prev_part_work(worker_count) == unit_count.
        """
        return sum(self._distribution[:worker])

    def bounds(self, worker: int) -> Tuple[int, int]:
        """Межі [start, stop) слайсу воркера у глобальному списку."""
        start = self.get_prev_part_work(worker)
        return start, start + self.get_part_work(worker)

    def __repr__(self) -> str:
        return (
            f"WorkSplitter(unit_count={self.unit_count}, "
            f"worker_count={self.worker_count}, distribution={self.distribution})"
        )


__all__ = ["WorkSplitter"]
