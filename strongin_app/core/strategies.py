"""
strategies.py

Підобчислення однієї ітерації методу Стронгіна та стратегії їх виконання.

Формули:
    M = max_i |z_i.end - z_i.begin| / (y_i.end - y_i.begin)
        – оцінка константи Ліпшиця;
    m = 1, якщо M = 0, інакше r * M  (r > 1)
        – скоригована оцінка;
    R_i = m*Δy + Δz² / (m*Δy) - 2*(z_i.end + z_i.begin)
        – характеристика відрізка,
    де z = f(y).

Стратегії (Strategy):
    SequentialStrategy – усе рахує один воркер;
    ParallelStrategy   – координатор роздає слайси відрізків воркерам,
                         часткові результати збираються на координаторі
                         і розсилаються всім.

Обидві стратегії надають однаковий інтерфейс, тому цикл методу
(strongin.py) не залежить від режиму виконання.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from .comm import COORDINATOR_RANK, Communicator, SoloCommunicator
from .messages import decode_record, decode_segments, encode_record, encode_segments
from .segment import CharacteristicRecord, SegmentList
from .work_splitter import WorkSplitter

logger = logging.getLogger(__name__)

Scalar1DFunction = Callable[[float], float]


# ---------------------------------------------------------------------------
# Послідовні форми (працюють з будь-яким списком відрізків)
# ---------------------------------------------------------------------------

def calculate_M(f: Scalar1DFunction, segments: SegmentList) -> float:
    """
    Оцінка константи Ліпшиця M за скінченними різницями.

    Для порожнього списку повертає 0. Оновлення строге (current > M),
    тому NaN-доданки пропускаються.
    """
    M = 0.0
    for seg in segments:
        z_dif = f(seg.end) - f(seg.begin)
        y_dif = seg.end - seg.begin
        current = abs(z_dif / y_dif)
        if current > M:
            M = current
    return M


def calculate_m(M: float, r: float) -> float:
    """Скоригована оцінка m; M >= 0 та r > 1 — передумови, а не помилки вводу."""
    assert M >= 0, f"M повинно бути невід'ємним, отримано {M}"
    assert r > 1, f"r повинно бути > 1, отримано {r}"
    return 1.0 if M == 0 else r * M


def characteristic(f: Scalar1DFunction, begin: float, end: float, m: float) -> float:
    y_dif = end - begin
    f_begin = f(begin)
    f_end = f(end)
    z_dif = f_end - f_begin
    z_sum = f_end + f_begin
    return m * y_dif + z_dif * z_dif / (m * y_dif) - 2.0 * z_sum


def index_of_max_R(f: Scalar1DFunction, segments: SegmentList, m: float) -> CharacteristicRecord:
    """
    Максимальна характеристика та індекс її відрізка у списку segments.

    Порівняння строге (R > max), тому при рівних значеннях перемагає
    перший відрізок.
    """
    best = CharacteristicRecord()
    for i, seg in enumerate(segments):
        R = characteristic(f, seg.begin, seg.end, m)
        if R > best.value:
            best = CharacteristicRecord(value=R, index=i)
    return best


# ---------------------------------------------------------------------------
# Режим виконання
# ---------------------------------------------------------------------------

class ExecutionMode(str, Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


class ExecutionStrategy(ABC):
    """
    Як саме обчислюються M та максимальна характеристика.

    calculate_M / index_of_max_R можуть повернути None на воркерах, які не є
    координатором; broadcast_* робить значення однаковим на всіх воркерах.
    """

    mode: ExecutionMode

    @abstractmethod
    def calculate_M(self, f: Scalar1DFunction, segments: SegmentList) -> Optional[float]:
        raise NotImplementedError

    @abstractmethod
    def index_of_max_R(
        self,
        f: Scalar1DFunction,
        segments: SegmentList,
        m: float,
    ) -> Optional[CharacteristicRecord]:
        raise NotImplementedError

    @abstractmethod
    def broadcast_M(self, M: Optional[float]) -> float:
        raise NotImplementedError

    @abstractmethod
    def broadcast_record(self, record: Optional[CharacteristicRecord]) -> CharacteristicRecord:
        raise NotImplementedError


class SequentialStrategy(ExecutionStrategy):
    """Один воркер: прямі виклики послідовних форм, розсилка — тотожність."""

    mode = ExecutionMode.SEQUENTIAL

    def calculate_M(self, f: Scalar1DFunction, segments: SegmentList) -> float:
        return calculate_M(f, segments)

    def index_of_max_R(self, f: Scalar1DFunction, segments: SegmentList, m: float) -> CharacteristicRecord:
        return index_of_max_R(f, segments, m)

    def broadcast_M(self, M: Optional[float]) -> float:
        return float(M)

    def broadcast_record(self, record: Optional[CharacteristicRecord]) -> CharacteristicRecord:
        return record


class ParallelStrategy(ExecutionStrategy):
    """
    Розподілене обчислення на групі воркерів comm.

    Схема для обох підобчислень:
        1) кожен воркер будує WorkSplitter(len(segments), comm.size) —
           межі слайсів однакові на всіх воркерах;
        2) координатор лишає собі перший слайс, іншим воркерам з ненульовою
           роботою надсилає їхні слайси одним блоком;
        3) кожен воркер рахує послідовну форму на своєму слайсі;
        4) часткові результати збираються на координаторі.
    """

    mode = ExecutionMode.PARALLEL

    def __init__(self, comm: Communicator) -> None:
        self.comm = comm

    # ------------------------------------------------------------------
    # Розсилка слайсів
    # ------------------------------------------------------------------

    def _scatter_segments(self, segments: SegmentList) -> Tuple[WorkSplitter, SegmentList]:
        comm = self.comm
        splitter = WorkSplitter(len(segments), comm.size)
        own_work = splitter.get_part_work(comm.rank)

        if comm.is_coordinator:
            for worker in range(comm.size):
                if worker == comm.rank:
                    continue
                work = splitter.get_part_work(worker)
                if work != 0:
                    start, stop = splitter.bounds(worker)
                    comm.send_bytes(encode_segments(segments[start:stop]), worker)
            start, stop = splitter.bounds(comm.rank)
            return splitter, segments[start:stop]

        if own_work == 0:
            return splitter, []

        payload = comm.recv_bytes(COORDINATOR_RANK)
        return splitter, decode_segments(payload, expected_count=own_work)

    # ------------------------------------------------------------------
    # M
    # ------------------------------------------------------------------

    def calculate_M(self, f: Scalar1DFunction, segments: SegmentList) -> Optional[float]:
        _, local_segments = self._scatter_segments(segments)
        local_M = calculate_M(f, local_segments)
        return self.comm.reduce_max(local_M, root=COORDINATOR_RANK)

    # ------------------------------------------------------------------
    # Максимальна характеристика
    # ------------------------------------------------------------------

    def index_of_max_R(
        self,
        f: Scalar1DFunction,
        segments: SegmentList,
        m: float,
    ) -> Optional[CharacteristicRecord]:
        comm = self.comm
        splitter, local_segments = self._scatter_segments(segments)
        local_best = index_of_max_R(f, local_segments, m)
        logger.debug("Воркер %d: локальний максимум R %s", comm.rank, local_best)

        if not comm.is_coordinator:
            if splitter.get_part_work(comm.rank) != 0:
                comm.send_bytes(encode_record(local_best), COORDINATOR_RANK)
            return None

        results: List[CharacteristicRecord] = [CharacteristicRecord()] * comm.size
        results[comm.rank] = local_best
        for worker in range(comm.size):
            if worker != comm.rank and splitter.get_part_work(worker) != 0:
                results[worker] = decode_record(comm.recv_bytes(worker))

        # Перший максимум за значенням; локальний індекс переможця
        # переводиться в глобальний у тому ж слоті, який і повертається.
        winner = 0
        for worker in range(1, comm.size):
            if results[worker].value > results[winner].value:
                winner = worker

        results[winner] = CharacteristicRecord(
            value=results[winner].value,
            index=results[winner].index + splitter.get_prev_part_work(winner),
        )
        return results[winner]

    # ------------------------------------------------------------------
    # Розсилка результатів
    # ------------------------------------------------------------------

    def broadcast_M(self, M: Optional[float]) -> float:
        return self.comm.bcast_float(M, root=COORDINATOR_RANK)

    def broadcast_record(self, record: Optional[CharacteristicRecord]) -> CharacteristicRecord:
        return self.comm.bcast_record(record, root=COORDINATOR_RANK)


def make_strategy(
    mode: Union[ExecutionMode, str],
    comm: Optional[Communicator] = None,
) -> ExecutionStrategy:
    """
    Фабрика стратегій.

    Для PARALLEL без comm використовується SoloCommunicator — розподілений
    код тоді зводиться до послідовного.
    """
    mode = ExecutionMode(mode)
    if mode is ExecutionMode.SEQUENTIAL:
        return SequentialStrategy()
    return ParallelStrategy(comm if comm is not None else SoloCommunicator())


__all__ = [
    "Scalar1DFunction",
    "calculate_M",
    "calculate_m",
    "characteristic",
    "index_of_max_R",
    "ExecutionMode",
    "ExecutionStrategy",
    "SequentialStrategy",
    "ParallelStrategy",
    "make_strategy",
]
