"""
comm.py

Абстракція каналу зв'язку між воркерами (message passing).

Алгоритм потребує лише чотирьох примітивів:
    - send_bytes / recv_bytes  – точка-точка;
    - bcast_bytes              – розсилка від координатора всім;
    - reduce_max               – глобальний максимум на координаторі.

Реалізації:
    SoloCommunicator   – один воркер (колективні операції тривіальні);
    QueueCommunicator  – воркери-потоки або воркери-процеси, що спілкуються
                         через черги (queue.Queue / multiprocessing.Queue);
    MPICommunicator    – див. mpi_comm.py (потребує mpi4py).

Запуск групи воркерів:
    run_threaded(size, target, *args)     – потоки в одному процесі;
    run_multiprocess(size, target, *args) – окремі процеси.

В обох випадках target(comm, *args) виконується кожним воркером,
а результати повертаються списком у порядку рангів.
"""

from __future__ import annotations

import logging
import multiprocessing
import queue
import threading
import traceback
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .messages import decode_record, decode_scalar, encode_record, encode_scalar
from .segment import CharacteristicRecord

logger = logging.getLogger(__name__)

# Ранг воркера, що виконує роль координатора
COORDINATOR_RANK = 0

# Теги розділяють трафік точка-точка і колективні операції,
# щоб повідомлення різних протоколів не перемішувались в одній черзі.
TAG_P2P = 0
TAG_COLLECTIVE = 1
_TAGS = (TAG_P2P, TAG_COLLECTIVE)


class Role(Enum):
    COORDINATOR = "coordinator"
    WORKER = "worker"


class CommunicationError(RuntimeError):
    """Помилка обміну повідомленнями або падіння одного з воркерів групи."""


# ---------------------------------------------------------------------------
# Базовий інтерфейс
# ---------------------------------------------------------------------------

class Communicator(ABC):
    """
    Канал зв'язку одного воркера з рештою групи.

    Координатор (Role.COORDINATOR) — рівно один учасник групи з рангом
    COORDINATOR_RANK; він розподіляє роботу та агрегує часткові результати.
    Колективні операції за замовчуванням реалізовані через send/recv
    з тегом TAG_COLLECTIVE; реалізації можуть перевизначити їх нативними
    колективами.
    """

    @property
    @abstractmethod
    def rank(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def size(self) -> int:
        raise NotImplementedError

    @property
    def role(self) -> Role:
        return Role.COORDINATOR if self.rank == COORDINATOR_RANK else Role.WORKER

    @property
    def is_coordinator(self) -> bool:
        return self.role is Role.COORDINATOR

    # ------------------------------------------------------------------
    # Точка-точка
    # ------------------------------------------------------------------

    @abstractmethod
    def send_bytes(self, payload: bytes, dest: int, tag: int = TAG_P2P) -> None:
        raise NotImplementedError

    @abstractmethod
    def recv_bytes(self, source: int, tag: int = TAG_P2P) -> bytes:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Колективні операції
    # ------------------------------------------------------------------

    def bcast_bytes(self, payload: Optional[bytes], root: int = COORDINATOR_RANK) -> bytes:
        """
        Розіслати payload від root усім воркерам.

        На root payload обов'язковий, на інших воркерах ігнорується.
        """
        if self.rank == root:
            if payload is None:
                raise ValueError("bcast_bytes: на кореневому воркері payload не може бути None.")
            for dest in range(self.size):
                if dest != root:
                    self.send_bytes(payload, dest, tag=TAG_COLLECTIVE)
            return payload

        return self.recv_bytes(root, tag=TAG_COLLECTIVE)

    def reduce_max(self, value: float, root: int = COORDINATOR_RANK) -> Optional[float]:
        """
        Глобальний максимум значень усіх воркерів.

        Результат отримує лише root; інші воркери отримують None.
        Порівняння строге (result > current), як у послідовному пошуку.
        """
        if self.rank != root:
            self.send_bytes(encode_scalar(value), root, tag=TAG_COLLECTIVE)
            return None

        result = float(value)
        for source in range(self.size):
            if source == root:
                continue
            other = decode_scalar(self.recv_bytes(source, tag=TAG_COLLECTIVE))
            if other > result:
                result = other
        return result

    # ------------------------------------------------------------------
    # Типізовані обгортки
    # ------------------------------------------------------------------

    def bcast_float(self, value: Optional[float], root: int = COORDINATOR_RANK) -> float:
        payload = encode_scalar(value) if self.rank == root else None
        return decode_scalar(self.bcast_bytes(payload, root=root))

    def bcast_record(
        self,
        record: Optional[CharacteristicRecord],
        root: int = COORDINATOR_RANK,
    ) -> CharacteristicRecord:
        payload = encode_record(record) if self.rank == root else None
        return decode_record(self.bcast_bytes(payload, root=root))


# ---------------------------------------------------------------------------
# Один воркер
# ---------------------------------------------------------------------------

class SoloCommunicator(Communicator):
    """Група з одного воркера, який одночасно є координатором."""

    @property
    def rank(self) -> int:
        return COORDINATOR_RANK

    @property
    def size(self) -> int:
        return 1

    def send_bytes(self, payload: bytes, dest: int, tag: int = TAG_P2P) -> None:
        raise CommunicationError(f"SoloCommunicator: немає воркера з рангом {dest}.")

    def recv_bytes(self, source: int, tag: int = TAG_P2P) -> bytes:
        raise CommunicationError(f"SoloCommunicator: немає воркера з рангом {source}.")


# ---------------------------------------------------------------------------
# Воркери на чергах
# ---------------------------------------------------------------------------

InboxKey = Tuple[int, int, int]  # (отримувач, відправник, тег)


def make_inboxes(size: int, queue_factory: Callable[[], Any]) -> Dict[InboxKey, Any]:
    """
    Створити по одній черзі на кожну трійку (отримувач, відправник, тег).

    queue_factory: queue.Queue для потоків або ctx.Queue для процесів.
    """
    inboxes: Dict[InboxKey, Any] = {}
    for dest in range(size):
        for source in range(size):
            if dest == source:
                continue
            for tag in _TAGS:
                inboxes[(dest, source, tag)] = queue_factory()
    return inboxes


class QueueCommunicator(Communicator):
    """
    Канал на основі черг: кожне повідомлення — це bytes у черзі
    (отримувач, відправник, тег). Черги FIFO, тому порядок повідомлень
    між парою воркерів зберігається.

    timeout: скільки секунд чекати на повідомлення (None — без обмеження).
    """

    def __init__(
        self,
        rank: int,
        size: int,
        inboxes: Dict[InboxKey, Any],
        timeout: Optional[float] = None,
    ) -> None:
        if not 0 <= rank < size:
            raise ValueError(f"QueueCommunicator: ранг {rank} поза межами [0, {size}).")
        self._rank = rank
        self._size = size
        self._inboxes = inboxes
        self.timeout = timeout

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def size(self) -> int:
        return self._size

    def _inbox(self, dest: int, source: int, tag: int):
        try:
            return self._inboxes[(dest, source, tag)]
        except KeyError:
            raise CommunicationError(
                f"Немає каналу {source} -> {dest} (tag={tag}) у групі розміру {self._size}."
            ) from None

    def send_bytes(self, payload: bytes, dest: int, tag: int = TAG_P2P) -> None:
        self._inbox(dest, self._rank, tag).put(bytes(payload))

    def recv_bytes(self, source: int, tag: int = TAG_P2P) -> bytes:
        inbox = self._inbox(self._rank, source, tag)
        try:
            return inbox.get(timeout=self.timeout)
        except queue.Empty:
            raise CommunicationError(
                f"Воркер {self._rank}: не дочекався повідомлення від {source} "
                f"(tag={tag}) за {self.timeout} с."
            ) from None


# ---------------------------------------------------------------------------
# Запуск групи: потоки
# ---------------------------------------------------------------------------

WorkerTarget = Callable[..., Any]


def _check_group_size(size: int) -> None:
    if size <= 0:
        raise ValueError(f"Кількість воркерів повинна бути додатною, отримано {size}.")


def run_threaded(
    size: int,
    target: WorkerTarget,
    *args: Any,
    timeout: Optional[float] = None,
) -> List[Any]:
    """
    Виконати target(comm, *args) у size потоках, що утворюють одну групу.

    Повертає список результатів у порядку рангів. Якщо хоча б один воркер
    впав, піднімається CommunicationError з оригінальним винятком у __cause__
    (решта воркерів — daemon-потоки, тож не блокують завершення процесу).
    """
    _check_group_size(size)

    inboxes = make_inboxes(size, queue.Queue)
    done: "queue.Queue[Tuple[int, bool, Any]]" = queue.Queue()

    def worker_main(rank: int) -> None:
        comm = QueueCommunicator(rank, size, inboxes, timeout=timeout)
        try:
            done.put((rank, True, target(comm, *args)))
        except Exception as exc:  # noqa: BLE001
            done.put((rank, False, exc))

    threads = [
        threading.Thread(
            target=worker_main,
            args=(rank,),
            name=f"strongin-worker-{rank}",
            daemon=True,
        )
        for rank in range(size)
    ]
    for thread in threads:
        thread.start()

    results: List[Any] = [None] * size
    for _ in range(size):
        rank, ok, value = done.get()
        if not ok:
            raise CommunicationError(f"Воркер {rank} завершився помилкою: {value!r}") from value
        results[rank] = value

    for thread in threads:
        thread.join()

    return results


# ---------------------------------------------------------------------------
# Запуск групи: процеси
# ---------------------------------------------------------------------------

def _process_main(
    rank: int,
    size: int,
    inboxes: Dict[InboxKey, Any],
    done,
    timeout: Optional[float],
    target: WorkerTarget,
    args: Tuple[Any, ...],
) -> None:
    comm = QueueCommunicator(rank, size, inboxes, timeout=timeout)
    try:
        done.put((rank, True, target(comm, *args)))
    except Exception:  # noqa: BLE001  (виняток може не серіалізуватись)
        done.put((rank, False, traceback.format_exc()))


def run_multiprocess(
    size: int,
    target: WorkerTarget,
    *args: Any,
    timeout: Optional[float] = None,
    start_method: Optional[str] = None,
) -> List[Any]:
    """
    Виконати target(comm, *args) у size окремих процесах.

    target та args повинні серіалізуватись pickle (функції рівня модуля).
    Якщо воркер впав, решта процесів зупиняється, а в головному процесі
    піднімається CommunicationError з traceback воркера.
    """
    _check_group_size(size)

    ctx = multiprocessing.get_context(start_method)
    inboxes = make_inboxes(size, ctx.Queue)
    done = ctx.Queue()

    processes = [
        ctx.Process(
            target=_process_main,
            args=(rank, size, inboxes, done, timeout, target, args),
            name=f"strongin-worker-{rank}",
            daemon=True,
        )
        for rank in range(size)
    ]
    for proc in processes:
        proc.start()

    results: List[Any] = [None] * size
    try:
        for _ in range(size):
            rank, ok, value = done.get()
            if not ok:
                raise CommunicationError(f"Воркер {rank} завершився помилкою:\n{value}")
            results[rank] = value
    except CommunicationError:
        for proc in processes:
            if proc.is_alive():
                proc.terminate()
        raise
    finally:
        for proc in processes:
            proc.join()

    logger.debug("Група з %d процесів завершилась", size)
    return results


__all__ = [
    "COORDINATOR_RANK",
    "TAG_P2P",
    "TAG_COLLECTIVE",
    "Role",
    "CommunicationError",
    "Communicator",
    "SoloCommunicator",
    "QueueCommunicator",
    "make_inboxes",
    "run_threaded",
    "run_multiprocess",
]
