"""
mpi_comm.py

Communicator поверх MPI (mpi4py).

Група воркерів — це процеси, запущені через mpiexec; сам модуль їх не
створює. Колективні операції делегуються нативним bcast / reduce(MPI.MAX).

Використання:
    from strongin_app.core.mpi_comm import MPICommunicator
    comm = MPICommunicator()
    value = minimize_distributed(f, a, b, eps, comm)
"""

from __future__ import annotations

from typing import Optional

from mpi4py import MPI

from .comm import COORDINATOR_RANK, TAG_P2P, Communicator


class MPICommunicator(Communicator):
    """Обгортка над MPI-комунікатором (за замовчуванням MPI.COMM_WORLD)."""

    def __init__(self, mpi_comm: Optional["MPI.Comm"] = None) -> None:
        self._comm = mpi_comm if mpi_comm is not None else MPI.COMM_WORLD

    @property
    def rank(self) -> int:
        return self._comm.Get_rank()

    @property
    def size(self) -> int:
        return self._comm.Get_size()

    def send_bytes(self, payload: bytes, dest: int, tag: int = TAG_P2P) -> None:
        self._comm.send(bytes(payload), dest=dest, tag=tag)

    def recv_bytes(self, source: int, tag: int = TAG_P2P) -> bytes:
        return self._comm.recv(source=source, tag=tag)

    def bcast_bytes(self, payload: Optional[bytes], root: int = COORDINATOR_RANK) -> bytes:
        if self.rank == root and payload is None:
            raise ValueError("bcast_bytes: на кореневому воркері payload не може бути None.")
        return self._comm.bcast(payload, root=root)

    def reduce_max(self, value: float, root: int = COORDINATOR_RANK) -> Optional[float]:
        return self._comm.reduce(float(value), op=MPI.MAX, root=root)


__all__ = ["MPICommunicator"]
