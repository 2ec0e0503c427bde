"""
Коллективный транспорт поверх MPI (mpi4py).

Запуск: ``mpiexec -n <W> python -m spmd_kmeans.main --backend mpi``.
Топологию (число процессов) задаёт mpiexec, а не этот модуль.
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional

import numpy as np
from mpi4py import MPI

from spmd_kmeans.comm.base import Communicator
from spmd_kmeans.errors import CollectiveError


class MPICommunicator(Communicator):
    """Обёртка над интракоммуникатором MPI (по умолчанию COMM_WORLD)."""

    def __init__(self, comm: Any = None) -> None:
        self._comm = comm if comm is not None else MPI.COMM_WORLD
        # ошибки MPI должны доходить до Python как исключения
        self._comm.Set_errhandler(MPI.ERRORS_RETURN)

    @property
    def rank(self) -> int:
        return self._comm.Get_rank()

    @property
    def size(self) -> int:
        return self._comm.Get_size()

    def scatter(self, sendbuf: Optional[np.ndarray], dtype: Any) -> np.ndarray:
        recvbuf = np.empty(1, dtype=dtype)
        send = None
        if self.is_root:
            send = np.ascontiguousarray(sendbuf, dtype=dtype)
            if send.shape != (self.size,):
                raise ValueError(
                    f"scatter expects {self.size} elements, got shape {send.shape}"
                )
        try:
            self._comm.Scatter(send, recvbuf, root=self.root)
        except MPI.Exception as exc:
            raise CollectiveError(f"rank {self.rank}: MPI_Scatter failed: {exc}") from exc
        return recvbuf

    def bcast(self, buf: Optional[np.ndarray], count: int, dtype: Any) -> np.ndarray:
        if self.is_root:
            data = np.ascontiguousarray(buf, dtype=dtype).reshape(count).copy()
        else:
            data = np.empty(count, dtype=dtype)
        try:
            self._comm.Bcast(data, root=self.root)
        except MPI.Exception as exc:
            raise CollectiveError(f"rank {self.rank}: MPI_Bcast failed: {exc}") from exc
        return data

    def allreduce_sum(self, local: np.ndarray) -> np.ndarray:
        local = np.ascontiguousarray(local)
        total = np.empty_like(local)
        try:
            self._comm.Allreduce(local, total, op=MPI.SUM)
        except MPI.Exception as exc:
            raise CollectiveError(f"rank {self.rank}: MPI_Allreduce failed: {exc}") from exc
        return total

    def abort(self, code: int = 1) -> NoReturn:
        self._comm.Abort(code)
        raise SystemExit(code)
