"""
Коллективный транспорт поверх разделяемой памяти.

W процессов обмениваются данными через общий буфер RawArray, разбитый
на слоты по одному на ранг, и синхронизируются через общий Barrier.
Редукция суммирует слоты строго в порядке рангов 0..W-1, поэтому
результат побитово одинаков у всех участников.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from multiprocessing import Barrier, Process, Queue, RawArray
from typing import Any, Callable, Dict, List, NoReturn, Optional

import numpy as np

from spmd_kmeans.comm.base import Communicator, run_guarded
from spmd_kmeans.config import SharedConfig
from spmd_kmeans.errors import CollectiveError
from spmd_kmeans.utils.logging import setup_logger


class SharedMemoryCommunicator(Communicator):
    """Участник группы процессов с общим буфером обмена и барьером."""

    def __init__(
        self,
        rank: int,
        size: int,
        barrier: Any,
        exchange: Any,
        slot_bytes: int,
        timeout: Optional[float] = None,
    ) -> None:
        if not 0 <= rank < size:
            raise ValueError(f"rank {rank} out of range for size {size}")
        self._rank = rank
        self._size = size
        self._barrier = barrier
        self._exchange = exchange
        self._slot_bytes = slot_bytes
        self._timeout = timeout

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def size(self) -> int:
        return self._size

    # ---------- Низкоуровневые примитивы ----------

    def _slots(self, dtype: Any, count: int) -> np.ndarray:
        """NumPy-представление буфера обмена: (size, count) поверх слотов."""
        dtype = np.dtype(dtype)
        if count * dtype.itemsize > self._slot_bytes:
            raise ValueError(
                f"payload of {count} x {dtype} does not fit slot of {self._slot_bytes} bytes"
            )
        return np.ndarray(
            shape=(self._size, count),
            dtype=dtype,
            buffer=self._exchange,
            strides=(self._slot_bytes, dtype.itemsize),
        )

    def _sync(self) -> None:
        """Барьер; любой сбой синхронизации фатален."""
        try:
            self._barrier.wait(self._timeout)
        except threading.BrokenBarrierError as exc:
            raise CollectiveError(
                f"rank {self._rank}: barrier broken, a participant failed or timed out"
            ) from exc

    # ---------- Коллективные операции ----------

    def scatter(self, sendbuf: Optional[np.ndarray], dtype: Any) -> np.ndarray:
        slots = self._slots(dtype, 1)
        if self.is_root:
            values = np.asarray(sendbuf, dtype=dtype)
            if values.shape != (self._size,):
                raise ValueError(
                    f"scatter expects {self._size} elements, got shape {values.shape}"
                )
            slots[:, 0] = values
        self._sync()
        received = slots[self._rank].copy()
        # второй барьер: слот нельзя перезаписать, пока его читают
        self._sync()
        return received

    def bcast(self, buf: Optional[np.ndarray], count: int, dtype: Any) -> np.ndarray:
        slots = self._slots(dtype, count)
        if self.is_root:
            slots[self.root] = np.asarray(buf, dtype=dtype).reshape(count)
        self._sync()
        received = slots[self.root].copy()
        self._sync()
        return received

    def allreduce_sum(self, local: np.ndarray) -> np.ndarray:
        local = np.ascontiguousarray(local)
        slots = self._slots(local.dtype, local.size)
        slots[self._rank] = local.reshape(-1)
        self._sync()
        # фиксированный порядок сложения: 0, 1, ..., W-1
        total = slots[0].copy()
        for r in range(1, self._size):
            total += slots[r]
        self._sync()
        return total.reshape(local.shape)

    def abort(self, code: int = 1) -> NoReturn:
        self._barrier.abort()
        raise SystemExit(code)


@dataclass
class LaunchResult:
    """Итог запуска группы: коды завершения и результаты по рангам."""

    exit_codes: List[int]
    results: Dict[int, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(code == 0 for code in self.exit_codes)

    @property
    def root_result(self) -> Any:
        return self.results.get(0)


def _worker_main(
    rank: int,
    size: int,
    barrier: Any,
    exchange: Any,
    slot_bytes: int,
    timeout: Optional[float],
    log_level: int,
    target: Callable[..., Any],
    args: tuple,
    results: Any,
) -> None:
    """Точка входа процесса-воркера."""
    logger = setup_logger(log_level)
    comm = SharedMemoryCommunicator(rank, size, barrier, exchange, slot_bytes, timeout)
    result = run_guarded(comm, target, *args, logger=logger)
    results.put((rank, result))


def launch(
    target: Callable[..., Any],
    args: tuple = (),
    shared: SharedConfig = SharedConfig(),
    slot_bytes: int = 64,
    log_level: int = logging.INFO,
    poll_interval: float = 0.05,
    abort_grace: float = 5.0,
) -> LaunchResult:
    """
    Запускает target(comm, *args) в shared.n_workers процессах.

    Если любой процесс завершается с ненулевым кодом, барьер ломается
    и остальные участники также завершаются аварийно.
    Воркеры, не завершившиеся через abort_grace секунд после сбоя
    (например, зависшие вне коллективной операции), принудительно
    останавливаются.
    target и args должны сериализоваться pickle (функция уровня модуля).
    """
    size = shared.n_workers
    barrier = Barrier(size)
    exchange = RawArray("B", size * slot_bytes)
    results: Queue = Queue()

    procs = [
        Process(
            target=_worker_main,
            args=(
                rank,
                size,
                barrier,
                exchange,
                slot_bytes,
                shared.barrier_timeout,
                log_level,
                target,
                args,
                results,
            ),
            name=f"spmd-kmeans-{rank}",
        )
        for rank in range(size)
    ]
    for p in procs:
        p.start()

    collected: Dict[int, Any] = {}
    aborted_at: Optional[float] = None
    try:
        while any(p.is_alive() for p in procs):
            # очередь читаем до join, иначе процесс с результатом не завершится
            try:
                rank, result = results.get(timeout=poll_interval)
                collected[rank] = result
            except queue.Empty:
                pass
            if aborted_at is None and any(p.exitcode not in (None, 0) for p in procs):
                barrier.abort()
                aborted_at = time.monotonic()
            if aborted_at is not None and time.monotonic() - aborted_at > abort_grace:
                for p in procs:
                    if p.is_alive():
                        p.terminate()
    finally:
        for p in procs:
            p.join()

    while True:
        try:
            rank, result = results.get_nowait()
        except queue.Empty:
            break
        collected[rank] = result

    return LaunchResult(
        exit_codes=[int(p.exitcode) for p in procs],
        results=collected,
    )
