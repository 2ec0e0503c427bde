from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, NoReturn, Optional

import numpy as np

from spmd_kmeans.config import ROOT_RANK
from spmd_kmeans.errors import KMeansFatalError


class Communicator(ABC):
    """
    Базовый класс коллективного транспорта.

    Все операции коллективные: их должны вызвать все участники в одном
    и том же порядке. Точек «точка-точка» нет.
    """

    root: int = ROOT_RANK

    @property
    @abstractmethod
    def rank(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def size(self) -> int:
        raise NotImplementedError

    @property
    def is_root(self) -> bool:
        return self.rank == self.root

    @abstractmethod
    def scatter(self, sendbuf: Optional[np.ndarray], dtype: Any) -> np.ndarray:
        """
        Раздаёт по одному элементу sendbuf каждому участнику.

        sendbuf значим только на корне и должен содержать ровно size элементов;
        возвращает массив формы (1,) с элементом данного ранга.
        """
        raise NotImplementedError

    @abstractmethod
    def bcast(self, buf: Optional[np.ndarray], count: int, dtype: Any) -> np.ndarray:
        """Копия вектора корня длины count у каждого участника."""
        raise NotImplementedError

    @abstractmethod
    def allreduce_sum(self, local: np.ndarray) -> np.ndarray:
        """Покоординатная сумма local по всем участникам, одинаковая у всех."""
        raise NotImplementedError

    @abstractmethod
    def abort(self, code: int = 1) -> NoReturn:
        """Аварийно завершает вычисление у всех участников."""
        raise NotImplementedError


def run_guarded(
    comm: Communicator,
    target: Callable[..., Any],
    *args: Any,
    logger: logging.Logger | None = None,
) -> Any:
    """
    Выполняет SPMD-программу target(comm, *args) на данном участнике.

    Фатальная ошибка на любом ранге не восстанавливается: она логируется
    и приводит к comm.abort() для всего вычисления.
    """
    logger = logger or logging.getLogger("spmd_kmeans")
    try:
        return target(comm, *args)
    except KMeansFatalError as exc:
        logger.error(f"[rank {comm.rank}/{comm.size}] {exc}")
        comm.abort(exc.exit_code)
