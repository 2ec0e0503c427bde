"""
Поколения центроидов.

Во время перехода между раундами существуют два поколения: текущее
(по нему классифицируют) и предлагаемое (собирается из редукции).
Оба хранятся как неизменяемые снимки, переключается только индекс
активного поколения.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np


def freeze(values: Iterable[float] | np.ndarray) -> np.ndarray:
    """Копия values как float64-вектор, недоступный для записи."""
    arr = np.array(values, dtype=np.float64, copy=True).reshape(-1)
    arr.setflags(write=False)
    return arr


class CentroidGenerations:
    """Двойной буфер центроидов с индексом активного поколения."""

    def __init__(self, seed: Iterable[float] | np.ndarray) -> None:
        first = freeze(seed)
        self._buffers = [first, first]
        self._active = 0
        self.generation = 0

    @property
    def n_clusters(self) -> int:
        return int(self._buffers[self._active].shape[0])

    @property
    def current(self) -> np.ndarray:
        return self._buffers[self._active]

    @property
    def previous(self) -> np.ndarray:
        return self._buffers[1 - self._active]

    def advance(self, proposed: Iterable[float] | np.ndarray) -> np.ndarray:
        """Публикует proposed как новое текущее поколение."""
        snapshot = freeze(proposed)
        if snapshot.shape != self.current.shape:
            raise ValueError(
                f"expected {self.n_clusters} centroids, got {snapshot.shape[0]}"
            )
        inactive = 1 - self._active
        self._buffers[inactive] = snapshot
        self._active = inactive
        self.generation += 1
        return snapshot
