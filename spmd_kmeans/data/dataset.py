"""
Загрузка байтового датасета для распределённого KMeans.

Формат файла: плоская последовательность беззнаковых байтов без заголовка,
каждый байт — одно наблюдение (0..255).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import numpy as np

from spmd_kmeans.data.validation import validate_seed_count, validate_worker_count
from spmd_kmeans.errors import DatasetReadError


def read_bytes(path: str | Path, limit: int | None = None) -> np.ndarray:
    """
    Читает не более limit байтов из файла.

    Raises:
        DatasetReadError: если файл не удаётся открыть или прочитать
    """
    try:
        with open(path, "rb") as f:
            raw = f.read() if limit is None else f.read(limit)
    except OSError as exc:
        raise DatasetReadError(f"Fail to load input file {path}: {exc}") from exc
    return np.frombuffer(raw, dtype=np.uint8).copy()


def write_bytes(path: str | Path, values: Iterable[int]) -> Path:
    """Записывает наблюдения в файл датасета; значения должны быть в 0..255."""
    arr = np.asarray(list(values), dtype=np.int64)
    if arr.size and (arr.min() < 0 or arr.max() > 255):
        raise ValueError("observations must be in range 0..255")
    path = Path(path)
    path.write_bytes(arr.astype(np.uint8).tobytes())
    return path


def generate_bytes(n: int, seed: int | None = None) -> np.ndarray:
    """Случайные наблюдения (равномерно по 0..255) для демонстраций и тестов."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=n, dtype=np.uint8)


class ByteDataset:
    """
    Датасет, видимый инициализирующему участнику.

    Хранит первые limit байтов файла (limit = max(W, K)): первые K из них
    служат стартовыми центроидами, первые W раздаются воркерам, и по ним же
    строится итоговый отчёт.
    """

    def __init__(self, path: str | Path, limit: int | None = None) -> None:
        self.path = Path(path)
        self.limit = limit

        logging.getLogger("spmd_kmeans").debug(f"Loading dataset from {self.path}")
        self.X: np.ndarray = read_bytes(self.path, limit)

    def __len__(self) -> int:
        return int(self.X.shape[0])

    def seed_centroids(self, n_clusters: int) -> np.ndarray:
        """Стартовые центроиды: первые n_clusters наблюдений как float64."""
        validate_seed_count(len(self), n_clusters)
        return self.X[:n_clusters].astype(np.float64)

    def shard(self, n_workers: int) -> np.ndarray:
        """Наблюдения, раздаваемые воркерам: первые n_workers байтов."""
        validate_worker_count(len(self), n_workers)
        return self.X[:n_workers]
