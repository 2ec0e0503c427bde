from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from spmd_kmeans.comm.base import Communicator
from spmd_kmeans.data.validation import validate_worker_count


def distribute(
    comm: Communicator,
    observations: Optional[Sequence[int] | np.ndarray],
    seeds: Optional[Sequence[float] | np.ndarray],
    n_clusters: int,
) -> Tuple[int, np.ndarray]:
    """
    Раздача данных: по одному наблюдению на воркер и общий стартовый вектор.

    observations и seeds значимы только на корне (на остальных рангах None).
    Проверка N >= W выполняется на корне до первой коллективной операции,
    поэтому при её нарушении ни один воркер не получает данных.

    :return: (наблюдение данного ранга, копия стартовых центроидов)
    """
    sendbuf = None
    if comm.is_root:
        data = np.asarray(observations, dtype=np.uint8).reshape(-1)
        validate_worker_count(int(data.shape[0]), comm.size)
        seed_arr = np.asarray(seeds, dtype=np.float64).reshape(-1)
        if seed_arr.shape[0] != n_clusters:
            raise ValueError(
                f"expected {n_clusters} seed centroids, got {seed_arr.shape[0]}"
            )
        sendbuf = data[: comm.size]
        seeds = seed_arr

    local = comm.scatter(sendbuf, np.uint8)
    centroids = comm.bcast(seeds, n_clusters, np.float64)
    return int(local[0]), centroids
