"""
Проверка стартовых условий перед раздачей данных.

Нарушение любого условия фатально: вычисление прерывается до входа в цикл.
"""

from __future__ import annotations

from spmd_kmeans.errors import PreconditionError


def validate_worker_count(n_observations: int, n_workers: int) -> None:
    """Каждому воркеру нужно ровно одно наблюдение: N >= W."""
    if n_observations < n_workers:
        raise PreconditionError(
            f"Input file is too small: {n_observations} observations "
            f"for {n_workers} workers"
        )


def validate_seed_count(n_observations: int, n_clusters: int) -> None:
    """Стартовые центроиды берутся из первых K наблюдений: N >= K."""
    if n_observations < n_clusters:
        raise PreconditionError(
            f"Input file is too small: {n_observations} observations "
            f"for {n_clusters} seed centroids"
        )


def validate_preconditions(n_observations: int, n_workers: int, n_clusters: int) -> None:
    validate_worker_count(n_observations, n_workers)
    validate_seed_count(n_observations, n_clusters)
