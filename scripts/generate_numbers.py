"""
Генератор байтовых датасетов для распределённого KMeans.

Создаёт файл из N беззнаковых байтов: либо равномерный шум,
либо K «облаков» вокруг случайных центров (sklearn.make_blobs),
обрезанных в диапазон 0..255.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from sklearn.datasets import make_blobs

from spmd_kmeans.data.dataset import generate_bytes, write_bytes


@dataclass
class NumbersConfig:
    """Конфигурация генерируемого датасета."""

    N: int
    K: int = 4
    cluster_std: float = 8.0
    center_box_range: tuple[float, float] = (0.0, 255.0)
    uniform: bool = False


class NumbersGenerator:
    """Генератор байтовых датасетов с воспроизводимым seed."""

    def __init__(self, base_seed: int = 42) -> None:
        self.base_seed = base_seed

    def generate(self, config: NumbersConfig) -> np.ndarray:
        if config.N < 1:
            raise ValueError("N must be positive")

        if config.uniform:
            return generate_bytes(config.N, seed=self.base_seed)

        X, _ = make_blobs(
            n_samples=config.N,
            n_features=1,
            centers=config.K,
            cluster_std=config.cluster_std,
            center_box=config.center_box_range,
            random_state=self.base_seed,
        )
        return np.clip(np.rint(X[:, 0]), 0, 255).astype(np.uint8)

    def save(self, config: NumbersConfig, path: str | Path) -> Path:
        return write_bytes(path, self.generate(config).tolist())


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a byte dataset for spmd-kmeans.")
    parser.add_argument("--output", type=str, default="numbers")
    parser.add_argument("-n", "--count", type=int, default=16)
    parser.add_argument("-k", "--clusters", type=int, default=4)
    parser.add_argument("--std", type=float, default=8.0)
    parser.add_argument("--uniform", action="store_true")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    config = NumbersConfig(
        N=args.count,
        K=args.clusters,
        cluster_std=args.std,
        uniform=args.uniform,
    )
    path = NumbersGenerator(base_seed=args.seed).save(config, args.output)
    print(f"Wrote {config.N} observations to {path}")


if __name__ == "__main__":
    main()
