"""
Основной скрипт: генерация датасета и запуск кластеризации.

Поддерживает два режима работы:
1. Генерация байтового датасета (--generate N)
2. Запуск распределённого KMeans на локальных процессах
"""

import argparse
import sys

from scripts.generate_numbers import NumbersConfig, NumbersGenerator
from spmd_kmeans.main import main as run_kmeans


def run_generation(path: str, count: int, clusters: int, seed: int) -> None:
    """
    Генерирует байтовый датасет и сохраняет его в path.

    Args:
        path: Путь к файлу датасета
        count: Количество наблюдений
        clusters: Количество облаков в данных
        seed: Seed генератора
    """
    config = NumbersConfig(N=count, K=clusters)
    NumbersGenerator(base_seed=seed).save(config, path)
    print(f"Dataset with {count} observations written to {path}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a dataset and/or run spmd-kmeans; "
        "unknown options are passed to spmd-kmeans."
    )
    parser.add_argument("--generate", type=int, default=None, metavar="N")
    parser.add_argument("--generate-only", action="store_true")
    parser.add_argument("--input", type=str, default="numbers")
    parser.add_argument("--clusters", type=int, default=4)
    parser.add_argument("--seed", type=int, default=42)
    args, rest = parser.parse_known_args()

    if args.generate is not None:
        run_generation(args.input, args.generate, args.clusters, args.seed)
        if args.generate_only:
            return 0

    return run_kmeans(["--input", args.input, "--clusters", str(args.clusters), *rest])


if __name__ == "__main__":
    sys.exit(main())
