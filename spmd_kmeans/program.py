"""
SPMD-программа, которую выполняет каждый участник.

Корень читает датасет и стартовые центроиды, затем все участники
проходят раздачу данных и цикл сходимости; корень строит отчёт.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np

from spmd_kmeans.comm.base import Communicator
from spmd_kmeans.config import DEFAULT_INPUT, EngineConfig
from spmd_kmeans.core.distribution import distribute
from spmd_kmeans.core.engine import ConvergenceEngine, EngineResult
from spmd_kmeans.data.dataset import ByteDataset
from spmd_kmeans.data.validation import validate_preconditions
from spmd_kmeans.report import build_report, format_report
from spmd_kmeans.utils.logging import RankLogger


@dataclass(frozen=True)
class RunSpec:
    """Что запускать: путь к датасету и параметры цикла."""

    input_path: str = DEFAULT_INPUT
    config: EngineConfig = EngineConfig()


@dataclass
class WorkerOutcome:
    """Результат одного участника; report заполнен только у корня."""

    rank: int
    observation: int
    result: EngineResult
    report: Optional[str] = None


def spmd_main(comm: Communicator, spec: RunSpec) -> WorkerOutcome:
    logger = RankLogger(logging.getLogger("spmd_kmeans"), comm.rank, comm.size)
    K = spec.config.n_clusters

    dataset: ByteDataset | None = None
    observations: np.ndarray | None = None
    seeds: np.ndarray | None = None
    if comm.is_root:
        # стартовые центроиды берутся из первых K байтов, даже если W < K
        dataset = ByteDataset(Path(spec.input_path), limit=max(comm.size, K))
        validate_preconditions(len(dataset), comm.size, K)
        observations = dataset.shard(comm.size)
        seeds = dataset.seed_centroids(K)
        logger.info(
            f"Loaded {len(dataset)} observations, seed centroids {seeds.tolist()}"
        )

    observation, seeds = distribute(comm, observations, seeds, K)
    logger.debug(f"Distribution done: observation={observation}, centroids={seeds.tolist()}")

    engine = ConvergenceEngine(comm, spec.config, logger=logger)
    result = engine.run(observation, seeds)

    report = None
    if comm.is_root and observations is not None:
        report = format_report(build_report(result.centroids, observations))

    return WorkerOutcome(
        rank=comm.rank,
        observation=observation,
        result=result,
        report=report,
    )
