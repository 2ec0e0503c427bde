"""
Цикл сходимости распределённого KMeans.

Каждый воркер владеет одним наблюдением. Раунд:
ROUND_START → CLASSIFY → REDUCE → UPDATE → (CONVERGED | ROUND_START).
Единственная блокирующая точка раунда — редукция суммы (allreduce);
классификация и обновление чисто локальные. Так как глобальный агрегат
у всех воркеров побитово одинаков, одинаковы и новые центроиды,
и решение о сходимости, а значит и число раундов.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

import numpy as np

from spmd_kmeans.comm.base import Communicator
from spmd_kmeans.config import AggregateLayout, EngineConfig
from spmd_kmeans.core.centroids import CentroidGenerations
from spmd_kmeans.metrics.timers import PhaseTimer


class EngineState(str, Enum):
    ROUND_START = "round_start"
    CLASSIFY = "classify"
    REDUCE = "reduce"
    UPDATE = "update"
    CONVERGED = "converged"


# ---------- Локальные шаги ----------


def classify_all(observations: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Ближайший центроид по |x - c| для каждого наблюдения.

    При равенстве расстояний выбирается меньший индекс
    (np.argmin возвращает первое вхождение минимума).
    """
    obs = np.asarray(observations, dtype=np.float64).reshape(-1)
    distances = np.abs(obs[:, None] - np.asarray(centroids, dtype=np.float64)[None, :])
    return np.argmin(distances, axis=1)


def classify(observation: int | float, centroids: np.ndarray) -> int:
    """Индекс ближайшего центроида для одного наблюдения."""
    return int(classify_all(np.array([observation]), centroids)[0])


@dataclass(frozen=True)
class PartialAggregate:
    """Вклад одного воркера: (суммы[K], счётчики[K]), ненулевой один слот."""

    sums: np.ndarray
    counts: np.ndarray

    @classmethod
    def for_observation(
        cls, observation: int | float, label: int, n_clusters: int
    ) -> "PartialAggregate":
        sums = np.zeros(n_clusters, dtype=np.float64)
        counts = np.zeros(n_clusters, dtype=np.int64)
        sums[label] = float(observation)
        counts[label] = 1
        return cls(sums=sums, counts=counts)


@dataclass(frozen=True)
class GlobalAggregate:
    """Сумма частичных агрегатов всех воркеров за раунд."""

    sums: np.ndarray
    counts: np.ndarray


def reduce_aggregate(
    comm: Communicator,
    partial: PartialAggregate,
    layout: AggregateLayout = AggregateLayout.INLINE,
) -> GlobalAggregate:
    """Коллективная сумма частичных агрегатов в выбранной раскладке."""
    K = partial.sums.shape[0]

    if layout == AggregateLayout.INLINE:
        packed = np.concatenate([partial.sums, partial.counts.astype(np.float64)])
        total = comm.allreduce_sum(packed)
        sums, counts = total[:K], total[K:]
    elif layout == AggregateLayout.SPLIT:
        sums = comm.allreduce_sum(partial.sums)
        counts = comm.allreduce_sum(partial.counts)
    else:
        raise ValueError(f"Unknown aggregate layout: {layout}")

    sums = np.array(sums, dtype=np.float64)
    counts = np.array(counts)
    sums.setflags(write=False)
    counts.setflags(write=False)
    return GlobalAggregate(sums=sums, counts=counts)


def update_centroids(previous: np.ndarray, aggregate: GlobalAggregate) -> np.ndarray:
    """
    Новые центроиды: среднее по кластеру, а для пустого кластера — прежнее
    значение (без NaN и без обнуления).
    """
    proposed = np.array(previous, dtype=np.float64, copy=True)
    non_empty = aggregate.counts > 0
    proposed[non_empty] = aggregate.sums[non_empty] / aggregate.counts[non_empty]
    return proposed


def has_converged(proposed: np.ndarray, previous: np.ndarray, epsilon: float) -> bool:
    """Все центроиды сдвинулись не более чем на epsilon."""
    return bool(np.all(np.abs(proposed - previous) <= epsilon))


# ---------- Цикл ----------


@dataclass
class EngineResult:
    centroids: np.ndarray
    rounds: int
    converged: bool
    label: int
    timings: Dict[str, float] = field(default_factory=dict)


class ConvergenceEngine:
    """
    Синхронный цикл уточнения центроидов для одного воркера.

    Все воркеры группы должны вызвать run() с одинаковой конфигурацией
    и одинаковыми стартовыми центроидами.
    """

    def __init__(
        self,
        comm: Communicator,
        config: EngineConfig = EngineConfig(),
        logger: Any | None = None,
    ) -> None:
        self.comm = comm
        self.config = config
        self.logger = logger

        self.state = EngineState.ROUND_START
        self.rounds = 0
        self.timer = PhaseTimer()

    def run(self, observation: int, seeds: np.ndarray) -> EngineResult:
        K = self.config.n_clusters
        generations = CentroidGenerations(seeds)
        if generations.n_clusters != K:
            raise ValueError(f"expected {K} seed centroids, got {generations.n_clusters}")

        self.state = EngineState.ROUND_START
        self.rounds = 0
        self.timer.reset()
        converged = False
        label = -1

        while True:
            current = generations.current

            self.state = EngineState.CLASSIFY
            with self.timer.phase("classify"):
                label = classify(observation, current)
                partial = PartialAggregate.for_observation(observation, label, K)

            self.state = EngineState.REDUCE
            with self.timer.phase("reduce"):
                aggregate = reduce_aggregate(self.comm, partial, self.config.layout)

            self.state = EngineState.UPDATE
            with self.timer.phase("update"):
                proposed = update_centroids(current, aggregate)
                converged = has_converged(proposed, current, self.config.epsilon)

            generations.advance(proposed)
            max_change = float(np.max(np.abs(generations.current - generations.previous)))
            self.rounds = generations.generation
            self._log_round(aggregate, max_change, converged)

            if converged:
                self.state = EngineState.CONVERGED
                if self.logger:
                    self.logger.info(
                        f"Convergence reached after {self.rounds} rounds "
                        f"(max_change={max_change:.2e} <= epsilon={self.config.epsilon:.2e})"
                    )
                break

            if self.config.max_rounds is not None and self.rounds >= self.config.max_rounds:
                # решение зависит только от счётчика раундов, поэтому одинаково у всех
                if self.logger:
                    self.logger.warning(
                        f"Round limit {self.config.max_rounds} reached without "
                        f"convergence (max_change={max_change:.4f}, "
                        f"epsilon={self.config.epsilon})"
                    )
                break

            self.state = EngineState.ROUND_START

        return EngineResult(
            centroids=generations.current,
            rounds=self.rounds,
            converged=converged,
            label=label,
            timings=dict(self.timer.totals),
        )

    def _log_round(self, aggregate: GlobalAggregate, max_change: float, converged: bool) -> None:
        if not self.logger:
            return

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"Round {self.rounds}: sums={aggregate.sums.tolist()} "
                f"counts={aggregate.counts.tolist()}"
            )

        i = self.rounds
        if i == 1 or i % 10 == 0 or converged:
            status = " (converged)" if converged else ""
            last = self.timer.last
            self.logger.info(
                f"Round {i}{status} "
                f"(T_classify={last.get('classify', 0.0):.6f}s, "
                f"T_reduce={last.get('reduce', 0.0):.6f}s, "
                f"T_update={last.get('update', 0.0):.6f}s, "
                f"T_total={self.timer.total:.6f}s, "
                f"max_change={max_change:.2e})"
            )
