from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AggregateLayout(str, Enum):
    """Раскладка частичного агрегата на время редукции."""

    # суммы и счётчики в одном векторе длины 2K, одна редукция за раунд
    INLINE = "inline"
    # суммы (float64) и счётчики (int64) отдельно, две редукции за раунд
    SPLIT = "split"


class Backend(str, Enum):
    SHARED = "shared"
    MPI = "mpi"


# Два известных варианта алгоритма отличаются только порогом сходимости
EPSILON_FINE: float = 0.01
EPSILON_COARSE: float = 0.1

DEFAULT_CLUSTERS: int = 4
DEFAULT_INPUT: str = "numbers"
ROOT_RANK: int = 0


@dataclass(frozen=True)
class EngineConfig:
    """Параметры цикла сходимости."""

    n_clusters: int = DEFAULT_CLUSTERS
    epsilon: float = EPSILON_FINE
    max_rounds: Optional[int] = None
    layout: AggregateLayout = AggregateLayout.INLINE

    def __post_init__(self) -> None:
        if self.n_clusters < 1:
            raise ValueError("n_clusters must be positive")
        if self.epsilon < 0:
            raise ValueError("epsilon must be non-negative")
        if self.max_rounds is not None and self.max_rounds < 1:
            raise ValueError("max_rounds must be positive or None")


@dataclass(frozen=True)
class SharedConfig:
    """Параметры бэкенда на разделяемой памяти."""

    n_workers: int = 4
    barrier_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if self.n_workers < 1:
            raise ValueError("n_workers must be positive")
        if self.barrier_timeout is not None and self.barrier_timeout <= 0:
            raise ValueError("barrier_timeout must be positive or None")
