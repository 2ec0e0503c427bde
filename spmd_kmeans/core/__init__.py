from .centroids import CentroidGenerations
from .distribution import distribute
from .engine import (
    ConvergenceEngine,
    EngineResult,
    EngineState,
    GlobalAggregate,
    PartialAggregate,
    classify,
    classify_all,
    has_converged,
    reduce_aggregate,
    update_centroids,
)

__all__ = [
    "CentroidGenerations",
    "distribute",
    "ConvergenceEngine",
    "EngineResult",
    "EngineState",
    "GlobalAggregate",
    "PartialAggregate",
    "classify",
    "classify_all",
    "has_converged",
    "reduce_aggregate",
    "update_centroids",
]
