"""K-means over single-byte observations synchronized through collective reductions."""

from .config import AggregateLayout, Backend, EngineConfig, SharedConfig
from .errors import CollectiveError, DatasetReadError, KMeansFatalError, PreconditionError

__version__ = "0.1.0"

__all__ = [
    "AggregateLayout",
    "Backend",
    "EngineConfig",
    "SharedConfig",
    "CollectiveError",
    "DatasetReadError",
    "KMeansFatalError",
    "PreconditionError",
]
