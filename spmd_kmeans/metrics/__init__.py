from .timers import PhaseTimer

__all__ = [
    "PhaseTimer",
]
