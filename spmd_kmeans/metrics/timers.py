"""
Таймеры фаз раунда.

PhaseTimer накапливает время по именованным фазам (classify, reduce, update)
за все раунды одного запуска, используя time.perf_counter().
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Dict, Iterator


class PhaseTimer:
    """
    Накопитель времени по фазам.

    Пример использования:
        timer = PhaseTimer()
        with timer.phase("reduce"):
            comm.allreduce_sum(buf)
        timer.totals["reduce"]
    """

    def __init__(self) -> None:
        self.totals: Dict[str, float] = {}
        self.last: Dict[str, float] = {}

    @contextmanager
    def phase(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.last[name] = elapsed
            self.totals[name] = self.totals.get(name, 0.0) + elapsed

    @property
    def total(self) -> float:
        """Суммарное время по всем фазам."""
        return sum(self.totals.values())

    def reset(self) -> None:
        self.totals.clear()
        self.last.clear()
