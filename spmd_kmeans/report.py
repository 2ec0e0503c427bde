"""
Итоговый отчёт инициализирующего участника.

Принадлежность к кластерам заново вычисляется по всему (усечённому до W)
датасету относительно финальных центроидов той же функцией классификации,
что и в цикле. Воркер в последнем раунде классифицировал по предыдущему
поколению, отличающемуся от финального не более чем на epsilon, поэтому
результаты на практике совпадают, но строго это не гарантировано.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from spmd_kmeans.core.engine import classify_all


@dataclass(frozen=True)
class ClusterReport:
    centroid: float
    members: Tuple[int, ...]


def build_report(centroids: np.ndarray, observations: np.ndarray) -> List[ClusterReport]:
    """Кластеры в порядке индексов, члены в порядке датасета."""
    observations = np.asarray(observations).reshape(-1)
    labels = classify_all(observations, centroids)
    return [
        ClusterReport(
            centroid=float(c),
            members=tuple(int(v) for v in observations[labels == k]),
        )
        for k, c in enumerate(np.asarray(centroids))
    ]


def format_cluster(cluster: ClusterReport) -> str:
    """Строка вида ``[15.0] 10, 20``; у пустого кластера только центроид."""
    members = ",".join(f" {v}" for v in cluster.members)
    return f"[{cluster.centroid:.1f}]{members}"


def format_report(clusters: List[ClusterReport]) -> str:
    return "\n".join(format_cluster(c) for c in clusters)
