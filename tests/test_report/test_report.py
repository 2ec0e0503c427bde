"""
Тесты итогового отчёта.
"""

from collections import Counter

import numpy as np

from spmd_kmeans.report import ClusterReport, build_report, format_cluster, format_report


class TestReport:
    def test_separated_scenario(self):
        clusters = build_report(np.array([10.0, 20.0, 200.0, 210.0]), np.array([10, 20, 200, 210]))

        assert format_report(clusters) == "[10.0] 10\n[20.0] 20\n[200.0] 200\n[210.0] 210"

    def test_members_in_dataset_order(self):
        clusters = build_report(np.array([15.0, 105.0]), np.array([30, 0, 110, 10, 100, 20]))

        assert clusters[0].members == (30, 0, 10, 20)
        assert clusters[1].members == (110, 100)
        assert format_cluster(clusters[0]) == "[15.0] 30, 0, 10, 20"

    def test_empty_cluster_line(self):
        assert format_cluster(ClusterReport(centroid=5.0, members=())) == "[5.0]"

    def test_conservation(self, rng):
        observations = rng.integers(0, 256, size=50)
        centroids = np.array([12.5, 64.0, 64.0, 190.25])

        clusters = build_report(centroids, observations)

        members = [v for c in clusters for v in c.members]
        assert Counter(members) == Counter(observations.tolist())
        assert clusters[2].members == ()

    def test_one_decimal(self):
        assert format_cluster(ClusterReport(centroid=33.333, members=(33,))) == "[33.3] 33"
