"""
Unit-тесты локальных шагов раунда: классификация, агрегаты, обновление.
"""

import numpy as np
import pytest

from spmd_kmeans.core.engine import (
    GlobalAggregate,
    PartialAggregate,
    classify,
    classify_all,
    has_converged,
    update_centroids,
)


class TestClassify:
    """Ближайший центроид по модулю разности."""

    def test_nearest_centroid(self):
        centroids = np.array([10.0, 20.0, 200.0, 210.0])

        assert classify(12, centroids) == 0
        assert classify(19, centroids) == 1
        assert classify(255, centroids) == 3
        assert classify(0, centroids) == 0

    def test_tie_goes_to_lower_index(self):
        assert classify(15, np.array([10.0, 20.0])) == 0
        assert classify(15, np.array([20.0, 10.0])) == 0
        assert classify(5, np.array([5.0, 5.0, 5.0])) == 0

    def test_classify_all_matches_classify(self):
        centroids = np.array([3.0, 50.5, 128.0, 128.0])
        observations = np.arange(256, dtype=np.uint8)

        labels = classify_all(observations, centroids)

        assert labels.shape == (256,)
        assert [classify(int(x), centroids) for x in observations] == labels.tolist()
        # дублирующийся центроид 3 никогда не выигрывает
        assert not np.any(labels == 3)


class TestAggregates:
    def test_partial_aggregate_single_slot(self):
        partial = PartialAggregate.for_observation(42, label=2, n_clusters=4)

        np.testing.assert_array_equal(partial.sums, [0.0, 0.0, 42.0, 0.0])
        np.testing.assert_array_equal(partial.counts, [0, 0, 1, 0])
        assert partial.sums.dtype == np.float64
        assert partial.counts.dtype == np.int64

    def test_update_centroids_means(self):
        previous = np.array([0.0, 54.0])
        aggregate = GlobalAggregate(
            sums=np.array([30.0, 240.0]),
            counts=np.array([3, 3]),
        )

        proposed = update_centroids(previous, aggregate)

        np.testing.assert_allclose(proposed, [10.0, 80.0], rtol=1e-12)

    def test_update_centroids_empty_cluster_keeps_previous(self):
        previous = np.array([5.0, 5.0, 100.0])
        aggregate = GlobalAggregate(
            sums=np.array([10.0, 0.0, 100.0]),
            counts=np.array([2.0, 0.0, 1.0]),
        )

        proposed = update_centroids(previous, aggregate)

        np.testing.assert_array_equal(proposed, [5.0, 5.0, 100.0])
        assert not np.any(np.isnan(proposed))

    def test_update_does_not_touch_previous(self):
        previous = np.array([1.0, 2.0])
        previous.setflags(write=False)
        aggregate = GlobalAggregate(sums=np.array([4.0, 0.0]), counts=np.array([2, 0]))

        proposed = update_centroids(previous, aggregate)

        np.testing.assert_array_equal(previous, [1.0, 2.0])
        np.testing.assert_array_equal(proposed, [2.0, 2.0])


class TestConvergencePredicate:
    @pytest.mark.parametrize(
        "delta,epsilon,expected",
        [
            (0.0, 0.01, True),
            (0.01, 0.01, True),
            (0.02, 0.01, False),
            (0.05, 0.1, True),
            (0.5, 0.1, False),
        ],
    )
    def test_threshold(self, delta, epsilon, expected):
        previous = np.array([0.0, 0.0])
        proposed = np.array([0.0, delta])

        assert has_converged(proposed, previous, epsilon) is expected

    def test_every_centroid_must_be_stable(self):
        previous = np.array([10.0, 20.0, 30.0])
        proposed = np.array([10.0, 20.0, 31.0])

        assert not has_converged(proposed, previous, 0.1)
