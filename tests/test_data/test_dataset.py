"""
Тесты загрузки байтового датасета и стартовых условий.
"""

import numpy as np
import pytest

from spmd_kmeans.data.dataset import ByteDataset, generate_bytes, read_bytes, write_bytes
from spmd_kmeans.data.validation import (
    validate_preconditions,
    validate_seed_count,
    validate_worker_count,
)
from spmd_kmeans.errors import DatasetReadError, KMeansFatalError, PreconditionError


class TestReadBytes:
    def test_reads_all(self, write_numbers):
        path = write_numbers([0, 1, 128, 255])

        data = read_bytes(path)

        assert data.dtype == np.uint8
        np.testing.assert_array_equal(data, [0, 1, 128, 255])

    def test_truncates_to_limit(self, write_numbers):
        path = write_numbers([1, 2, 3, 4, 5, 6, 7, 8])

        np.testing.assert_array_equal(read_bytes(path, 4), [1, 2, 3, 4])
        # limit больше размера файла: читается весь файл
        assert read_bytes(path, 100).shape == (8,)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetReadError):
            read_bytes(tmp_path / "absent")

    def test_write_rejects_out_of_range(self, tmp_path):
        with pytest.raises(ValueError):
            write_bytes(tmp_path / "bad", [1, 256])


class TestByteDataset:
    def test_seed_centroids(self, write_numbers):
        dataset = ByteDataset(write_numbers([10, 20, 200, 210, 5]), limit=4)

        assert len(dataset) == 4
        seeds = dataset.seed_centroids(4)
        assert seeds.dtype == np.float64
        np.testing.assert_array_equal(seeds, [10.0, 20.0, 200.0, 210.0])

    def test_seed_needs_k_observations(self, write_numbers):
        dataset = ByteDataset(write_numbers([1, 2, 3]))

        with pytest.raises(PreconditionError):
            dataset.seed_centroids(4)


    def test_shard_is_first_w_observations(self, write_numbers):
        dataset = ByteDataset(write_numbers([10, 20, 200, 210, 1, 2]), limit=4)

        np.testing.assert_array_equal(dataset.shard(2), [10, 20])
        np.testing.assert_array_equal(dataset.seed_centroids(4), [10.0, 20.0, 200.0, 210.0])

    def test_shard_needs_w_observations(self, write_numbers):
        dataset = ByteDataset(write_numbers([1, 2, 3]))

        with pytest.raises(PreconditionError):
            dataset.shard(4)


class TestValidation:
    def test_worker_count(self):
        validate_worker_count(8, 8)
        with pytest.raises(PreconditionError, match="too small"):
            validate_worker_count(8, 9)

    def test_seed_count(self):
        validate_seed_count(4, 4)
        with pytest.raises(PreconditionError):
            validate_seed_count(3, 4)

    def test_preconditions_are_fatal(self):
        with pytest.raises(KMeansFatalError) as info:
            validate_preconditions(2, 2, 4)
        assert info.value.exit_code == 1


def test_generate_bytes_reproducible():
    a = generate_bytes(32, seed=7)
    b = generate_bytes(32, seed=7)

    assert a.dtype == np.uint8
    np.testing.assert_array_equal(a, b)
