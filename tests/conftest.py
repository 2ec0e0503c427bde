"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest

from spmd_kmeans.config import EngineConfig
from spmd_kmeans.data.dataset import write_bytes


@pytest.fixture
def write_numbers(tmp_path):
    """Фабрика: записывает наблюдения в файл датасета и возвращает путь."""

    def _write(values, name="numbers"):
        return write_bytes(tmp_path / name, values)

    return _write


@pytest.fixture
def separated_dataset():
    """Четыре наблюдения, каждое уже ближе всего к своему стартовому центроиду."""
    return [10, 20, 200, 210]


@pytest.fixture
def two_groups_dataset():
    """Две группы значений; сходимость за несколько раундов при K=2."""
    return [0, 10, 20, 30, 100, 110]


@pytest.fixture
def default_config():
    return EngineConfig(n_clusters=4, epsilon=0.01)


@pytest.fixture
def rng():
    return np.random.default_rng(42)
