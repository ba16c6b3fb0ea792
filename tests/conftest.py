import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from eigenmaps.utils.graph import NeighborGraph


@pytest.fixture
def unit_square():
    """Corners of the unit square in cyclic order, k=2 links each corner to its two sides."""
    return np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])


@pytest.fixture
def cycle_graph():
    return NeighborGraph.from_edges(4, [(0, 1, 1.0), (1, 2, 1.0), (2, 3, 1.0), (3, 0, 1.0)])


@pytest.fixture
def noisy_circle():
    rng = np.random.RandomState(0)
    theta = np.sort(rng.uniform(0, 2 * np.pi, 80))
    return np.column_stack([np.cos(theta), np.sin(theta)]) + rng.normal(scale=0.01, size=(80, 2))
