"""Tests for the nearest neighbor graph and its largest connected component."""

import numpy as np
import pytest

from eigenmaps.utils.graph import NeighborGraph, build_knn_graph, largest_connected_component


class TestNeighborGraph:

    def test_edges_are_stored_under_both_endpoints(self, cycle_graph):
        assert dict(cycle_graph.edges(0)) == {1: 1.0, 3: 1.0}
        assert dict(cycle_graph.edges(3)) == {2: 1.0, 0: 1.0}
        assert cycle_graph.n_edges == 4

    def test_out_of_range_edge(self):
        with pytest.raises(ValueError):
            NeighborGraph.from_edges(2, [(0, 2, 1.0)])

    def test_to_sparse_is_symmetric(self, cycle_graph):
        A = cycle_graph.to_sparse().toarray()
        np.testing.assert_array_equal(A, A.T)
        assert A[0, 2] == 0.0

    def test_connectivity_keeps_zero_length_edges(self):
        graph = NeighborGraph.from_edges(2, [(0, 1, 0.0)])
        assert graph.connectivity().nnz == 2

    def test_subgraph_relabels(self, cycle_graph):
        sub = cycle_graph.subgraph([1, 2, 3])
        assert sub.n_vertices == 3
        assert dict(sub.edges(0)) == {1: 1.0}
        assert dict(sub.edges(1)) == {0: 1.0, 2: 1.0}

    def test_frozen_copy(self, cycle_graph):
        frozen = cycle_graph.frozen()
        assert frozen.read_only
        assert frozen.frozen() is frozen
        assert dict(frozen.edges(0)) == {1: 1.0, 3: 1.0}
        with pytest.raises(ValueError):
            frozen.add_edge(0, 2, 1.0)
        cycle_graph.add_edge(0, 2, 1.0)
        assert frozen.n_edges == 4
        assert (frozen.to_sparse() != cycle_graph.to_sparse()).nnz == 2


class TestBuildKnnGraph:

    def test_square_gives_cycle(self, unit_square):
        graph = build_knn_graph(unit_square, None, k=2)
        for i in range(4):
            assert set(dict(graph.edges(i))) == {(i - 1) % 4, (i + 1) % 4}
            assert all(dist == pytest.approx(1.0) for _, dist in graph.edges(i))

    def test_no_self_loops(self, noisy_circle):
        graph = build_knn_graph(noisy_circle, "euclidean", k=5)
        for i in range(graph.n_vertices):
            assert i not in dict(graph.edges(i))
            assert graph.degree(i) >= 5

    def test_symmetric_distances(self, noisy_circle):
        graph = build_knn_graph(noisy_circle, None, k=4)
        A = graph.to_sparse()
        assert abs(A - A.T).max() == 0.0

    def test_callable_distance_on_objects(self):
        words = ["a", "ab", "abc", "abcd", "abcdefgh"]
        graph = build_knn_graph(words, lambda x, y: abs(len(x) - len(y)), k=1)
        assert dict(graph.edges(0)) == {1: 1.0}
        assert dict(graph.edges(4)) == {3: 4.0}

    def test_callable_matches_metric_name(self, noisy_circle):
        named = build_knn_graph(noisy_circle, "euclidean", k=3)
        custom = build_knn_graph(noisy_circle, lambda x, y: float(np.linalg.norm(x - y)), k=3)
        for i in range(len(noisy_circle)):
            assert set(dict(named.edges(i))) == set(dict(custom.edges(i)))

    def test_k_is_clipped(self, unit_square):
        with pytest.warns(UserWarning, match="k=10"):
            graph = build_knn_graph(unit_square, None, k=10)
        assert graph.n_edges == 6

    @pytest.mark.parametrize("k", [0, -3])
    def test_invalid_k(self, unit_square, k):
        with pytest.raises(ValueError):
            build_knn_graph(unit_square, None, k=k)

    def test_empty_data(self):
        with pytest.raises(ValueError):
            build_knn_graph(np.empty((0, 2)), None, k=2)


class TestLargestConnectedComponent:

    def test_connected_graph_is_unchanged(self, cycle_graph):
        index, graph = largest_connected_component(cycle_graph)
        np.testing.assert_array_equal(index, np.arange(4))
        assert graph is cycle_graph

    def test_keeps_largest_cluster(self):
        rng = np.random.RandomState(1)
        small = rng.normal(size=(6, 2)) * 0.1 + 100.0
        large = rng.normal(size=(20, 2)) * 0.1
        data = np.vstack([small, large])
        index, graph = largest_connected_component(build_knn_graph(data, None, k=5))
        np.testing.assert_array_equal(index, np.arange(6, 26))
        assert graph.n_vertices == 20
        for i in range(graph.n_vertices):
            assert all(0 <= j < 20 for j, _ in graph.edges(i))
