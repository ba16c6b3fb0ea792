""" Nearest neighbor graphs and their largest connected component.
Vertices are the rows of the input data, edges carry the distance between their endpoints.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Sequence, Tuple, Union
from collections.abc import Mapping
import warnings
import numpy as np
from scipy import sparse
from scipy.sparse.csgraph import connected_components
from sklearn.neighbors import NearestNeighbors
from sklearn.utils import check_array

Distance = Union[None, str, Callable[[object, object], float]]


class _ReadOnlyRow(Mapping):
    """Immutable neighbor -> distance row of a frozen graph."""

    def __init__(self, row):
        self._row = dict(row)

    def __getitem__(self, key):
        return self._row[key]

    def __iter__(self):
        return iter(self._row)

    def __len__(self):
        return len(self._row)


@dataclass
class NeighborGraph:
    """Undirected weighted graph stored as an adjacency list.

    Parameters
    ----------
    n_vertices : int
        Number of vertices, labelled 0..n_vertices-1.
    adjacency : list of dict, or a tuple of read-only mappings for a frozen graph
        adjacency[i] maps each neighbor j of i to the distance of the edge (i, j).
        Every edge is kept under both of its endpoints with the same distance.
    """
    n_vertices: int
    adjacency: Sequence[Mapping[int, float]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.adjacency:
            self.adjacency = [{} for _ in range(self.n_vertices)]
        if len(self.adjacency) != self.n_vertices:
            raise ValueError(f"Expected {self.n_vertices} adjacency rows, got {len(self.adjacency)}")

    @classmethod
    def from_edges(cls, n_vertices: int, edges: Iterable[Tuple[int, int, float]]) -> "NeighborGraph":
        graph = cls(n_vertices)
        for v1, v2, dist in edges:
            graph.add_edge(v1, v2, dist)
        return graph

    def add_edge(self, v1: int, v2: int, dist: float) -> None:
        if self.read_only:
            raise ValueError("Cannot add edges to a read-only graph")
        if not (0 <= v1 < self.n_vertices and 0 <= v2 < self.n_vertices):
            raise ValueError(f"Edge ({v1}, {v2}) is out of range for {self.n_vertices} vertices")
        dist = float(dist)
        self.adjacency[v1][v2] = dist
        self.adjacency[v2][v1] = dist

    @property
    def read_only(self) -> bool:
        return isinstance(self.adjacency, tuple)

    def frozen(self) -> "NeighborGraph":
        """Read-only copy of the graph, its adjacency rows cannot be modified."""
        if self.read_only:
            return self
        return NeighborGraph(self.n_vertices, tuple(_ReadOnlyRow(row) for row in self.adjacency))

    def edges(self, i: int) -> Iterator[Tuple[int, float]]:
        """Yields (neighbor, distance) once for every edge incident to vertex i."""
        yield from self.adjacency[i].items()

    def degree(self, i: int) -> int:
        return len(self.adjacency[i])

    @property
    def n_edges(self) -> int:
        loops = sum(1 for i, row in enumerate(self.adjacency) if i in row)
        return (sum(len(row) for row in self.adjacency) - loops) // 2 + loops

    def _coo(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        rows, cols, dists = [], [], []
        for i, row in enumerate(self.adjacency):
            for j, dist in row.items():
                rows.append(i)
                cols.append(j)
                dists.append(dist)
        return (np.asarray(rows, dtype=np.int64),
                np.asarray(cols, dtype=np.int64),
                np.asarray(dists, dtype=float))

    def to_sparse(self) -> sparse.csr_matrix:
        """Distance matrix in CSR form. Zero-length edges are kept as explicit zeros."""
        rows, cols, dists = self._coo()
        return sparse.csr_matrix((dists, (rows, cols)), shape=(self.n_vertices, self.n_vertices))

    def connectivity(self) -> sparse.csr_matrix:
        rows, cols, _ = self._coo()
        ones = np.ones(len(rows))
        return sparse.csr_matrix((ones, (rows, cols)), shape=(self.n_vertices, self.n_vertices))

    def subgraph(self, vertices: Sequence[int]) -> "NeighborGraph":
        """Induced subgraph on `vertices`, relabelled 0..len(vertices)-1 in the given order."""
        relabel = {int(v): new for new, v in enumerate(vertices)}
        adjacency = []
        for v in vertices:
            adjacency.append({relabel[j]: dist for j, dist in self.adjacency[int(v)].items() if j in relabel})
        return NeighborGraph(len(relabel), adjacency)


def _pairwise_neighbors(data: Sequence, distance: Callable, k: int) -> Tuple[np.ndarray, np.ndarray]:
    n = len(data)
    dists = np.zeros((n, n))
    for i in range(n):
        for j in range(i + 1, n):
            dists[i, j] = dists[j, i] = float(distance(data[i], data[j]))
    np.fill_diagonal(dists, np.inf)
    indices = np.argsort(dists, axis=1, kind="stable")[:, :k]
    return np.take_along_axis(dists, indices, axis=1), indices


def build_knn_graph(data, distance: Distance = None, k: int = 7) -> NeighborGraph:
    """
    Builds the undirected k-nearest neighbor graph of the data.

    Parameters
    ----------
    data : array-like of shape (n, D), or a sequence of arbitrary objects when
        `distance` is a callable.
    distance : None, str or callable
        None or a metric name accepted by sklearn's NearestNeighbors, or a
        function distance(a, b) -> float. Callables are evaluated on all pairs.
    k : int
        Number of neighbors linked to each sample, excluding the sample itself.
    """
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")
    n = len(data)
    if n == 0:
        raise ValueError("Cannot build a neighbor graph from empty data")
    if n == 1:
        return NeighborGraph(1)
    if k >= n:
        warnings.warn(f"k={k} is not smaller than the number of samples {n}; using k={n - 1}")
        k = n - 1

    if callable(distance):
        dists, indices = _pairwise_neighbors(data, distance, k)
    else:
        X = check_array(data)
        nbrs = NearestNeighbors(n_neighbors=k, metric=distance or "euclidean").fit(X)
        # Without a query argument a sample is never its own neighbor.
        dists, indices = nbrs.kneighbors()

    graph = NeighborGraph(n)
    for i in range(n):
        for j, dist in zip(indices[i], dists[i]):
            graph.add_edge(i, int(j), dist)
    return graph


def largest_connected_component(graph: NeighborGraph) -> Tuple[np.ndarray, NeighborGraph]:
    """
    Restricts the graph to its largest connected component.

    Returns
    ----------
    index : np.ndarray, original vertex id of each retained vertex, ascending.
    graph : NeighborGraph, the component relabelled to 0..len(index)-1.
    """
    n_components, labels = connected_components(graph.connectivity(), directed=False)
    if n_components == 1:
        return np.arange(graph.n_vertices), graph

    largest = np.argmax(np.bincount(labels))
    index = np.flatnonzero(labels == largest)
    return index, graph.subgraph(index)
