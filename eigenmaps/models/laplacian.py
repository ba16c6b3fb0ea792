""" Symmetrically normalized graph Laplacian of a nearest neighbor graph.
L = I - D^(-1/2) W D^(-1/2), with W holding either discrete (0/1) or heat kernel weights.
Reference: Belkin and Niyogi, Laplacian Eigenmaps and Spectral Techniques for Embedding and Clustering, NIPS 2001.
"""

from __future__ import annotations
from dataclasses import dataclass
import numpy as np
from scipy import sparse

from eigenmaps.utils.graph import NeighborGraph


@dataclass(frozen=True)
class GraphLaplacian:
    """
    Parameters
    ----------
    laplacian : sparse.csr_matrix, shape (n, n)
        I - Dinv W Dinv, unit diagonal.
    weights : sparse.csr_matrix, shape (n, n)
        Edge weight matrix W.
    degree : np.ndarray, shape (n,)
        Row sums of W.
    inverse_sqrt_degree : np.ndarray, shape (n,)
        1 / sqrt(degree).
    """
    laplacian: sparse.csr_matrix
    weights: sparse.csr_matrix
    degree: np.ndarray
    inverse_sqrt_degree: np.ndarray

    @property
    def n_vertices(self) -> int:
        return self.laplacian.shape[0]


def edge_weights(distances, t: float) -> np.ndarray:
    """Discrete weights (all ones) when t <= 0, heat kernel exp(-dist^2 / t) otherwise."""
    distances = np.asarray(distances, dtype=float)
    if t <= 0:
        return np.ones_like(distances)
    return np.exp(-distances ** 2 / t)


def build_laplacian(graph: NeighborGraph, t: float = -1.0) -> GraphLaplacian:
    """
    Builds the normalized Laplacian of a connected neighbor graph.

    Every vertex must have at least one incident edge. This is not checked: a
    vertex of degree 0 gets an infinite inverse degree and the Laplacian fills
    with nan. Callers guarantee it by restricting to the largest connected component.

    Parameters
    ----------
    graph : NeighborGraph
    t : float
        Width of the heat kernel. Non-positive values mean discrete weights.
    """
    n = graph.n_vertices
    rows, cols, dists = [], [], []
    for i in range(n):
        for j, dist in graph.edges(i):
            rows.append(i)
            cols.append(j)
            dists.append(dist)
    rows = np.asarray(rows, dtype=np.int64)
    cols = np.asarray(cols, dtype=np.int64)
    w = edge_weights(dists, t)

    W = sparse.csr_matrix((w, (rows, cols)), shape=(n, n))
    degree = np.asarray(W.sum(axis=1)).ravel()
    inverse_sqrt_degree = 1.0 / np.sqrt(degree)

    # Diagonal is set to exactly 1.0, self-loops only count towards the degree.
    off = rows != cols
    scale = inverse_sqrt_degree[rows[off]] * inverse_sqrt_degree[cols[off]]
    diagonal = np.arange(n)
    L = sparse.csr_matrix(
        (np.concatenate([-scale * w[off], np.ones(n)]),
         (np.concatenate([rows[off], diagonal]), np.concatenate([cols[off], diagonal]))),
        shape=(n, n),
    )
    return GraphLaplacian(laplacian=L, weights=W, degree=degree, inverse_sqrt_degree=inverse_sqrt_degree)
