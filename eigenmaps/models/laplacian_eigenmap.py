""" Laplacian Eigenmap using k-nearest neighborhood graphs.
The original Paper: Laplacian Eigenmaps and Spectral Techniques for Embedding and Clustering, (Belkin and Niyogi, 2001),
Link to the paper: https://proceedings.neurips.cc/paper_files/paper/2001/file/f106b7f99d2cb30c3db1c3cc0fde9ccb-Paper.pdf

The embedding is computed on the largest connected component of the neighbor graph,
samples outside of it are dropped and `sample_indices` maps rows back to the input.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union
import math
import warnings
import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator

from eigenmaps.models.laplacian import build_laplacian
from eigenmaps.models.spectral import (Eigensolver, InsufficientSpectrumError,
                                       extract_coordinates, get_eigensolver)
from eigenmaps.utils.graph import Distance, NeighborGraph, build_knn_graph, largest_connected_component


@dataclass(frozen=True)
class EmbeddingResult:
    """
    Parameters
    ----------
    kernel_width : float
        Width t of the heat kernel, a non-positive value means discrete weights.
    sample_indices : np.ndarray, shape (n,)
        Index of the input sample behind each row of `coordinates`.
    coordinates : np.ndarray, shape (n, d)
        Coordinates in the embedding space, every column has unit L2 norm.
    graph : NeighborGraph
        Nearest neighbor graph restricted to its largest connected component, stored read-only.
    eigenvalues : np.ndarray, shape (d,)
        Laplacian eigenvalue behind each column of `coordinates`.
    """
    kernel_width: float
    sample_indices: np.ndarray
    coordinates: np.ndarray
    graph: NeighborGraph
    eigenvalues: np.ndarray

    def __post_init__(self) -> None:
        for name in ("sample_indices", "coordinates", "eigenvalues"):
            array = np.array(getattr(self, name))
            array.setflags(write=False)
            object.__setattr__(self, name, array)
        object.__setattr__(self, "graph", self.graph.frozen())

    @property
    def is_discrete(self) -> bool:
        return self.kernel_width <= 0

    @property
    def n_components(self) -> int:
        return self.coordinates.shape[1]

    def to_frame(self) -> pd.DataFrame:
        columns = [f"LE{j + 1}" for j in range(self.n_components)]
        index = pd.Index(self.sample_indices, name="sample")
        return pd.DataFrame(np.array(self.coordinates), index=index, columns=columns)


def embed(data,
          distance: Distance = None,
          k: int = 7,
          d: int = 2,
          t: float = -1.0,
          eigen_solver: Union[str, Eigensolver] = "arpack",
          oversampling: int = 10,
          random_state=0,
          verbose: bool = False) -> EmbeddingResult:
    """
    Laplacian Eigenmap of the data.

    Parameters
    ----------
    data : array-like of shape (N, D), or a sequence of objects when `distance` is a callable.
    distance : None, str or callable
        Distance between samples. None means Euclidean.
    k : int
        Number of nearest neighbors.
    d : int
        Dimension of the embedding.
    t : float
        Width of the heat kernel exp(-||x-y||^2 / t). Non-positive values mean discrete weights.
    eigen_solver : str ['arpack'|'dense'] or Eigensolver
    oversampling : int
        Eigenpairs requested from the solver are oversampling * (d + 1), capped by the graph size.
    random_state : int, RandomState or None
        Seeds the ARPACK starting vector.
    verbose : bool
    """
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")
    if d < 1:
        raise ValueError(f"d must be at least 1, got {d}")
    if oversampling < 1:
        raise ValueError(f"oversampling must be at least 1, got {oversampling}")
    if not math.isfinite(t):
        raise ValueError(f"t must be finite, got {t}")
    if len(data) == 0:
        raise ValueError("Cannot embed empty data")
    solver = get_eigensolver(eigen_solver, random_state=random_state)

    graph = build_knn_graph(data, distance, k)
    index, graph = largest_connected_component(graph)
    n = len(index)
    if verbose:
        print(f"Neighbor graph: {len(data)} samples, largest component {n} vertices, {graph.n_edges} edges")
    if n < len(data):
        warnings.warn(f"Neighbor graph is disconnected; embedding the largest component ({n} of {len(data)} samples)")
    if n < d + 1:
        raise InsufficientSpectrumError(
            f"Insufficient spectrum: a {d}-dimensional embedding needs at least {d + 1} connected samples, got {n}"
        )

    with np.errstate(divide="ignore", invalid="ignore"):
        laplacian = build_laplacian(graph, t)
    isolated = np.flatnonzero(laplacian.degree <= 0)
    if len(isolated):
        raise ValueError(
            f"Heat kernel width t={t} gives zero total weight to {len(isolated)} vertices "
            f"(e.g. sample {index[isolated[0]]}); increase t or use discrete weights (t <= 0)"
        )
    if verbose:
        print(f"Laplacian: {'discrete' if t <= 0 else f'heat kernel t={t}'} weights, {laplacian.laplacian.nnz} nonzeros")

    coordinates, eigenvalues = extract_coordinates(laplacian.laplacian, laplacian.inverse_sqrt_degree,
                                                   d, eigensolver=solver, oversampling=oversampling)
    if verbose:
        print(f"Eigenvalues: {np.array2string(eigenvalues, precision=6)}")

    return EmbeddingResult(kernel_width=t, sample_indices=index, coordinates=coordinates,
                           graph=graph, eigenvalues=eigenvalues)


class LaplacianEigenmap(BaseEstimator):
    """

    Parameters
    ----------
    n_components : int
        Number of dimensions of the embedding.
    n_neighbors : int
        Number of neighbors to build the graph.
    width : float
        Width t of the heat kernel exp(-||x-y||^2 / t). Non-positive values mean discrete weights.
    metric : None, str or callable
        Distance between samples, see build_knn_graph.
    eigen_solver : str ['arpack'|'dense'] or Eigensolver
    oversampling : int
        Factor applied to n_components + 1 when requesting eigenpairs.
    random_state : int, RandomState or None
    verbose : bool
    """
    def __init__(self, n_components=2, n_neighbors=10, width=-1.0, metric="euclidean",
                 eigen_solver="arpack", oversampling=10, random_state=0, verbose=False):
        self.n_components = n_components
        self.n_neighbors = n_neighbors
        self.width = width
        self.metric = metric
        self.eigen_solver = eigen_solver
        self.oversampling = oversampling
        self.random_state = random_state
        self.verbose = verbose

    def fit(self, X, y=None):
        self.result_ = embed(X, distance=self.metric, k=self.n_neighbors, d=self.n_components,
                             t=self.width, eigen_solver=self.eigen_solver,
                             oversampling=self.oversampling, random_state=self.random_state,
                             verbose=self.verbose)
        self.embedding_ = np.array(self.result_.coordinates)
        self.sample_indices_ = np.array(self.result_.sample_indices)
        self.eigenvalues_ = np.array(self.result_.eigenvalues)
        self.graph_ = self.result_.graph
        return self

    def fit_transform(self, X, y=None):
        """Embedding of the samples in the largest connected component, rows follow sample_indices_."""
        return self.fit(X).embedding_
