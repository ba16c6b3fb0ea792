""" Sparse eigen-decomposition of the normalized Laplacian and extraction of embedding coordinates. """

from __future__ import annotations
from typing import Optional, Tuple, Union
import warnings
import numpy as np
from scipy import linalg, sparse
from scipy.sparse.linalg import ArpackNoConvergence, eigsh
from sklearn.utils import check_random_state


class InsufficientSpectrumError(ValueError):
    """The eigensolver returned too few eigenpairs to build the requested embedding."""


class DegenerateEmbeddingWarning(UserWarning):
    """An embedding coordinate has zero norm across all samples."""


class Eigensolver:
    """Returns the eigenpairs of smallest magnitude of a symmetric matrix.

    Implementations may return fewer than `count` pairs when the matrix is
    smaller than that. Pairs come back in no particular order.
    """

    def smallest_magnitude_eigenpairs(self, matrix, count: int) -> Tuple[np.ndarray, np.ndarray]:
        raise NotImplementedError


class DenseEigensolver(Eigensolver):

    def smallest_magnitude_eigenpairs(self, matrix, count: int) -> Tuple[np.ndarray, np.ndarray]:
        A = matrix.toarray() if sparse.issparse(matrix) else np.asarray(matrix, dtype=float)
        evals, evecs = linalg.eigh(A)
        idx = np.argsort(np.abs(evals), kind="stable")[:max(count, 0)]
        return evals[idx], evecs[:, idx]


class ArpackEigensolver(Eigensolver):
    """
    Implicitly restarted Lanczos (ARPACK) through scipy's eigsh.

    Parameters
    ----------
    tol : float
        Relative accuracy of the eigenvalues, 0 means machine precision.
    max_iter : int or None
        Maximum number of Arnoldi update iterations.
    random_state : int, RandomState or None
        Seeds the starting vector, so repeated calls give identical results.
    """

    def __init__(self, tol: float = 0.0, max_iter: Optional[int] = None, random_state=0):
        self.tol = tol
        self.max_iter = max_iter
        self.random_state = random_state

    def smallest_magnitude_eigenpairs(self, matrix, count: int) -> Tuple[np.ndarray, np.ndarray]:
        n = matrix.shape[0]
        # eigsh needs count < n and struggles when asked for nearly the whole spectrum.
        if count >= n - 1:
            return DenseEigensolver().smallest_magnitude_eigenpairs(matrix, count)

        v0 = check_random_state(self.random_state).uniform(-1, 1, n)
        try:
            return eigsh(matrix, k=count, which="SM", tol=self.tol, maxiter=self.max_iter, v0=v0)
        except ArpackNoConvergence as e:
            warnings.warn(f"ARPACK did not converge ({e}); falling back to a dense eigensolver for n={n}")
            return DenseEigensolver().smallest_magnitude_eigenpairs(matrix, count)


def get_eigensolver(eigen_solver: Union[str, Eigensolver] = "arpack", random_state=0) -> Eigensolver:
    if isinstance(eigen_solver, Eigensolver):
        return eigen_solver
    if eigen_solver == "arpack":
        return ArpackEigensolver(random_state=random_state)
    elif eigen_solver == "dense":
        return DenseEigensolver()
    else:
        raise ValueError(f"Unsupported eigen_solver: {eigen_solver}")


def spectrum_size(n: int, d: int, oversampling: int = 10) -> int:
    """
    Number of eigenpairs requested for a d-dimensional embedding of n vertices.
    ARPACK may miss some of the d + 1 smallest eigenvalues when they are clustered,
    so oversampling * (d + 1) are requested and the embedding is picked among them.
    """
    return max(min(oversampling * (d + 1), n - 1), min(d + 1, n))


def select_eigenpairs(eigenvalues: np.ndarray,
                      eigenvectors: np.ndarray,
                      d: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Skips the eigenpair of smallest eigenvalue magnitude (the trivial, constant
    eigenvector) and takes the next d in ascending order of magnitude.
    """
    eigenvalues = np.asarray(eigenvalues)
    if eigenvalues.shape[0] < d + 1:
        raise InsufficientSpectrumError(
            f"Insufficient spectrum: a {d}-dimensional embedding needs {d + 1} eigenpairs, "
            f"the eigensolver returned {eigenvalues.shape[0]}"
        )
    order = np.argsort(np.abs(eigenvalues), kind="stable")
    chosen = order[1:d + 1]
    return eigenvalues[chosen], eigenvectors[:, chosen]


def _deterministic_sign(vectors: np.ndarray) -> np.ndarray:
    # Largest absolute entry of every column is made positive.
    rows = np.argmax(np.abs(vectors), axis=0)
    signs = np.sign(vectors[rows, np.arange(vectors.shape[1])])
    signs[signs == 0] = 1.0
    return vectors * signs


def extract_coordinates(laplacian,
                        inverse_sqrt_degree: np.ndarray,
                        d: int,
                        eigensolver: Optional[Eigensolver] = None,
                        oversampling: int = 10) -> Tuple[np.ndarray, np.ndarray]:
    """
    Computes the embedding coordinates from the normalized Laplacian.

    Parameters
    ----------
    laplacian : sparse matrix, shape (n, n)
    inverse_sqrt_degree : np.ndarray, shape (n,)
        Rescales the eigenvectors of the normalized Laplacian back to the
        generalized eigenvectors of L y = lambda D y.
    d : int
        Dimension of the embedding.
    eigensolver : Eigensolver, default ArpackEigensolver()
    oversampling : int
        Factor applied to d + 1 when requesting eigenpairs.

    Returns
    ----------
    coordinates : np.ndarray, shape (n, d), every non-degenerate column has unit L2 norm.
    eigenvalues : np.ndarray, shape (d,), eigenvalue of each column.
    """
    if eigensolver is None:
        eigensolver = ArpackEigensolver()
    n = laplacian.shape[0]

    evals, evecs = eigensolver.smallest_magnitude_eigenpairs(laplacian, spectrum_size(n, d, oversampling))
    evals, evecs = select_eigenpairs(evals, evecs, d)

    coordinates = _deterministic_sign(np.asarray(evecs, dtype=float)) * inverse_sqrt_degree[:, np.newaxis]
    norms = np.linalg.norm(coordinates, axis=0)
    degenerate = norms == 0
    if degenerate.any():
        warnings.warn(
            f"Embedding columns {np.flatnonzero(degenerate).tolist()} have zero norm and are left as zeros",
            DegenerateEmbeddingWarning,
        )
    coordinates[:, ~degenerate] /= norms[~degenerate]
    return coordinates, np.asarray(evals, dtype=float)
