"""
Eigendecomposition Container and Reconstruction Check

A = V @ diag(W) @ inv(V) is the correctness contract every backend is
held to. Relative reconstruction error measures how far a result is from it.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from scipy import linalg

from eigcompare.config import EIGCOMPARE_CONFIG as cfg
from eigcompare.errors import ReconstructionError

logger = logging.getLogger(__name__)


def as_square_matrix(matrix) -> np.ndarray:
    """Validate and return matrix as a float64 square array (no copy if possible)."""
    matrix = np.asarray(matrix)

    if np.iscomplexobj(matrix):
        raise ValueError("Complex matrices are not supported")
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError("Matrix must be square")
    if matrix.shape[0] == 0:
        raise ValueError("Matrix must be at least 1x1")

    matrix = matrix.astype(np.float64, copy=False)
    if not np.all(np.isfinite(matrix)):
        raise ValueError("Matrix contains non-finite values")

    return matrix


@dataclass(frozen=True)
class EigenDecomposition:
    """
    Real eigendecomposition as reported by a backend.

    Attributes
    ----------
    eigenvalues : np.ndarray
        Real parts of the eigenvalues (n,)
    eigenvectors : np.ndarray
        Eigenvector matrix (n x n), column i pairs with eigenvalues[i]
    eigenvalues_imag : np.ndarray
        Imaginary parts (n,). Zeros when every eigenvalue is real.

    Notes
    -----
    Complex eigenpairs are projected to real numbers by the backends, so
    for a matrix with complex eigenvalues the contract above only holds
    approximately, if at all. n_complex says how much was dropped.
    """

    eigenvalues: np.ndarray
    eigenvectors: np.ndarray
    eigenvalues_imag: Optional[np.ndarray] = field(default=None)

    def __post_init__(self):
        w = np.asarray(self.eigenvalues, dtype=np.float64).reshape(-1)
        v = np.asarray(self.eigenvectors, dtype=np.float64)
        n = w.shape[0]

        if v.shape != (n, n):
            raise ValueError(
                f"Eigenvector matrix shape {v.shape} does not match {n} eigenvalues"
            )

        if self.eigenvalues_imag is None:
            wi = np.zeros(n)
        else:
            wi = np.asarray(self.eigenvalues_imag, dtype=np.float64).reshape(-1)
            if wi.shape != (n,):
                raise ValueError("Imaginary parts must match eigenvalue count")

        object.__setattr__(self, "eigenvalues", w)
        object.__setattr__(self, "eigenvectors", v)
        object.__setattr__(self, "eigenvalues_imag", wi)

    @property
    def n(self) -> int:
        return self.eigenvalues.shape[0]

    @property
    def n_complex(self) -> int:
        """Number of eigenvalues with a nonzero imaginary part."""
        return int(np.sum(np.abs(self.eigenvalues_imag) > cfg.validation.complex_tol))

    def canonical(self) -> "EigenDecomposition":
        """
        Sort eigenpairs by (real, imag) eigenvalue and fix eigenvector signs.

        Each column is flipped so that its largest-magnitude entry is
        positive. Makes results of different solvers comparable index by
        index when all eigenvalues are real and distinct.
        """
        idx = np.lexsort((self.eigenvalues_imag, self.eigenvalues))
        w = self.eigenvalues[idx]
        wi = self.eigenvalues_imag[idx]
        v = self.eigenvectors[:, idx].copy()

        if self.n > 0:
            pivot = np.argmax(np.abs(v), axis=0)
            signs = np.sign(v[pivot, np.arange(self.n)])
            signs[signs == 0] = 1.0
            v = v * signs

        return EigenDecomposition(eigenvalues=w, eigenvectors=v, eigenvalues_imag=wi)


def reconstruct(decomposition: EigenDecomposition) -> np.ndarray:
    """
    Rebuild the source matrix as V @ diag(W) @ inv(V).

    Raises
    ------
    ReconstructionError
        If V is singular, or its condition number exceeds
        cfg.validation.max_eigenvector_condition.
    """
    v = decomposition.eigenvectors
    w = decomposition.eigenvalues

    with np.errstate(divide="ignore", invalid="ignore"):
        v_cond = np.linalg.cond(v)
    if not np.isfinite(v_cond) or v_cond > cfg.validation.max_eigenvector_condition:
        raise ReconstructionError(
            f"Eigenvector matrix is numerically singular (cond={v_cond:g})"
        )

    try:
        v_inv = linalg.inv(v)
    except linalg.LinAlgError as e:
        raise ReconstructionError(f"Eigenvector matrix is singular: {e}") from e

    return (v * w) @ v_inv


def relative_error(
    matrix: np.ndarray,
    decomposition: EigenDecomposition,
    strict: bool = False,
) -> float:
    """
    Relative Frobenius reconstruction error ||A - A'||_F / ||A||_F.

    Parameters
    ----------
    matrix : np.ndarray
        Source matrix A
    decomposition : EigenDecomposition
        Backend result for A
    strict : bool
        If True, a ReconstructionError propagates. If False it is logged
        and math.inf is returned.

    Returns
    -------
    float
        Relative error. Absolute error if A is the zero matrix.

    Notes
    -----
    This is a self-check, not a gate: large values are reported, not acted on.
    """
    matrix = as_square_matrix(matrix)

    if decomposition.n != matrix.shape[0]:
        raise ValueError(
            f"Decomposition of order {decomposition.n} does not match "
            f"{matrix.shape[0]}x{matrix.shape[0]} matrix"
        )

    try:
        rebuilt = reconstruct(decomposition)
    except ReconstructionError as e:
        if strict:
            raise
        logger.warning("Reconstruction failed, reporting inf: %s", e)
        return math.inf

    diff = np.linalg.norm(matrix - rebuilt, "fro")
    ref = np.linalg.norm(matrix, "fro")

    if ref == 0.0:
        return float(diff)

    return float(diff / ref)
