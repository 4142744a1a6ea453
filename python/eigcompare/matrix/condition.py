"""
Condition Number Primitives

Ratio of extreme singular values, used to decide whether a random
matrix is worth decomposing.
"""

import math

import numpy as np
from scipy import linalg

from eigcompare.config import EIGCOMPARE_CONFIG as cfg


def singular_values(matrix: np.ndarray) -> np.ndarray:
    """Singular values of a 2D matrix, descending."""
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2:
        raise ValueError("Matrix must be 2D")
    return linalg.svdvals(matrix)


def condition_number(matrix: np.ndarray) -> float:
    """
    Compute the 2-norm condition number sigma_max / sigma_min.

    Parameters
    ----------
    matrix : np.ndarray
        Square matrix (n x n)

    Returns
    -------
    float
        Condition number, always >= 1 for a nonsingular matrix.
        math.inf if the smallest singular value is exactly zero.

    Notes
    -----
    A rank-deficient matrix in floating point usually has a tiny but
    nonzero sigma_min, which gives a huge finite ratio rather than inf.
    Either way it lands above any sane regeneration threshold.
    """
    matrix = np.asarray(matrix, dtype=np.float64)

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError("Matrix must be square")
    if matrix.shape[0] == 0:
        raise ValueError("Matrix must be at least 1x1")
    if not np.all(np.isfinite(matrix)):
        raise ValueError("Matrix contains non-finite values")

    s = singular_values(matrix)
    s_max = float(s[0])
    s_min = float(s[-1])

    if s_min == 0.0:
        return math.inf

    return s_max / s_min


def is_well_conditioned(cond: float, threshold: float = None) -> bool:
    """True if cond is at or below the regeneration threshold."""
    if threshold is None:
        threshold = cfg.conditioning.threshold
    return cond <= threshold
