"""
Self-contained QR Eigen-solver

Pure numpy general eigen-solver used when the library backend runs
without LAPACK. No scipy.linalg / numpy.linalg factorizations are called.

Pipeline:
    1. Householder reduction to upper Hessenberg form   A = Q H Q^H
    2. Complex single-shift QR iteration to Schur form  H = Z' T Z'^H
    3. Back substitution on T for its eigenvectors      T y = lambda y
    4. Back transformation and unit-norm columns        v = Q Z' y
"""

from typing import Tuple

import numpy as np

from eigcompare.config import EIGCOMPARE_CONFIG as cfg
from eigcompare.errors import DecompositionError

_EPS = np.finfo(np.float64).eps
_TINY = np.finfo(np.float64).tiny


def hessenberg(matrix: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Reduce a square matrix to upper Hessenberg form with Householder reflectors.

    Parameters
    ----------
    matrix : np.ndarray
        Square matrix (n x n), real or complex

    Returns
    -------
    tuple
        (H, Q) complex, with matrix = Q @ H @ Q^H and Q unitary
    """
    h = np.array(matrix, dtype=np.complex128)
    n = h.shape[0]
    q = np.eye(n, dtype=np.complex128)

    for k in range(n - 2):
        x = h[k + 1:, k]
        norm_x = np.sqrt(np.sum(np.abs(x) ** 2))
        if norm_x == 0.0:
            continue

        phase = x[0] / abs(x[0]) if x[0] != 0 else 1.0
        v = x.copy()
        v[0] += phase * norm_x
        v /= np.sqrt(np.sum(np.abs(v) ** 2))

        # P = I - 2 v v^H applied as H <- P H P, Q <- Q P
        h[k + 1:, :] -= 2.0 * np.outer(v, v.conj() @ h[k + 1:, :])
        h[:, k + 1:] -= 2.0 * np.outer(h[:, k + 1:] @ v, v.conj())
        q[:, k + 1:] -= 2.0 * np.outer(q[:, k + 1:] @ v, v.conj())
        h[k + 2:, k] = 0.0

    return h, q


def _givens(x: complex, y: complex) -> np.ndarray:
    """Unitary 2x2 G with G @ [x, y] = [r, 0]."""
    r = np.hypot(abs(x), abs(y))
    if r == 0.0:
        return np.eye(2, dtype=np.complex128)
    return np.array([[np.conj(x), np.conj(y)], [-y, x]], dtype=np.complex128) / r


def _shift(h: np.ndarray, hi: int, its: int, exceptional_every: int) -> complex:
    """Wilkinson shift from the trailing 2x2 block, or an exceptional shift."""
    if its % exceptional_every == 0:
        return h[hi, hi] + 0.75 * abs(h[hi, hi - 1])

    a, b = h[hi - 1, hi - 1], h[hi - 1, hi]
    c, d = h[hi, hi - 1], h[hi, hi]
    half_tr = 0.5 * (a + d)
    disc = np.sqrt(0.25 * (a - d) ** 2 + b * c)
    mu1 = half_tr + disc
    mu2 = half_tr - disc
    return mu1 if abs(mu1 - d) <= abs(mu2 - d) else mu2


def _qr_sweep(h: np.ndarray, z: np.ndarray, lo: int, hi: int, mu: complex) -> None:
    """One explicit shifted QR step on the active block h[lo:hi+1, lo:hi+1], in place."""
    idx = np.arange(lo, hi + 1)
    h[idx, idx] -= mu

    rotations = []
    for k in range(lo, hi):
        g = _givens(h[k, k], h[k + 1, k])
        h[k:k + 2, k:] = g @ h[k:k + 2, k:]
        rotations.append(g)

    for k, g in zip(range(lo, hi), rotations):
        gh = g.conj().T
        h[:hi + 1, k:k + 2] = h[:hi + 1, k:k + 2] @ gh
        z[:, k:k + 2] = z[:, k:k + 2] @ gh

    h[idx, idx] += mu


def schur(
    h: np.ndarray,
    z: np.ndarray,
    max_iter_per_eigenvalue: int = None,
    exceptional_shift_every: int = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Complex Schur form of an upper Hessenberg matrix by shifted QR iteration.

    Parameters
    ----------
    h : np.ndarray
        Upper Hessenberg matrix (n x n), complex. Overwritten with T.
    z : np.ndarray
        Accumulated unitary transform (n x n). Overwritten with z @ Z'.
    max_iter_per_eigenvalue : int, optional
        Sweep budget is this times n (default: cfg.qr.max_iter_per_eigenvalue)
    exceptional_shift_every : int, optional
        Use an ad hoc shift every k sweeps without deflation

    Returns
    -------
    tuple
        (T, Z) with T upper triangular and original = Z @ T @ Z^H

    Raises
    ------
    DecompositionError
        If the sweep budget runs out. code is the 1-based index of the last
        unconverged eigenvalue; eigenvalues after it have converged.
    """
    if max_iter_per_eigenvalue is None:
        max_iter_per_eigenvalue = cfg.qr.max_iter_per_eigenvalue
    if exceptional_shift_every is None:
        exceptional_shift_every = cfg.qr.exceptional_shift_every

    n = h.shape[0]
    max_total = max_iter_per_eigenvalue * max(n, 1)
    h_norm = max(np.sqrt(np.sum(np.abs(h) ** 2)), _TINY)
    small = _TINY * n / _EPS

    hi = n - 1
    its = 0
    total = 0

    while hi > 0:
        # Deflation: find the start of the unreduced block ending at hi
        lo = hi
        while lo > 0:
            scale = abs(h[lo - 1, lo - 1]) + abs(h[lo, lo])
            if scale == 0.0:
                scale = h_norm
            if abs(h[lo, lo - 1]) <= max(_EPS * scale, small):
                h[lo, lo - 1] = 0.0
                break
            lo -= 1

        if lo == hi:
            hi -= 1
            its = 0
            continue

        if total >= max_total:
            raise DecompositionError(
                f"QR iteration did not converge after {total} sweeps",
                code=hi + 1,
            )

        its += 1
        total += 1
        mu = _shift(h, hi, its, exceptional_shift_every)
        _qr_sweep(h, z, lo, hi, mu)

    return np.triu(h), z


def triangular_eigenvectors(t: np.ndarray) -> np.ndarray:
    """
    Eigenvectors of an upper triangular matrix by back substitution.

    Column k solves (T - t_kk I) y = 0 with y_k = 1 and y_i = 0 for i > k.
    Near-zero pivots are perturbed to eps * |t_kk| as in LAPACK ztrevc.
    """
    n = t.shape[0]
    y = np.zeros((n, n), dtype=np.complex128)
    small = _TINY * n / _EPS

    for k in range(n):
        lam = t[k, k]
        smin = max(_EPS * abs(lam), small)
        y[k, k] = 1.0
        for i in range(k - 1, -1, -1):
            d = t[i, i] - lam
            if abs(d) < smin:
                d = smin
            y[i, k] = -(t[i, i + 1:k + 1] @ y[i + 1:k + 1, k]) / d

    return y


def normalize_columns(v: np.ndarray) -> np.ndarray:
    """
    Scale each column to unit 2-norm and rotate it so its largest entry is real positive.

    The phase fix makes eigenvectors of real eigenvalues real up to
    rounding, so dropping the imaginary part later loses nothing for them.
    """
    norms = np.sqrt(np.sum(np.abs(v) ** 2, axis=0))
    norms[norms == 0.0] = 1.0
    v = v / norms

    n = v.shape[1]
    pivot = np.argmax(np.abs(v), axis=0)
    p = v[pivot, np.arange(n)]
    mag = np.abs(p)
    mag[mag == 0.0] = 1.0
    return v * (np.conj(p) / mag)


def eig(
    matrix: np.ndarray,
    max_iter_per_eigenvalue: int = None,
    exceptional_shift_every: int = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Eigenvalues and right eigenvectors of a general square matrix.

    Parameters
    ----------
    matrix : np.ndarray
        Square matrix (n x n)
    max_iter_per_eigenvalue : int, optional
        See schur()
    exceptional_shift_every : int, optional
        See schur()

    Returns
    -------
    tuple
        (eigenvalues, eigenvectors), both complex.
        eigenvalues: (n,) in the order they appear on the Schur diagonal
        eigenvectors: (n x n) unit-norm columns

    Notes
    -----
    Complex arithmetic throughout, so conjugate pairs of a real matrix are
    conjugate only up to rounding.
    """
    matrix = np.asarray(matrix)

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError("Matrix must be square")

    h, q = hessenberg(matrix)
    t, z = schur(h, q, max_iter_per_eigenvalue, exceptional_shift_every)
    y = triangular_eigenvectors(t)

    eigenvalues = np.diag(t).copy()
    eigenvectors = normalize_columns(z @ y)

    return eigenvalues, eigenvectors
