"""
Library backend: general-purpose eigen-solver in two modes.

    use_native_internally=True   scipy.linalg.eig (LAPACK geev underneath)
    use_native_internally=False  eigcompare.backends.qr (pure numpy)

Both modes report real parts only. For a matrix with complex eigenvalues
this is a lossy projection: conjugate eigenvector pairs collapse onto the
same real vector and the reconstruction check degrades accordingly. The
imaginary parts of the eigenvalues are kept so the loss can be reported.
"""

import logging

import numpy as np
from scipy import linalg

from eigcompare.backends import qr
from eigcompare.backends.base import DecompositionBackend
from eigcompare.errors import DecompositionError
from eigcompare.matrix.decomposition import EigenDecomposition

logger = logging.getLogger(__name__)


def _clean_imag(w: np.ndarray) -> np.ndarray:
    """Imaginary parts with rounding noise (below n * eps * max|w|) set to zero."""
    imag = np.array(w.imag, dtype=np.float64)
    if imag.size == 0:
        return imag
    tol = imag.size * np.finfo(np.float64).eps * max(np.max(np.abs(w)), 1.0)
    imag[np.abs(imag) <= tol] = 0.0
    return imag


class LibraryBackend(DecompositionBackend):
    """
    Independent eigen-solver, LAPACK-backed or self-contained.

    Parameters
    ----------
    use_native_internally : bool
        If True, delegate to scipy.linalg.eig. If False, use the
        pure numpy QR iteration in eigcompare.backends.qr.
    """

    def __init__(self, use_native_internally: bool = True):
        self.use_native_internally = bool(use_native_internally)
        if self.use_native_internally:
            self.label = "SciPy Library (with LAPACK)"
        else:
            self.label = "NumPy QR Library (without LAPACK)"

    def _decompose(self, matrix: np.ndarray) -> EigenDecomposition:
        if self.use_native_internally:
            try:
                w, v = linalg.eig(matrix, overwrite_a=True, check_finite=False)
            except linalg.LinAlgError as e:
                raise DecompositionError(str(e), backend=self.label) from e
        else:
            w, v = qr.eig(matrix)

        w = np.asarray(w)
        v = np.asarray(v)
        imag = _clean_imag(w)
        n_complex = int(np.count_nonzero(imag))
        if n_complex:
            logger.info(
                "%s: %d complex eigenvalue(s) projected to real parts", self.label, n_complex
            )

        return EigenDecomposition(
            eigenvalues=w.real,
            eigenvectors=v.real,
            eigenvalues_imag=imag,
        )
