"""
Native backend: LAPACK dgeev called directly.

dgeev is reached through scipy.linalg.lapack, which exposes the raw
status code instead of raising.
"""

from typing import Callable, Optional

import numpy as np
from scipy.linalg import lapack

from eigcompare.backends.base import DecompositionBackend
from eigcompare.errors import DecompositionError
from eigcompare.matrix.decomposition import EigenDecomposition


class NativeBackend(DecompositionBackend):
    """
    General real eigen-solver via LAPACK dgeev (right eigenvectors only).

    Parameters
    ----------
    routine : callable, optional
        dgeev-compatible callable returning (wr, wi, vl, vr, info).
        Defaults to scipy.linalg.lapack.dgeev.

    Notes
    -----
    Eigenvalues are reported as their real parts (wr). The eigenvector
    matrix is passed through exactly as dgeev packs it: for a complex
    conjugate pair at j, j+1, column j holds the real part and column j+1
    the imaginary part of v_j. Reconstruction with diag(wr) is therefore
    only exact when every eigenvalue is real.
    """

    label = "Native LAPACK (dgeev)"

    def __init__(self, routine: Optional[Callable] = None):
        self.routine = routine if routine is not None else lapack.dgeev

    def _decompose(self, matrix: np.ndarray) -> EigenDecomposition:
        wr, wi, _vl, vr, info = self.routine(
            matrix, compute_vl=0, compute_vr=1, overwrite_a=1
        )

        if info != 0:
            if info < 0:
                reason = f"illegal value in argument {-info}"
            else:
                reason = "QR algorithm failed to converge"
            raise DecompositionError(
                f"dgeev failed: {reason}", code=int(info), backend=self.label
            )

        return EigenDecomposition(
            eigenvalues=np.array(wr, dtype=np.float64),
            eigenvectors=np.array(vr, dtype=np.float64),
            eigenvalues_imag=np.array(wi, dtype=np.float64),
        )
