"""
Decomposition backend interface.

Every backend exposes decompose(matrix) -> EigenDecomposition and is
timed through run(), which folds solver failure into a BackendRun
instead of raising.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from eigcompare.errors import DecompositionError
from eigcompare.matrix.decomposition import EigenDecomposition, as_square_matrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendRun:
    """Outcome of one timed backend invocation."""

    label: str
    duration: float
    decomposition: Optional[EigenDecomposition] = None
    error: Optional[DecompositionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> EigenDecomposition:
        """Return the decomposition or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.decomposition


class DecompositionBackend(ABC):
    """Interchangeable eigen-solver for real square matrices."""

    label: str = "backend"

    @abstractmethod
    def _decompose(self, matrix: np.ndarray) -> EigenDecomposition:
        """Solve on a private copy of the input. May overwrite it."""

    def decompose(self, matrix: np.ndarray) -> EigenDecomposition:
        """
        Compute eigenvalues and eigenvectors of a square matrix.

        The caller's array is never modified.

        Raises
        ------
        ValueError
            If matrix is not a finite real square matrix.
        DecompositionError
            If the solver reports failure.
        """
        matrix = as_square_matrix(matrix)
        work = np.array(matrix, dtype=np.float64, order="F", copy=True)
        try:
            return self._decompose(work)
        except DecompositionError as e:
            if e.backend is None:
                e.backend = self.label
            raise

    def run(self, matrix: np.ndarray) -> BackendRun:
        """Time decompose() with a monotonic clock. Solver failure is returned, not raised."""
        matrix = as_square_matrix(matrix)

        t0 = time.perf_counter()
        try:
            result = self.decompose(matrix)
        except DecompositionError as e:
            duration = time.perf_counter() - t0
            logger.error("%s failed after %.6fs: %s", self.label, duration, e)
            return BackendRun(label=self.label, duration=duration, error=e)
        duration = time.perf_counter() - t0

        logger.debug("%s: n=%d in %.6fs", self.label, result.n, duration)
        return BackendRun(label=self.label, duration=duration, decomposition=result)

    def __repr__(self):
        return f"{type(self).__name__}(label={self.label!r})"
