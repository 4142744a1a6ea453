"""
Comparison harness.

Sequence for one run, strictly in order on a single thread:

    generate (+ regeneration loop) -> native run -> library run
    -> reconstruction checks -> cross-backend comparison -> summary

Any backend failure aborts the run before the comparison is produced.
"""

import logging
from typing import Optional

import numpy as np

from eigcompare.backends.base import DecompositionBackend
from eigcompare.matrix.decomposition import as_square_matrix, relative_error
from eigcompare.matrix.generate import (
    ConditionedMatrix,
    RegenerateDecision,
    generate_conditioned,
)
from eigcompare.report import ComparisonResult, Reporter, compare

logger = logging.getLogger(__name__)


def never_regenerate(cond: float, attempt: int) -> bool:
    """Decision policy that always keeps the current matrix."""
    return False


class Harness:
    """
    Wires generator, backends, validator and reporter together.

    Parameters
    ----------
    native : DecompositionBackend
        Reference backend (LAPACK dgeev)
    library : DecompositionBackend
        Backend under comparison
    reporter : Reporter
        Output fan-out
    confirm : callable, optional
        Regeneration decision, confirm(cond, attempt) -> bool
        (default: never regenerate)
    rng : np.random.Generator, optional
        Source of randomness for matrix generation
    threshold : float, optional
        Condition number threshold for the regeneration prompt
    strict : bool
        Abort on a singular eigenvector matrix instead of reporting inf
    canonical_order : bool
        Sort eigenpairs before the cross-backend comparison
    """

    def __init__(
        self,
        native: DecompositionBackend,
        library: DecompositionBackend,
        reporter: Reporter,
        confirm: Optional[RegenerateDecision] = None,
        rng: Optional[np.random.Generator] = None,
        threshold: float = None,
        strict: bool = False,
        canonical_order: bool = False,
    ):
        self.native = native
        self.library = library
        self.reporter = reporter
        self.confirm = confirm or never_regenerate
        self.rng = rng if rng is not None else np.random.default_rng()
        self.threshold = threshold
        self.strict = strict
        self.canonical_order = canonical_order

    def generate(self, n: int) -> ConditionedMatrix:
        return generate_conditioned(
            n,
            self.confirm,
            rng=self.rng,
            threshold=self.threshold,
            observer=self.reporter.condition,
        )

    def run(self, n: int) -> ComparisonResult:
        """Generate an n x n matrix and compare both backends on it."""
        conditioned = self.generate(n)
        return self.run_matrix(conditioned.matrix)

    def run_matrix(self, matrix: np.ndarray) -> ComparisonResult:
        """
        Compare both backends on a given matrix.

        Raises
        ------
        ValueError
            If matrix is not a finite real square matrix.
        DecompositionError
            If either backend fails. Nothing after the failing step is reported.
        ReconstructionError
            In strict mode, if an eigenvector matrix cannot be inverted.
        """
        matrix = as_square_matrix(matrix)
        n = matrix.shape[0]

        native_run = self.native.run(matrix)
        if not native_run.ok:
            raise native_run.error
        self.reporter.duration(native_run)
        native_error = relative_error(matrix, native_run.decomposition, strict=self.strict)
        self.reporter.relative_error(native_run.label, native_error)

        library_run = self.library.run(matrix)
        if not library_run.ok:
            raise library_run.error
        self.reporter.duration(library_run)
        library_error = relative_error(matrix, library_run.decomposition, strict=self.strict)
        self.reporter.relative_error(library_run.label, library_error)

        result = compare(
            native_run,
            library_run,
            matrix,
            strict=self.strict,
            canonical_order=self.canonical_order,
            native_error=native_error,
            library_error=library_error,
        )
        logger.info(
            "n=%d: %s %.6fs, %s %.6fs", n,
            result.native.label, result.native.duration,
            result.library.label, result.library.duration,
        )

        self.reporter.summary(result, {"size": n})
        return result
