"""
Comparative reporting.

compare() turns two backend runs into a ComparisonResult; Reporter
writes every line to all of its sinks (console and results file).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, IO, List, Optional

import numpy as np

from eigcompare.backends.base import BackendRun
from eigcompare.config import EIGCOMPARE_CONFIG as cfg
from eigcompare.matrix.decomposition import EigenDecomposition, relative_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendSummary:
    """Per-backend timing and accuracy."""

    label: str
    duration: float
    relative_error: float
    n_complex: int = 0


@dataclass(frozen=True)
class ComparisonResult:
    """Per-backend summaries plus cross-backend differences."""

    native: BackendSummary
    library: BackendSummary
    max_eigenvalue_diff: float
    max_eigenvector_diff: float
    canonical_order: bool = False

    @property
    def faster(self) -> BackendSummary:
        """Backend with the shorter duration (library on a tie)."""
        if self.native.duration < self.library.duration:
            return self.native
        return self.library

    @property
    def time_delta(self) -> float:
        return abs(self.library.duration - self.native.duration)


def max_abs_diff(a: np.ndarray, b: np.ndarray) -> float:
    """max |a - b| elementwise, assuming index-for-index alignment."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Shape mismatch: {a.shape} vs {b.shape}")
    if a.size == 0:
        return 0.0
    return float(np.max(np.abs(a - b)))


def compare(
    native_run: BackendRun,
    library_run: BackendRun,
    matrix: np.ndarray,
    strict: bool = False,
    canonical_order: bool = False,
    native_error: Optional[float] = None,
    library_error: Optional[float] = None,
) -> ComparisonResult:
    """
    Validate both decompositions and measure how far apart they are.

    Parameters
    ----------
    native_run, library_run : BackendRun
        Successful runs. A failed run raises its DecompositionError.
    matrix : np.ndarray
        Source matrix both backends decomposed
    strict : bool
        Propagate ReconstructionError instead of reporting inf
    canonical_order : bool
        If False, eigenpairs are compared in the order each backend
        returned them. General solvers do not guarantee a common order, so
        the differences are only meaningful when the orders happen to agree.
        If True, both sides are sorted by eigenvalue and sign-normalized first.
    native_error, library_error : float, optional
        Already computed reconstruction errors, to avoid recomputing them.

    Returns
    -------
    ComparisonResult
    """
    native = native_run.unwrap()
    library = library_run.unwrap()

    if native_error is None:
        native_error = relative_error(matrix, native, strict=strict)
    if library_error is None:
        library_error = relative_error(matrix, library, strict=strict)

    lhs: EigenDecomposition = native
    rhs: EigenDecomposition = library
    if canonical_order:
        lhs = native.canonical()
        rhs = library.canonical()

    return ComparisonResult(
        native=BackendSummary(
            label=native_run.label,
            duration=native_run.duration,
            relative_error=native_error,
            n_complex=native.n_complex,
        ),
        library=BackendSummary(
            label=library_run.label,
            duration=library_run.duration,
            relative_error=library_error,
            n_complex=library.n_complex,
        ),
        max_eigenvalue_diff=max_abs_diff(lhs.eigenvalues, rhs.eigenvalues),
        max_eigenvector_diff=max_abs_diff(lhs.eigenvectors, rhs.eigenvectors),
        canonical_order=canonical_order,
    )


class Reporter:
    """
    Fan-out writer: every line goes to every sink, unchanged.

    Parameters
    ----------
    *sinks : text streams
        Anything with write(); flush() is called when present.
    float_format : str, optional
        Format spec for numbers (default: cfg.report.float_format)
    """

    def __init__(self, *sinks: IO[str], float_format: str = None):
        self.sinks: List[IO[str]] = list(sinks)
        self.float_format = float_format or cfg.report.float_format

    def add_sink(self, sink: IO[str]) -> None:
        self.sinks.append(sink)

    def fmt(self, value: float) -> str:
        return format(value, self.float_format)

    def line(self, text: str = "") -> None:
        for sink in self.sinks:
            sink.write(text + "\n")
            flush = getattr(sink, "flush", None)
            if flush is not None:
                flush()

    # ── per-step lines ──────────────────────────────────────────────────

    def condition(self, cond: float, attempt: int = 0) -> None:
        if attempt == 0:
            self.line(f"Condition number of the matrix: {self.fmt(cond)}")
        else:
            self.line(f"Condition number of the new matrix: {self.fmt(cond)}")

    def duration(self, run: BackendRun) -> None:
        self.line(f"{run.label} duration: {self.fmt(run.duration)} seconds")

    def relative_error(self, label: str, error: float) -> None:
        self.line(f"{label} relative reconstruction error: {self.fmt(error)}")

    # ── final summary ───────────────────────────────────────────────────

    def summary(self, result: ComparisonResult, metadata: Dict[str, Any] = None) -> None:
        """
        Write the closing comparison block.

        metadata keys used: 'size' (matrix order), plus any extra keys,
        which are written as 'Key: value' lines after the matrix size.
        """
        metadata = dict(metadata or {})
        native, library = result.native, result.library

        self.line()
        self.line("Summary:")
        self.line(f"Chosen method: {library.label}")
        if "size" in metadata:
            self.line(f"Matrix size: {metadata.pop('size')}")
        for key, value in metadata.items():
            self.line(f"{key.replace('_', ' ').capitalize()}: {value}")

        self.line(f"{native.label} duration: {self.fmt(native.duration)} seconds")
        self.line(f"{library.label} duration: {self.fmt(library.duration)} seconds")

        order = "sorted" if result.canonical_order else "as returned"
        self.line(
            f"Maximum difference between {native.label} and {library.label} "
            f"eigenvalues ({order}): {self.fmt(result.max_eigenvalue_diff)}"
        )
        self.line(
            f"Maximum difference between {native.label} and {library.label} "
            f"eigenvectors ({order}): {self.fmt(result.max_eigenvector_diff)}"
        )

        self.relative_error(native.label, native.relative_error)
        self.relative_error(library.label, library.relative_error)

        n_complex = max(native.n_complex, library.n_complex)
        if n_complex:
            self.line(
                f"Note: {n_complex} complex eigenvalue(s); real parts only are "
                f"compared and used for reconstruction"
            )

        faster = result.faster
        self.line(f"{faster.label} was faster by {self.fmt(result.time_delta)} seconds")
