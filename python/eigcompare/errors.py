"""
Error types raised by the comparison harness.

Malformed matrices raise plain ValueError; everything here is a
terminal condition for a CLI run.
"""

from typing import Optional


class EigCompareError(Exception):
    """Base class for harness errors."""


class UsageError(EigCompareError):
    """Malformed command line or interactive input."""


class DecompositionError(EigCompareError):
    """
    An eigen-solver reported failure.

    Parameters
    ----------
    code : int, optional
        Status code from the solver. LAPACK convention: negative means an
        illegal argument, positive means the QR iteration failed to converge.
        None when the solver did not expose one.
    backend : str, optional
        Label of the backend that failed.
    """

    def __init__(self, message: str, code: Optional[int] = None,
                 backend: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.backend = backend

    def __str__(self):
        msg = super().__str__()
        if self.code is not None:
            msg = f"{msg} (status code {self.code})"
        if self.backend:
            msg = f"{self.backend}: {msg}"
        return msg


class ReconstructionError(EigCompareError):
    """Eigenvector matrix is singular or too ill-conditioned to invert."""
