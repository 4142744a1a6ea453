"""
eigcompare Configuration

Centralized configuration for the comparison harness defaults.
Avoids hardcoded magic numbers scattered across modules.

Usage:
    from eigcompare.config import EIGCOMPARE_CONFIG as cfg

    # Access values
    if cond > cfg.conditioning.threshold:
        ...
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ConditioningConfig:
    """Configuration for random matrix generation."""

    # Regenerate prompt is offered above this condition number
    threshold: float = 1e6

    # Entries are drawn uniformly from [low, high]
    low: float = -1.0
    high: float = 1.0


@dataclass(frozen=True)
class QRConfig:
    """Configuration for the self-contained QR eigen-solver."""

    # Total sweep budget = max_iter_per_eigenvalue * n (LAPACK uses 30)
    max_iter_per_eigenvalue: int = 30

    # Ad hoc shift every k sweeps without deflation
    exceptional_shift_every: int = 10


@dataclass(frozen=True)
class ValidationConfig:
    """Configuration for reconstruction checks."""

    # V is treated as singular above this 2-norm condition number
    max_eigenvector_condition: float = 1.0 / np.finfo(np.float64).eps

    # |imag| above this counts as a complex eigenvalue
    complex_tol: float = 0.0


@dataclass(frozen=True)
class ReportConfig:
    """Configuration for comparison output."""

    output_path: str = "results.txt"

    # Format spec for every number written to the sinks
    float_format: str = "g"


@dataclass(frozen=True)
class EigCompareConfig:
    """Master configuration for the harness."""

    conditioning: ConditioningConfig = ConditioningConfig()
    qr: QRConfig = QRConfig()
    validation: ValidationConfig = ValidationConfig()
    report: ReportConfig = ReportConfig()


# Global singleton instance
EIGCOMPARE_CONFIG = EigCompareConfig()
